"""Custom exceptions for the cd2mka application."""

from typing import Optional

from .config import PipelineStage


class Cd2MkaError(Exception):
    """Base exception for all cd2mka errors."""

    def __init__(self, message: str, details: str = None):
        super().__init__(message)
        self.message = message
        self.details = details

    def __str__(self) -> str:
        if self.details:
            return f"{self.message}: {self.details}"
        return self.message


class DeviceQueryError(Cd2MkaError):
    """Raised when the disc geometry cannot be read."""

    def __init__(self, message: str, device: str = None, details: str = None):
        super().__init__(message, details)
        self.device = device


class PipelineError(Cd2MkaError):
    """Raised when one stage of the extract/encode pipeline exits unsuccessfully."""

    stage: Optional[PipelineStage] = None

    def __init__(self, message: str, returncode: int = None, details: str = None):
        super().__init__(message, details)
        self.returncode = returncode


class ExtractorFailed(PipelineError):
    """Raised when the extractor process exits non-zero."""

    stage = PipelineStage.EXTRACTOR


class EncoderFailed(PipelineError):
    """Raised when the encoder process exits non-zero."""

    stage = PipelineStage.ENCODER


class PumpError(Cd2MkaError):
    """Raised when copying bytes between pipeline stages fails.

    ``side`` is ``"source"`` when reading failed and ``"sink"`` when writing,
    flushing or closing the destination failed.
    """

    def __init__(
        self,
        message: str,
        pump: str = None,
        side: str = None,
        details: str = None,
    ):
        super().__init__(message, details)
        self.pump = pump
        self.side = side


class TrackCountMismatch(Cd2MkaError):
    """Raised when track names and disc tracks disagree in number."""

    def __init__(self, track_count: int, name_count: int):
        super().__init__(
            "Track count mismatch",
            f"disc has {track_count} track(s) but {name_count} name(s) were supplied",
        )
        self.track_count = track_count
        self.name_count = name_count


class MuxFailed(Cd2MkaError):
    """Raised when the Matroska mux tool exits non-zero."""

    def __init__(self, message: str, returncode: int = None, details: str = None):
        super().__init__(message, details)
        self.returncode = returncode


class FileOperationError(Cd2MkaError):
    """Raised when file operations fail."""

    def __init__(
        self,
        message: str,
        file_path: str = None,
        operation: str = None,
        details: str = None,
    ):
        super().__init__(message, details)
        self.file_path = file_path
        self.operation = operation


class MetadataError(Cd2MkaError):
    """Raised when album or track metadata cannot be collected."""
