"""Configuration constants and settings for cd2mka."""

import os
from enum import Enum


class AudioConfig:
    """CDDA audio constants."""

    SAMPLE_RATE = 44100
    CHANNELS = 2
    BIT_DEPTH = 16

    # One CDDA frame (sector) holds 588 stereo samples
    SAMPLES_PER_FRAME = 588

    FIRST_TRACK = 1


class ToolConfig:
    """External tool executables, overridable through the environment."""

    CDPARANOIA = os.getenv("CD2MKA_CDPARANOIA", "cdparanoia")
    FLAC = os.getenv("CD2MKA_FLAC", "flac")
    MKVMERGE = os.getenv("CD2MKA_MKVMERGE", "mkvmerge")


class PipelineStage(Enum):
    """External processes of the extract/encode pipeline."""

    EXTRACTOR = "extractor"
    ENCODER = "encoder"

    @property
    def log_filename(self) -> str:
        """Name of the stderr capture file for this stage."""
        return f"{self.value}.log"


class PumpConfig:
    """Stream pump buffering."""

    BUFFER_SIZE = 1024 * 1024
    MAX_WORKERS = 2

    # Lines of a failed tool's stderr attached to the error
    LOG_TAIL_LINES = 5


class FileConfig:
    """Artifact names inside the scratch directory."""

    SCRATCH_PREFIX = "cd2mka-"
    AUDIO_FILENAME = "audio.flac"
    CHAPTERS_FILENAME = "chapters.txt"
    GLOBAL_TAGS_FILENAME = "global-tags.xml"
    TRACK_TAGS_FILENAME = "track-tags.xml"
    ENCODING = "utf-8"

    COVER_ATTACHMENT_NAME = "Cover"
    COVER_MIME_TYPE = "image/jpeg"


class LogConfig:
    """Logging defaults."""

    LEVEL = os.getenv("CD2MKA_LOG_LEVEL", "WARNING")
    VERBOSE_LEVEL = "DEBUG"
    FORMAT = "%(message)s"
    DATE_FORMAT = "[%X]"


class AppInfo:
    """Application metadata."""

    NAME = "cd2mka"
    VERSION = "1.0.0"
    DESCRIPTION = "Rip an audio CD into a single tagged, chaptered Matroska audio file"
    USER_AGENT = f"{NAME}/{VERSION}"
