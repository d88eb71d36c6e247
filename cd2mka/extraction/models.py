"""Extraction domain models."""

from dataclasses import dataclass, field
from fractions import Fraction
from pathlib import Path
from typing import List, Optional

from ..core.config import AudioConfig, PipelineStage
from ..core.exceptions import TrackCountMismatch


@dataclass
class Track:
    """Represents a single track of the disc."""

    index: int
    sample_length: int
    name: str = ""

    def __post_init__(self):
        """Validate track geometry."""
        if self.index < 1:
            raise ValueError("Track index must be 1 or greater")
        if self.sample_length < 0:
            raise ValueError("Sample length cannot be negative")

    @property
    def duration_seconds(self) -> Fraction:
        """Exact duration in seconds."""
        return Fraction(self.sample_length, AudioConfig.SAMPLE_RATE)

    @property
    def duration_str(self) -> str:
        """Human-readable duration string."""
        total_seconds = self.sample_length // AudioConfig.SAMPLE_RATE
        return f"{total_seconds // 60}:{total_seconds % 60:02d}"

    @property
    def label(self) -> str:
        """Zero-padded track label used in prompts."""
        return f"Track {self.index:02d}"


@dataclass
class Disc:
    """An audio disc and its tracks in disc order."""

    device: str
    tracks: List[Track] = field(default_factory=list)

    @classmethod
    def from_sample_lengths(cls, device: str, sample_lengths: List[int]) -> "Disc":
        """Build the track list once from geometry output."""
        tracks = [
            Track(index=i, sample_length=length)
            for i, length in enumerate(sample_lengths, AudioConfig.FIRST_TRACK)
        ]
        return cls(device=device, tracks=tracks)

    @property
    def sample_lengths(self) -> List[int]:
        return [track.sample_length for track in self.tracks]

    @property
    def track_names(self) -> List[str]:
        return [track.name for track in self.tracks]

    @property
    def total_samples(self) -> int:
        return sum(self.sample_lengths)

    @property
    def duration_str(self) -> str:
        """Human-readable total playing time."""
        total_seconds = self.total_samples // AudioConfig.SAMPLE_RATE
        return f"{total_seconds // 60}:{total_seconds % 60:02d}"

    def name_tracks(self, names: List[str]) -> None:
        """Assign one name per track, in disc order."""
        if len(names) != len(self.tracks):
            raise TrackCountMismatch(len(self.tracks), len(names))

        for track, name in zip(self.tracks, names):
            track.name = name


@dataclass
class PipelineResult:
    """Outcome of one extract/encode run."""

    success: bool
    failure_stage: Optional[PipelineStage] = None
    output_path: Optional[Path] = None
    bytes_written: int = 0

    @classmethod
    def failed(cls, error) -> "PipelineResult":
        """Result describing a pipeline error."""
        return cls(success=False, failure_stage=getattr(error, "stage", None))
