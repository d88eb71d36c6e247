"""Storage domain models."""

from dataclasses import dataclass
from pathlib import Path

from ..core.config import FileConfig


@dataclass
class RipArtifacts:
    """Files produced in the scratch directory for one rip."""

    audio: Path
    chapters: Path
    global_tags: Path
    track_tags: Path

    @classmethod
    def in_directory(cls, directory: Path) -> "RipArtifacts":
        return cls(
            audio=directory / FileConfig.AUDIO_FILENAME,
            chapters=directory / FileConfig.CHAPTERS_FILENAME,
            global_tags=directory / FileConfig.GLOBAL_TAGS_FILENAME,
            track_tags=directory / FileConfig.TRACK_TAGS_FILENAME,
        )


@dataclass
class AudioStreamInfo:
    """Stream properties read back from the encoded file."""

    total_samples: int
    sample_rate: int
    channels: int
    bits_per_sample: int

    @property
    def duration_seconds(self) -> float:
        if not self.sample_rate:
            return 0.0
        return self.total_samples / self.sample_rate
