"""Processing domain models."""

from dataclasses import dataclass
from pathlib import Path

from ..storage.models import RipArtifacts


@dataclass
class MuxJob:
    """Everything the Matroska mux needs for one output file."""

    audio: Path
    cover: Path
    chapters: Path
    global_tags: Path
    track_tags: Path
    title: str
    output: Path

    @classmethod
    def from_artifacts(
        cls, artifacts: RipArtifacts, cover: Path, title: str, output: Path
    ) -> "MuxJob":
        return cls(
            audio=artifacts.audio,
            cover=cover,
            chapters=artifacts.chapters,
            global_tags=artifacts.global_tags,
            track_tags=artifacts.track_tags,
            title=title,
            output=output,
        )
