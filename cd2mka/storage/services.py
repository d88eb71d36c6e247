"""File management for scratch space and rip artifacts."""

import shutil
import tempfile
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, Optional

from mutagen import MutagenError
from mutagen.flac import FLAC

from .models import AudioStreamInfo, RipArtifacts
from ..core.config import AudioConfig, FileConfig
from ..core.exceptions import FileOperationError
from ..core.logging import get_logger
from ..extraction.models import Disc
from ..metadata.chapters import chapters_for_disc, write_chapter_file
from ..metadata.models import AlbumMetadata
from ..metadata.tags import album_tag_sets, track_tag_sets_for_disc, write_tag_file

logger = get_logger(__name__)


@contextmanager
def scratch_directory(
    prefix: str = FileConfig.SCRATCH_PREFIX, parent: Optional[Path] = None
) -> Iterator[Path]:
    """Create a temporary directory and remove it recursively on exit."""
    path = Path(tempfile.mkdtemp(prefix=prefix, dir=parent))
    logger.debug("Created scratch directory %s", path)
    try:
        yield path
    finally:
        shutil.rmtree(path, ignore_errors=True)
        logger.debug("Removed scratch directory %s", path)


class FileManager:
    """Writes chapter and tag artifacts and inspects the encoded audio."""

    def __init__(self, artifacts: RipArtifacts):
        self.artifacts = artifacts

    def write_chapters(self, disc: Disc) -> Path:
        return self._write(
            "chapters",
            self.artifacts.chapters,
            lambda path: write_chapter_file(chapters_for_disc(disc), path),
        )

    def write_global_tags(self, album: AlbumMetadata) -> Path:
        return self._write(
            "global_tags",
            self.artifacts.global_tags,
            lambda path: write_tag_file(album_tag_sets(album), path),
        )

    def write_track_tags(self, disc: Disc) -> Path:
        return self._write(
            "track_tags",
            self.artifacts.track_tags,
            lambda path: write_tag_file(track_tag_sets_for_disc(disc), path),
        )

    def write_all(self, disc: Disc, album: AlbumMetadata) -> RipArtifacts:
        """Write every metadata artifact derived from the same track list."""
        self.write_chapters(disc)
        self.write_global_tags(album)
        self.write_track_tags(disc)
        return self.artifacts

    def read_audio_info(self, audio_file: Optional[Path] = None) -> AudioStreamInfo:
        """Read FLAC stream info from the encoded audio."""
        audio_file = audio_file or self.artifacts.audio
        try:
            info = FLAC(str(audio_file)).info
        except (MutagenError, OSError) as e:
            raise FileOperationError(
                "Encoded audio is not a readable FLAC stream",
                file_path=str(audio_file),
                operation="verify",
                details=str(e),
            )

        return AudioStreamInfo(
            total_samples=info.total_samples,
            sample_rate=info.sample_rate,
            channels=info.channels,
            bits_per_sample=info.bits_per_sample,
        )

    def verify_audio(self, disc: Disc, audio_file: Optional[Path] = None) -> bool:
        """Check the encoded stream format and sample count against the disc."""
        info = self.read_audio_info(audio_file)

        stream_format = (info.sample_rate, info.channels, info.bits_per_sample)
        cdda_format = (
            AudioConfig.SAMPLE_RATE,
            AudioConfig.CHANNELS,
            AudioConfig.BIT_DEPTH,
        )
        if stream_format != cdda_format:
            logger.warning(
                "Encoded audio is %d Hz, %d channel(s), %d bit; expected CDDA "
                "%d Hz, %d channel(s), %d bit",
                *stream_format,
                *cdda_format,
            )
            return False

        if info.total_samples != disc.total_samples:
            logger.warning(
                "Encoded audio has %d samples but the disc geometry sums to %d; "
                "chapter points may be offset",
                info.total_samples,
                disc.total_samples,
            )
            return False

        logger.info("Encoded audio matches disc geometry (%d samples)", info.total_samples)
        return True

    def _write(self, operation: str, path: Path, writer) -> Path:
        try:
            writer(path)
        except OSError as e:
            raise FileOperationError(
                f"Failed to write {path.name}",
                file_path=str(path),
                operation=operation,
                details=str(e),
            )
        logger.debug("Wrote %s", path)
        return path
