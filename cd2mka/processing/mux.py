"""Matroska muxing through mkvmerge."""

import subprocess
from typing import List, Optional

from .models import MuxJob
from ..core.config import FileConfig, ToolConfig
from ..core.exceptions import MuxFailed
from ..core.logging import get_logger

logger = get_logger(__name__)


class MatroskaMuxer:
    """Combines audio, chapters, tags and cover art into one .mka file."""

    def __init__(self, mkvmerge: Optional[str] = None):
        self.mkvmerge = mkvmerge or ToolConfig.MKVMERGE

    def build_command(self, job: MuxJob) -> List[str]:
        return [
            self.mkvmerge,
            "--disable-track-statistics-tags",
            "--output",
            str(job.output),
            "--title",
            job.title,
            "--chapters",
            str(job.chapters),
            "--global-tags",
            str(job.global_tags),
            "--attachment-name",
            FileConfig.COVER_ATTACHMENT_NAME,
            "--attachment-mime-type",
            FileConfig.COVER_MIME_TYPE,
            "--attach-file",
            str(job.cover),
            # Track tags apply to track 0 of the following input file
            "--tags",
            f"0:{job.track_tags}",
            str(job.audio),
        ]

    def mux(self, job: MuxJob) -> None:
        command = self.build_command(job)
        logger.debug("Muxing: %s", " ".join(command))

        try:
            completed = subprocess.run(
                command,
                stdin=subprocess.DEVNULL,
                capture_output=True,
                text=True,
                errors="replace",
            )
        except OSError as e:
            raise MuxFailed("Failed to start mkvmerge", details=str(e))

        if completed.returncode != 0:
            # mkvmerge reports errors on stdout
            output = (completed.stdout or "") + (completed.stderr or "")
            lines = [line.strip() for line in output.splitlines() if line.strip()]
            raise MuxFailed(
                f"mkvmerge exited with status {completed.returncode}",
                returncode=completed.returncode,
                details=lines[-1] if lines else None,
            )

        logger.info("Muxed %s", job.output)
