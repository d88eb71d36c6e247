"""Disc geometry reader built on ``cdparanoia --query``."""

import re
import subprocess
from typing import Iterable, List, Optional

from ..core.config import AudioConfig, ToolConfig
from ..core.exceptions import DeviceQueryError
from ..core.logging import get_logger

logger = get_logger(__name__)

# ordinal, frame count, length, start sector, start, copy flag, pre-emphasis, channels
TRACK_LINE_PATTERN = re.compile(
    r"^ {1,2}\d{1,2}\. +(\d+) \[\d\d:\d\d\.\d\d\] +\d+ \[\d\d:\d\d\.\d\d\] +\w+ + \w+ +\d+$"
)


def parse_query_output(lines: Iterable[str]) -> List[int]:
    """Extract per-track sample lengths from query output.

    Lines that do not look like a track record (banner, table header,
    TOTAL footer) are skipped.
    """
    sample_lengths = []

    for line in lines:
        match = TRACK_LINE_PATTERN.match(line.rstrip("\r\n"))
        if match:
            frames = int(match.group(1))
            sample_lengths.append(frames * AudioConfig.SAMPLES_PER_FRAME)

    return sample_lengths


class GeometryReader:
    """Reads the table of contents of an audio disc."""

    def __init__(self, cdparanoia: Optional[str] = None):
        """Initialize with an optional cdparanoia executable."""
        self.cdparanoia = cdparanoia or ToolConfig.CDPARANOIA

    def build_command(self, device: str) -> List[str]:
        return [self.cdparanoia, "--force-cdrom-device", device, "--query"]

    def read_track_lengths(self, device: str) -> List[int]:
        """Return the sample length of every track on the disc, in disc order."""
        command = self.build_command(device)
        logger.debug("Querying disc geometry: %s", " ".join(command))

        try:
            completed = subprocess.run(
                command,
                stdin=subprocess.DEVNULL,
                capture_output=True,
                text=True,
                errors="replace",
            )
        except OSError as e:
            raise DeviceQueryError(
                "Failed to start disc query", device=device, details=str(e)
            )

        # cdparanoia writes its report to stderr
        sample_lengths = parse_query_output(completed.stderr.splitlines())

        if completed.returncode != 0:
            raise DeviceQueryError(
                f"Disc query exited with status {completed.returncode}",
                device=device,
                details=_last_line(completed.stderr),
            )

        if not sample_lengths:
            raise DeviceQueryError(
                "No audio tracks found on disc",
                device=device,
                details=_last_line(completed.stderr),
            )

        logger.info(
            "Read %d track(s) from %s (%d samples)",
            len(sample_lengths),
            device,
            sum(sample_lengths),
        )
        return sample_lengths


def _last_line(text: str) -> Optional[str]:
    lines = [line.strip() for line in text.splitlines() if line.strip()]
    return lines[-1] if lines else None
