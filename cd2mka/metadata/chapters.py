"""Chapter timeline generation and the OGM-style chapter file format."""

import re
from fractions import Fraction
from pathlib import Path
from typing import List

from .models import MICROSECONDS, ChapterEntry
from ..core.config import AudioConfig, FileConfig
from ..core.exceptions import TrackCountMismatch
from ..extraction.models import Disc

CHAPTER_TIME_PATTERN = re.compile(
    r"^CHAPTER(\d+)=(\d+):(\d{2}):(\d{2})\.(\d{6})$"
)
CHAPTER_NAME_PATTERN = re.compile(r"^CHAPTER(\d+)NAME=(.*)$")
LINE_BREAKS = re.compile(r"\r\n|\r|\n")


def build_chapter_timeline(
    track_lengths: List[int], track_names: List[str]
) -> List[ChapterEntry]:
    """Place one chapter at the first sample of every track."""
    if len(track_lengths) != len(track_names):
        raise TrackCountMismatch(len(track_lengths), len(track_names))

    chapters = []
    running_total = 0

    for index, (length, name) in enumerate(
        zip(track_lengths, track_names), AudioConfig.FIRST_TRACK
    ):
        chapters.append(ChapterEntry.from_sample_offset(index, running_total, name))
        running_total += length

    return chapters


def chapters_for_disc(disc: Disc) -> List[ChapterEntry]:
    return build_chapter_timeline(disc.sample_lengths, disc.track_names)


def format_chapters(chapters: List[ChapterEntry]) -> str:
    """Render chapters as ``CHAPTERxx=`` / ``CHAPTERxxNAME=`` line pairs."""
    lines = []
    for chapter in chapters:
        base = f"CHAPTER{chapter.index:02d}"
        name = LINE_BREAKS.sub(" ", chapter.name)
        lines.append(f"{base}={chapter.timestamp}")
        lines.append(f"{base}NAME={name}")
    return "\n".join(lines) + "\n" if lines else ""


def parse_chapters(text: str) -> List[ChapterEntry]:
    """Read chapters back from their text form."""
    starts = {}
    names = {}

    # Only CR and LF delimit lines; names may hold any other character
    for line in text.split("\n"):
        line = line.rstrip("\r")
        time_match = CHAPTER_TIME_PATTERN.match(line)
        if time_match:
            index, hours, minutes, seconds, fraction = map(int, time_match.groups())
            total = ((hours * 60 + minutes) * 60 + seconds) * MICROSECONDS + fraction
            starts[index] = Fraction(total, MICROSECONDS)
            continue

        name_match = CHAPTER_NAME_PATTERN.match(line)
        if name_match:
            names[int(name_match.group(1))] = name_match.group(2)
            continue

        if line.strip():
            raise ValueError(f"Malformed chapter line: {line!r}")

    return [
        ChapterEntry(index=index, start_seconds=starts[index], name=names.get(index, ""))
        for index in sorted(starts)
    ]


def write_chapter_file(chapters: List[ChapterEntry], output: Path) -> Path:
    output = Path(output)
    output.write_text(format_chapters(chapters), encoding=FileConfig.ENCODING)
    return output


def read_chapter_file(path: Path) -> List[ChapterEntry]:
    return parse_chapters(Path(path).read_text(encoding=FileConfig.ENCODING))
