"""Metadata domain models."""

from dataclasses import dataclass
from fractions import Fraction
from typing import List, Tuple

from ..core.config import AudioConfig
from ..extraction.models import Track

MICROSECONDS = 1_000_000


@dataclass
class AlbumMetadata:
    """Album-level text supplied by a metadata provider, kept verbatim."""

    artist: str
    album: str
    year: str = ""
    genre: str = ""

    @property
    def title(self) -> str:
        """Container title."""
        return f"{self.artist}: {self.album}"


@dataclass
class ChapterEntry:
    """A named chapter marker at an exact offset into the disc."""

    index: int
    start_seconds: Fraction
    name: str

    @classmethod
    def from_sample_offset(cls, index: int, offset: int, name: str) -> "ChapterEntry":
        return cls(
            index=index,
            start_seconds=Fraction(offset, AudioConfig.SAMPLE_RATE),
            name=name,
        )

    @property
    def start_microseconds(self) -> int:
        """Start offset truncated to whole microseconds."""
        return int(self.start_seconds * MICROSECONDS)

    @property
    def timestamp(self) -> str:
        """Start offset as ``HH:MM:SS.ffffff``."""
        total_seconds, fraction = divmod(self.start_microseconds, MICROSECONDS)
        minutes, seconds = divmod(total_seconds, 60)
        hours, minutes = divmod(minutes, 60)
        return f"{hours:02d}:{minutes:02d}:{seconds:02d}.{fraction:06d}"


@dataclass
class TagSet:
    """Album-level Matroska tags."""

    title: str
    artist: str
    date_recorded: str
    genre: str

    @classmethod
    def from_album(cls, album: AlbumMetadata) -> "TagSet":
        return cls(
            title=album.album,
            artist=album.artist,
            date_recorded=album.year,
            genre=album.genre,
        )

    def simple_tags(self) -> List[Tuple[str, str]]:
        """Ordered tag name/value pairs."""
        return [
            ("TITLE", self.title),
            ("ARTIST", self.artist),
            ("DATE_RECORDED", self.date_recorded),
            ("GENRE", self.genre),
        ]


@dataclass
class TrackTagSet:
    """Per-track Matroska tags."""

    title: str
    part_number: int
    samples: int

    @classmethod
    def from_track(cls, track: Track) -> "TrackTagSet":
        return cls(
            title=track.name,
            part_number=track.index,
            samples=track.sample_length,
        )

    def simple_tags(self) -> List[Tuple[str, str]]:
        """Ordered tag name/value pairs."""
        return [
            ("TITLE", self.title),
            ("PART_NUMBER", str(self.part_number)),
            ("SAMPLES", str(self.samples)),
        ]
