"""Sources of album text and track names."""

from typing import List, Optional, Protocol, Tuple

from .models import AlbumMetadata
from .services import DiscogsService
from ..extraction.models import Disc


class MetadataProvider(Protocol):
    """Given a disc, return the album fields and one name per track."""

    def collect(self, disc: Disc) -> Tuple[AlbumMetadata, List[str]]:
        ...


class InteractiveMetadataProvider:
    """Asks the user for album fields and track names on the console.

    ``prompts`` needs ``get_text_input(prompt)``; ``display``, when given,
    needs ``show_disc(disc)`` and is used to show the track table first.
    """

    ALBUM_PROMPTS = (
        ("artist", "Artist"),
        ("album", "Album"),
        ("year", "Year"),
        ("genre", "Genre"),
    )

    def __init__(self, prompts, display=None):
        self.prompts = prompts
        self.display = display

    def collect(self, disc: Disc) -> Tuple[AlbumMetadata, List[str]]:
        if self.display is not None:
            self.display.show_disc(disc)

        fields = {
            field: self.prompts.get_text_input(label)
            for field, label in self.ALBUM_PROMPTS
        }
        names = [self.prompts.get_text_input(track.label) for track in disc.tracks]

        return AlbumMetadata(**fields), names


class DiscogsMetadataProvider:
    """Takes album fields and track names from a Discogs release."""

    def __init__(self, release_id: int, service: Optional[DiscogsService] = None):
        self.release_id = release_id
        self.service = service or DiscogsService()

    def collect(self, disc: Disc) -> Tuple[AlbumMetadata, List[str]]:
        return self.service.get_release(self.release_id)
