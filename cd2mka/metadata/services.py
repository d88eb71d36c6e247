"""Discogs API service for fetching release metadata."""

import os
import re
from typing import List, Optional, Tuple

import discogs_client

from .models import AlbumMetadata
from ..core.config import AppInfo
from ..core.exceptions import MetadataError
from ..core.logging import get_logger

logger = get_logger(__name__)

# Discogs disambiguates artists sharing a name with a numeric suffix, e.g. "Nirvana (2)"
ARTIST_SUFFIX_PATTERN = re.compile(r"\s+\(\d+\)$")


class DiscogsServiceError(MetadataError):
    """Error with Discogs API operations."""

    pass


class DiscogsService:
    """Service for reading release metadata from the Discogs API."""

    def __init__(self, api_token: Optional[str] = None, client=None):
        """Initialize with optional API token or a ready client."""
        if client is not None:
            self.client = client
            return

        self.api_token = api_token or os.getenv("DISCOGS_API_TOKEN")
        if not self.api_token:
            raise DiscogsServiceError("DISCOGS_API_TOKEN environment variable required")

        self.client = discogs_client.Client(AppInfo.USER_AGENT, user_token=self.api_token)

    def get_release(self, release_id: int) -> Tuple[AlbumMetadata, List[str]]:
        """Get album metadata and track titles for a release ID."""
        try:
            release = self.client.release(release_id)
            metadata = self._parse_release_to_metadata(release)
            titles = self._parse_release_to_titles(release)
        except DiscogsServiceError:
            raise
        except Exception as e:
            raise DiscogsServiceError(f"Failed to get release {release_id}", details=str(e))

        logger.info(
            "Fetched Discogs release %s: %s (%d tracks)",
            release_id,
            metadata.title,
            len(titles),
        )
        return metadata, titles

    def _parse_release_to_metadata(self, release) -> AlbumMetadata:
        """Convert discogs_client Release to AlbumMetadata."""
        artist = (
            ARTIST_SUFFIX_PATTERN.sub("", release.artists[0].name)
            if release.artists
            else "Unknown"
        )
        year = getattr(release, "year", None)
        genres = getattr(release, "genres", None)

        return AlbumMetadata(
            artist=artist,
            album=release.title,
            year=str(year) if year else "",
            genre=genres[0] if genres else "",
        )

    def _parse_release_to_titles(self, release) -> List[str]:
        """Track titles, skipping index tracks and headings."""
        titles = []

        for track_item in release.tracklist:
            track_data = track_item.data
            if track_data.get("type_") == "track":
                titles.append(track_data.get("title", f"Track {len(titles) + 1:02d}"))

        return titles
