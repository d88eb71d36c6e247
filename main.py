#!/usr/bin/env python3
"""
cd2mka - Rip an audio CD into a single Matroska audio file.

Extracts the whole disc with cdparanoia, encodes it to one verified FLAC stream,
and muxes it with mkvmerge together with cover art, album and track tags, and
sample-accurate chapter points for every track.
"""

from cd2mka.interface.cli import app

if __name__ == "__main__":
    app()
