"""Matroska XML tag documents for the album and its tracks."""

import re
import xml.etree.ElementTree as ET
from pathlib import Path
from typing import Iterable, List, Tuple, Union

from .models import AlbumMetadata, TagSet, TrackTagSet
from ..core.config import FileConfig
from ..core.exceptions import MetadataError, TrackCountMismatch
from ..extraction.models import Disc, Track

XML_HEADER = (
    '<?xml version="1.0" encoding="UTF-8"?>\n'
    '<!DOCTYPE Tags SYSTEM "matroskatags.dtd">\n'
)

# Characters XML 1.0 has no way to represent, not even as a reference
XML_ILLEGAL_CHARACTERS = re.compile(
    r"[\x00-\x08\x0b\x0c\x0e-\x1f\ud800-\udfff\ufffe\uffff]"
)


def album_tag_sets(album: AlbumMetadata) -> List[TagSet]:
    return [TagSet.from_album(album)]


def track_tag_sets(track_lengths: List[int], track_names: List[str]) -> List[TrackTagSet]:
    """One tag set per track, in disc order."""
    if len(track_lengths) != len(track_names):
        raise TrackCountMismatch(len(track_lengths), len(track_names))

    return [
        TrackTagSet.from_track(Track(index=index, sample_length=length, name=name))
        for index, (length, name) in enumerate(zip(track_lengths, track_names), 1)
    ]


def track_tag_sets_for_disc(disc: Disc) -> List[TrackTagSet]:
    return track_tag_sets(disc.sample_lengths, disc.track_names)


def serialize_tags(tag_sets: Iterable[Union[TagSet, TrackTagSet]]) -> bytes:
    """Render tag sets as one ``<Tags>`` document, one ``<Tag>`` per set.

    Values are written verbatim; ElementTree escapes markup characters.
    Carriage returns are written as character references so parsers do not
    normalize them to line feeds.

    Raises:
        MetadataError: A value holds a character XML cannot represent.
    """
    root = ET.Element("Tags")

    for tag_set in tag_sets:
        tag = ET.SubElement(root, "Tag")
        for name, value in tag_set.simple_tags():
            illegal = XML_ILLEGAL_CHARACTERS.search(value)
            if illegal:
                raise MetadataError(
                    f"Tag {name} cannot be stored in a Matroska tag document",
                    details=f"{value!r} contains {illegal.group()!r}",
                )
            simple = ET.SubElement(tag, "Simple")
            ET.SubElement(simple, "Name").text = name
            ET.SubElement(simple, "String").text = value

    ET.indent(root)
    # Indentation only uses "\n", so every "\r" comes from a value
    body = ET.tostring(root, encoding="unicode").replace("\r", "&#13;")
    return (XML_HEADER + body + "\n").encode(FileConfig.ENCODING)


def parse_tags(document: Union[bytes, str]) -> List[List[Tuple[str, str]]]:
    """Read the ordered name/value pairs of every ``<Tag>`` in a document."""
    if isinstance(document, str):
        document = document.encode(FileConfig.ENCODING)

    try:
        root = ET.fromstring(document)
    except ET.ParseError as e:
        raise ValueError(f"Malformed tag document: {e}") from e

    if root.tag != "Tags":
        raise ValueError(f"Unexpected root element: {root.tag}")

    tags = []
    for tag in root.findall("Tag"):
        pairs = []
        for simple in tag.findall("Simple"):
            pairs.append(
                (simple.findtext("Name", default=""), simple.findtext("String", default=""))
            )
        tags.append(pairs)

    return tags


def write_tag_file(tag_sets: Iterable[Union[TagSet, TrackTagSet]], output: Path) -> Path:
    output = Path(output)
    output.write_bytes(serialize_tags(tag_sets))
    return output


def read_tag_file(path: Path) -> List[List[Tuple[str, str]]]:
    return parse_tags(Path(path).read_bytes())
