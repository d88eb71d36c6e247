"""Tests for Matroska XML tag documents."""

import xml.etree.ElementTree as ET

import pytest

from cd2mka.core.exceptions import MetadataError, TrackCountMismatch
from cd2mka.extraction.models import Disc
from cd2mka.metadata.models import AlbumMetadata
from cd2mka.metadata.tags import (
    album_tag_sets,
    parse_tags,
    read_tag_file,
    serialize_tags,
    track_tag_sets,
    track_tag_sets_for_disc,
    write_tag_file,
)


@pytest.fixture
def album():
    return AlbumMetadata(
        artist="Simon & Garfunkel",
        album="Bookends <Remastered>",
        year="1968",
        genre="Folk \"Rock\"",
    )


class TestAlbumTags:
    """Test the global tag document."""

    def test_four_fields_in_order(self, album):
        tags = parse_tags(serialize_tags(album_tag_sets(album)))

        assert tags == [
            [
                ("TITLE", "Bookends <Remastered>"),
                ("ARTIST", "Simon & Garfunkel"),
                ("DATE_RECORDED", "1968"),
                ("GENRE", 'Folk "Rock"'),
            ]
        ]

    def test_markup_is_escaped(self, album):
        document = serialize_tags(album_tag_sets(album)).decode("utf-8")

        assert "Simon &amp; Garfunkel" in document
        assert "Bookends &lt;Remastered&gt;" in document

    def test_document_shape(self, album):
        document = serialize_tags(album_tag_sets(album))

        assert document.startswith(b'<?xml version="1.0" encoding="UTF-8"?>')
        assert b"<!DOCTYPE Tags" in document

        root = ET.fromstring(document)
        assert root.tag == "Tags"
        assert [child.tag for child in root] == ["Tag"]
        assert len(root.find("Tag").findall("Simple")) == 4

    def test_empty_values_kept(self):
        blank = AlbumMetadata(artist="A", album="B")

        tags = parse_tags(serialize_tags(album_tag_sets(blank)))

        assert tags[0][2] == ("DATE_RECORDED", "")
        assert tags[0][3] == ("GENRE", "")


class TestTrackTags:
    """Test the per-track tag document."""

    def test_one_tag_per_track(self):
        tag_sets = track_tag_sets([132300, 176400], ["First", "Second"])

        tags = parse_tags(serialize_tags(tag_sets))

        assert tags == [
            [("TITLE", "First"), ("PART_NUMBER", "1"), ("SAMPLES", "132300")],
            [("TITLE", "Second"), ("PART_NUMBER", "2"), ("SAMPLES", "176400")],
        ]

    def test_round_trip_reserved_characters(self):
        names = [
            "<b>bold</b>",
            "R&B",
            "it's \"quoted\"",
            "]]> end",
            "  padded  ",
            "cr\ronly",
            "crlf\r\nline",
            "tab\tand\nnewline",
        ]
        lengths = [588 * (i + 1) for i in range(len(names))]

        tags = parse_tags(serialize_tags(track_tag_sets(lengths, names)))

        assert [dict(tag)["TITLE"] for tag in tags] == names
        assert [int(dict(tag)["SAMPLES"]) for tag in tags] == lengths
        assert [int(dict(tag)["PART_NUMBER"]) for tag in tags] == list(
            range(1, len(names) + 1)
        )

    @pytest.mark.parametrize("name", ["ctrl\x01x", "nul\x00", "bell\x07", "\ufffe"])
    def test_unrepresentable_characters(self, name):
        with pytest.raises(MetadataError) as exc_info:
            serialize_tags(track_tag_sets([588], [name]))

        assert "TITLE" in str(exc_info.value)

    def test_count_mismatch(self):
        with pytest.raises(TrackCountMismatch):
            track_tag_sets([1, 2, 3], ["a", "b"])

    def test_from_disc(self):
        disc = Disc.from_sample_lengths("/dev/sr0", [100, 200])
        disc.name_tracks(["x", "y"])

        tag_sets = track_tag_sets_for_disc(disc)

        assert [(t.title, t.part_number, t.samples) for t in tag_sets] == [
            ("x", 1, 100),
            ("y", 2, 200),
        ]

    def test_file_round_trip(self, tmp_path):
        path = write_tag_file(track_tag_sets([44100], ["Ça va"]), tmp_path / "t.xml")

        assert read_tag_file(path) == [
            [("TITLE", "Ça va"), ("PART_NUMBER", "1"), ("SAMPLES", "44100")]
        ]


class TestParseTags:
    def test_malformed(self):
        with pytest.raises(ValueError):
            parse_tags(b"<Tags><Tag>")

    def test_wrong_root(self):
        with pytest.raises(ValueError):
            parse_tags("<Chapters/>")
