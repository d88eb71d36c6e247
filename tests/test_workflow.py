"""Tests for the end-to-end rip workflow."""

from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest

from cd2mka.core.exceptions import ExtractorFailed, MuxFailed, TrackCountMismatch
from cd2mka.extraction.models import PipelineResult
from cd2mka.metadata.chapters import read_chapter_file
from cd2mka.metadata.models import AlbumMetadata
from cd2mka.metadata.tags import read_tag_file
from cd2mka.processing.services import RipWorkflow

TRACK_LENGTHS = [132300, 176400, 588]


@pytest.fixture
def geometry_reader():
    reader = MagicMock()
    reader.read_track_lengths.return_value = list(TRACK_LENGTHS)
    return reader


@pytest.fixture
def provider():
    provider = MagicMock()
    provider.collect.return_value = (
        AlbumMetadata(artist="Artist", album="Album", year="2010", genre="Pop"),
        ["One", "Two", "Three"],
    )
    return provider


@pytest.fixture
def ripper():
    def rip(device, output_path):
        Path(output_path).write_bytes(b"fLaC")
        return PipelineResult(success=True, output_path=output_path, bytes_written=4)

    ripper = MagicMock()
    ripper.rip.side_effect = rip
    return ripper


@pytest.fixture
def flac_info():
    info = MagicMock(
        total_samples=sum(TRACK_LENGTHS),
        sample_rate=44100,
        channels=2,
        bits_per_sample=16,
    )
    with patch("cd2mka.storage.services.FLAC") as mock_flac:
        mock_flac.return_value = MagicMock(info=info)
        yield mock_flac


def make_workflow(tmp_path, provider, geometry_reader, ripper, muxer):
    return RipWorkflow(
        provider,
        geometry_reader=geometry_reader,
        ripper=ripper,
        muxer=muxer,
        scratch_parent=tmp_path,
    )


class TestRipWorkflow:
    def test_artifacts_reach_muxer(
        self, tmp_path, provider, geometry_reader, ripper, flac_info
    ):
        seen = {}

        def mux(job):
            seen["job"] = job
            seen["chapters"] = read_chapter_file(job.chapters)
            seen["track_tags"] = read_tag_file(job.track_tags)
            seen["global_tags"] = read_tag_file(job.global_tags)
            seen["audio"] = job.audio.read_bytes()

        muxer = MagicMock()
        muxer.mux.side_effect = mux
        workflow = make_workflow(tmp_path, provider, geometry_reader, ripper, muxer)

        disc = workflow.run("/dev/sr0", Path("cover.jpg"), tmp_path / "out.mka")

        assert disc.track_names == ["One", "Two", "Three"]
        ripper.rip.assert_called_once()
        assert ripper.rip.call_args.args[0] == "/dev/sr0"

        job = seen["job"]
        assert job.title == "Artist: Album"
        assert job.cover == Path("cover.jpg")
        assert job.output == tmp_path / "out.mka"
        assert seen["audio"] == b"fLaC"

        assert [c.timestamp for c in seen["chapters"]] == [
            "00:00:00.000000",
            "00:00:03.000000",
            "00:00:07.000000",
        ]
        assert [c.name for c in seen["chapters"]] == ["One", "Two", "Three"]
        assert [dict(t)["SAMPLES"] for t in seen["track_tags"]] == [
            str(n) for n in TRACK_LENGTHS
        ]
        assert dict(seen["global_tags"][0])["ARTIST"] == "Artist"

    def test_title_override(
        self, tmp_path, provider, geometry_reader, ripper, flac_info
    ):
        muxer = MagicMock()
        workflow = make_workflow(tmp_path, provider, geometry_reader, ripper, muxer)

        workflow.run("/dev/sr0", Path("c.jpg"), tmp_path / "o.mka", title="Custom")

        assert muxer.mux.call_args.args[0].title == "Custom"

    def test_scratch_removed(
        self, tmp_path, provider, geometry_reader, ripper, flac_info
    ):
        workflow = make_workflow(
            tmp_path, provider, geometry_reader, ripper, MagicMock()
        )

        workflow.run("/dev/sr0", Path("c.jpg"), tmp_path / "o.mka")

        assert list(tmp_path.glob("cd2mka-*")) == []

    def test_name_count_mismatch(
        self, tmp_path, provider, geometry_reader, ripper, flac_info
    ):
        provider.collect.return_value = (
            AlbumMetadata(artist="A", album="B"),
            ["Only", "Two"],
        )
        muxer = MagicMock()
        workflow = make_workflow(tmp_path, provider, geometry_reader, ripper, muxer)

        with pytest.raises(TrackCountMismatch):
            workflow.run("/dev/sr0", Path("c.jpg"), tmp_path / "o.mka")

        muxer.mux.assert_not_called()
        assert list(tmp_path.glob("cd2mka-*")) == []

    def test_rip_failure_skips_mux(
        self, tmp_path, provider, geometry_reader, flac_info
    ):
        ripper = MagicMock()
        ripper.rip.side_effect = ExtractorFailed(
            "Extractor exited with status 3", returncode=3
        )
        muxer = MagicMock()
        workflow = make_workflow(tmp_path, provider, geometry_reader, ripper, muxer)

        with pytest.raises(ExtractorFailed):
            workflow.run("/dev/sr0", Path("c.jpg"), tmp_path / "o.mka")

        muxer.mux.assert_not_called()
        assert list(tmp_path.glob("cd2mka-*")) == []

    def test_mux_failure_propagates(
        self, tmp_path, provider, geometry_reader, ripper, flac_info
    ):
        muxer = MagicMock()
        muxer.mux.side_effect = MuxFailed("mkvmerge exited with status 2", returncode=2)
        workflow = make_workflow(tmp_path, provider, geometry_reader, ripper, muxer)

        with pytest.raises(MuxFailed):
            workflow.run("/dev/sr0", Path("c.jpg"), tmp_path / "o.mka")

        assert list(tmp_path.glob("cd2mka-*")) == []

    def test_status_messages(
        self, tmp_path, provider, geometry_reader, ripper, flac_info
    ):
        messages = []
        status = MagicMock(side_effect=lambda message: messages.append(message) or MagicMock())
        workflow = RipWorkflow(
            provider,
            geometry_reader=geometry_reader,
            ripper=ripper,
            muxer=MagicMock(),
            status=status,
            scratch_parent=tmp_path,
        )

        workflow.run("/dev/sr0", Path("c.jpg"), tmp_path / "o.mka")

        assert messages == [
            "Reading disc geometry...",
            "Still ripping...",
            "Muxing to Matroska...",
        ]
