"""End-to-end rip: disc geometry, background extraction, metadata, mux."""

from concurrent.futures import Future, ThreadPoolExecutor
from contextlib import nullcontext
from pathlib import Path
from typing import Callable, ContextManager, Optional

from .models import MuxJob
from .mux import MatroskaMuxer
from ..core.exceptions import PipelineError
from ..core.logging import get_logger
from ..extraction.geometry import GeometryReader
from ..extraction.models import Disc, PipelineResult
from ..extraction.services import DiscRipper
from ..metadata.providers import MetadataProvider
from ..storage.models import RipArtifacts
from ..storage.services import FileManager, scratch_directory

logger = get_logger(__name__)

StatusFactory = Callable[[str], ContextManager]


class RipWorkflow:
    """Rips a disc into a tagged, chaptered Matroska audio file.

    The whole-disc rip runs on a background thread while the metadata
    provider collects album and track text; muxing waits for both.
    """

    def __init__(
        self,
        provider: MetadataProvider,
        geometry_reader: Optional[GeometryReader] = None,
        ripper: Optional[DiscRipper] = None,
        muxer: Optional[MatroskaMuxer] = None,
        status: Optional[StatusFactory] = None,
        scratch_parent: Optional[Path] = None,
    ):
        self.provider = provider
        self.geometry_reader = geometry_reader or GeometryReader()
        self.ripper = ripper or DiscRipper()
        self.muxer = muxer or MatroskaMuxer()
        self.status = status or (lambda message: nullcontext())
        self.scratch_parent = scratch_parent

    def read_disc(self, device: str) -> Disc:
        return Disc.from_sample_lengths(
            device, self.geometry_reader.read_track_lengths(device)
        )

    def run(
        self,
        device: str,
        cover: Path,
        output: Path,
        title: Optional[str] = None,
    ) -> Disc:
        """Rip ``device`` into ``output`` and return the named disc."""
        with scratch_directory(parent=self.scratch_parent) as scratch:
            artifacts = RipArtifacts.in_directory(scratch)
            files = FileManager(artifacts)

            with self.status("Reading disc geometry..."):
                disc = self.read_disc(device)

            with ThreadPoolExecutor(
                max_workers=1, thread_name_prefix="cd2mka-rip"
            ) as executor:
                logger.info("Starting background rip of %s", device)
                rip = executor.submit(self.ripper.rip, device, artifacts.audio)

                album, names = self.provider.collect(disc)
                disc.name_tracks(names)
                files.write_all(disc, album)

                with self.status("Still ripping..."):
                    self._wait_for_rip(rip)

            files.verify_audio(disc)

            job = MuxJob.from_artifacts(
                artifacts, Path(cover), title or album.title, Path(output)
            )
            with self.status("Muxing to Matroska..."):
                self.muxer.mux(job)

        return disc

    def _wait_for_rip(self, rip: Future) -> PipelineResult:
        try:
            result = rip.result()
        except PipelineError as e:
            failed = PipelineResult.failed(e)
            logger.error("Rip failed in the %s stage", failed.failure_stage.value)
            raise

        logger.info("Encoded %d bytes", result.bytes_written)
        return result
