"""Extract/encode pipeline: cdparanoia piped through flac into a file."""

import subprocess
from concurrent.futures import ThreadPoolExecutor
from contextlib import ExitStack
from pathlib import Path
from typing import Dict, List, Optional

from .models import PipelineResult
from .pump import StreamPump
from ..core.config import AudioConfig, PipelineStage, PumpConfig, ToolConfig
from ..core.exceptions import (
    Cd2MkaError,
    EncoderFailed,
    ExtractorFailed,
    FileOperationError,
    PumpError,
)
from ..core.logging import get_logger

logger = get_logger(__name__)

STAGE_ERRORS = {
    PipelineStage.EXTRACTOR: ExtractorFailed,
    PipelineStage.ENCODER: EncoderFailed,
}

DESTINATION_PUMP = "encoder->file"


class DiscRipper:
    """Rips a whole disc into a single verified FLAC stream."""

    def __init__(
        self,
        cdparanoia: Optional[str] = None,
        flac: Optional[str] = None,
        buffer_size: Optional[int] = None,
        log_dir: Optional[Path] = None,
    ):
        """Initialize with optional tool executables.

        Each stage's stderr is captured in ``<stage>.log`` inside ``log_dir``,
        or beside the output file when no directory is given.
        """
        self.cdparanoia = cdparanoia or ToolConfig.CDPARANOIA
        self.flac = flac or ToolConfig.FLAC
        self.buffer_size = buffer_size or PumpConfig.BUFFER_SIZE
        self.log_dir = log_dir

    def extractor_command(self, device: str) -> List[str]:
        """Read every track from track 1 to the end of the disc as WAV on stdout."""
        return [
            self.cdparanoia,
            "--force-cdrom-device",
            device,
            "--output-wav",
            f"{AudioConfig.FIRST_TRACK}-",
            "-",
        ]

    def encoder_command(self) -> List[str]:
        """Encode stdin to stdout at maximum compression, verifying as it goes."""
        return [self.flac, "--verify", "--best", "-"]

    def rip(self, device: str, output_path: Path) -> PipelineResult:
        """Extract and encode the disc into ``output_path``.

        The output file is removed if any stage fails.
        """
        output_path = Path(output_path)
        output_path.parent.mkdir(parents=True, exist_ok=True)

        logger.info("Ripping %s to %s", device, output_path)

        try:
            bytes_written = self._run_pipeline(device, output_path)
        except Cd2MkaError:
            if output_path.is_file():
                output_path.unlink()
            raise

        logger.info("Rip complete: %d bytes written", bytes_written)
        return PipelineResult(
            success=True, output_path=output_path, bytes_written=bytes_written
        )

    def _run_pipeline(self, device: str, output_path: Path) -> int:
        log_dir = self.log_dir or output_path.parent

        with ExitStack() as stack:
            # The destination pump closes the file; the stack only covers early exits
            destination = stack.enter_context(self._open_destination(output_path))

            extractor = stack.enter_context(
                self._spawn(
                    PipelineStage.EXTRACTOR,
                    self.extractor_command(device),
                    stdin=subprocess.DEVNULL,
                    stderr=self._stage_log(stack, log_dir, PipelineStage.EXTRACTOR),
                )
            )
            encoder = stack.enter_context(
                self._spawn(
                    PipelineStage.ENCODER,
                    self.encoder_command(),
                    stdin=subprocess.PIPE,
                    stderr=self._stage_log(stack, log_dir, PipelineStage.ENCODER),
                )
            )

            pumps = [
                StreamPump(
                    extractor.stdout,
                    encoder.stdin,
                    name="extractor->encoder",
                    buffer_size=self.buffer_size,
                    close_sink=True,
                ),
                StreamPump(
                    encoder.stdout,
                    destination,
                    name=DESTINATION_PUMP,
                    buffer_size=self.buffer_size,
                    close_sink=True,
                ),
            ]
            pump_errors = self._run_pumps(pumps)

            # Pumps reaching end of stream says nothing about exit status
            returncodes = {
                PipelineStage.EXTRACTOR: extractor.wait(),
                PipelineStage.ENCODER: encoder.wait(),
            }

        for stage, returncode in returncodes.items():
            logger.debug("%s exited with status %d", stage.value, returncode)

        # A failed destination write takes the processes down with it
        for error in pump_errors:
            if error.pump == DESTINATION_PUMP and error.side == "sink":
                error.details = "; ".join(
                    filter(None, [error.details, self._describe_exits(returncodes)])
                )
                raise error

        failed_stage = self._failed_stage(returncodes)
        if failed_stage is not None:
            returncode = returncodes[failed_stage]
            raise STAGE_ERRORS[failed_stage](
                f"{failed_stage.value.capitalize()} exited with status {returncode}",
                returncode=returncode,
                details=self._stage_details(log_dir, failed_stage, returncodes),
            )

        if pump_errors:
            raise pump_errors[0]

        return pumps[-1].bytes_copied

    def _failed_stage(
        self, returncodes: Dict[PipelineStage, int]
    ) -> Optional[PipelineStage]:
        """The stage to blame: the extractor whenever it failed, else the encoder."""
        for stage in (PipelineStage.EXTRACTOR, PipelineStage.ENCODER):
            if returncodes[stage] != 0:
                return stage
        return None

    def _stage_details(
        self,
        log_dir: Path,
        failed_stage: PipelineStage,
        returncodes: Dict[PipelineStage, int],
    ) -> Optional[str]:
        """Log tail of the failed stage, plus any other stage that also failed."""
        parts = [self._log_tail(log_dir, failed_stage)]

        for stage, returncode in returncodes.items():
            if stage is failed_stage or returncode == 0:
                continue
            tail = self._log_tail(log_dir, stage)
            message = f"{stage.value} also exited with status {returncode}"
            parts.append(f"{message}: {tail}" if tail else message)

        return "; ".join(part for part in parts if part) or None

    def _describe_exits(self, returncodes: Dict[PipelineStage, int]) -> str:
        return ", ".join(
            f"{stage.value} exited with status {returncode}"
            for stage, returncode in returncodes.items()
        )

    def _open_destination(self, output_path: Path):
        try:
            return open(output_path, "wb")
        except OSError as e:
            raise FileOperationError(
                f"Failed to open {output_path.name} for writing",
                file_path=str(output_path),
                operation="rip",
                details=str(e),
            )

    def _run_pumps(self, pumps: List[StreamPump]) -> List[PumpError]:
        """Run every pump on its own thread and wait for all of them."""
        errors = []

        with ThreadPoolExecutor(
            max_workers=PumpConfig.MAX_WORKERS, thread_name_prefix="cd2mka-pump"
        ) as executor:
            futures = [executor.submit(pump.run) for pump in pumps]

            for future in futures:
                try:
                    future.result()
                except PumpError as e:
                    logger.debug("%s", e)
                    errors.append(e)

        return errors

    def _spawn(self, stage: PipelineStage, command: List[str], stdin, stderr):
        logger.debug("Starting %s: %s", stage.value, " ".join(command))
        try:
            return subprocess.Popen(
                command, stdin=stdin, stdout=subprocess.PIPE, stderr=stderr
            )
        except OSError as e:
            raise STAGE_ERRORS[stage](
                f"Failed to start {stage.value}", details=str(e)
            )

    def _stage_log(self, stack: ExitStack, log_dir: Path, stage: PipelineStage):
        log_dir.mkdir(parents=True, exist_ok=True)
        return stack.enter_context(open(log_dir / stage.log_filename, "wb"))

    def _log_tail(self, log_dir: Path, stage: PipelineStage) -> Optional[str]:
        log_path = log_dir / stage.log_filename
        if not log_path.exists():
            return None

        text = log_path.read_text(errors="replace")
        lines = [line.strip() for line in text.splitlines() if line.strip()]
        if not lines:
            return None
        return " | ".join(lines[-PumpConfig.LOG_TAIL_LINES :])
