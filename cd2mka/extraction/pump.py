"""Byte pump connecting one pipeline stage to the next."""

from typing import BinaryIO, Optional

from ..core.config import PumpConfig
from ..core.exceptions import PumpError
from ..core.logging import get_logger

logger = get_logger(__name__)


class StreamPump:
    """Copies a readable binary stream into a writable one.

    Each read blocks until data is available and returns at most
    ``buffer_size`` bytes, so a slow sink holds the source back instead of
    accumulating data in memory. If either side fails the source is closed,
    which hands the upstream writer a broken pipe rather than leaving it
    blocked on a full pipe.
    """

    def __init__(
        self,
        source: BinaryIO,
        sink: BinaryIO,
        name: str = "pump",
        buffer_size: Optional[int] = None,
        close_sink: bool = False,
    ):
        self.source = source
        self.sink = sink
        self.name = name
        self.buffer_size = buffer_size or PumpConfig.BUFFER_SIZE
        self.close_sink = close_sink
        self.bytes_copied = 0

        if self.buffer_size <= 0:
            raise ValueError("Buffer size must be positive")

    def run(self) -> int:
        """Copy until end of stream and return the number of bytes copied."""
        read = getattr(self.source, "read1", self.source.read)

        try:
            while True:
                side = "source"
                chunk = read(self.buffer_size)
                if not chunk:
                    break
                side = "sink"
                self.sink.write(chunk)
                self.bytes_copied += len(chunk)

            side = "sink"
            if self.close_sink:
                self.sink.close()
            else:
                self.sink.flush()

        except (OSError, ValueError) as e:
            self._release()
            action = "writing" if side == "sink" else "reading"
            raise PumpError(
                f"Stream pump '{self.name}' failed {action} "
                f"after {self.bytes_copied} bytes",
                pump=self.name,
                side=side,
                details=str(e),
            ) from e

        logger.debug("Pump '%s' finished: %d bytes", self.name, self.bytes_copied)
        return self.bytes_copied

    def _release(self) -> None:
        for stream in (self.source, self.sink if self.close_sink else None):
            if stream is None:
                continue
            try:
                stream.close()
            except (OSError, ValueError):
                # Already broken; the first error is the one reported
                pass
