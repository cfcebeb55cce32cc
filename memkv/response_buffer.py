import logging


logger = logging.getLogger(__name__)


class ResponseAccumulator:
    """Collects a streamed response body chunk by chunk.

    The transport pushes chunks through `write` in arrival order. If the
    buffer cannot grow, the accumulator freezes: earlier bytes stay intact,
    later chunks are swallowed, and `failed` is set. `write` always reports
    the whole chunk as consumed so the transfer runs to completion.
    """

    def __init__(self, max_bytes: int | None = None) -> None:
        self._buffer: bytearray = bytearray()
        self._length: int = 0
        self._max_bytes: int | None = max_bytes
        self.failed: bool = False

    def write(self, chunk: bytes) -> int:
        chunk_size = len(chunk)
        if self.failed:
            return chunk_size

        new_length = self._length + chunk_size
        if self._max_bytes is not None and new_length > self._max_bytes:
            logger.error("Response body exceeds %d bytes, dropping the rest", self._max_bytes)
            self.failed = True
            return chunk_size

        try:
            self._buffer.extend(chunk)
        except MemoryError:
            # bytearray.extend leaves the buffer unchanged when the resize fails
            logger.error("Could not grow response buffer to %d bytes", new_length)
            self.failed = True
            return chunk_size

        self._length = new_length
        return chunk_size

    def __len__(self) -> int:
        return self._length

    def getvalue(self) -> bytes:
        return bytes(self._buffer[:self._length])

    def text(self, encoding: str = "utf-8") -> str:
        return self.getvalue().decode(encoding, errors="replace")
