"""
Buffered sink for encoded samples.
"""

from typing import BinaryIO, Callable, Iterable


DEFAULT_BUFFER_SIZE = 32768


class SampleWriter:
    """
    Collects encoded samples in memory and writes them out in large chunks.

    Write failures (including a closed pipe) propagate to the caller; the
    buffer is flushed when full and when the writer is closed.
    """

    def __init__(self, stream: BinaryIO, buffer_size: int = DEFAULT_BUFFER_SIZE):
        self.stream = stream
        self.buffer_size = buffer_size
        self._buffer = bytearray()
        self.bytes_written = 0

    def write(self, data: bytes) -> None:
        self._buffer += data
        if len(self._buffer) >= self.buffer_size:
            self.flush()

    def flush(self) -> None:
        if self._buffer:
            self.stream.write(self._buffer)
            self.bytes_written += len(self._buffer)
            self._buffer.clear()
        self.stream.flush()

    def close(self) -> None:
        self.flush()

    def __enter__(self) -> "SampleWriter":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        if exc_type is None:
            self.close()
        else:
            # The in-flight exception wins over a failing flush
            try:
                self.flush()
            except OSError:
                pass


def write_samples(samples: Iterable[float], encoder: Callable[[float], bytes], sink: SampleWriter) -> int:
    """
    Encode every sample and hand it to the sink.

    Args:
        samples: Processed sample values
        encoder: Callable turning one value into bytes
        sink: Buffered writer

    Returns:
        Number of samples written
    """
    written = 0
    for x in samples:
        sink.write(encoder(x))
        written += 1
    return written
