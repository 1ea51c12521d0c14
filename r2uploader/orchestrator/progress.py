"""Byte counting stream wrapper."""
from typing import BinaryIO, Callable

ProgressCallback = Callable[[int, int], None]


class ProgressReader:
    """
    Readable stream that reports (read, total) after every read.

    Bytes, errors and end of data pass through untouched. The callback gets
    raw byte counts; formatting is up to the caller.
    """

    def __init__(self, stream: BinaryIO, total: int, callback: ProgressCallback):
        self._stream = stream
        self._total = total
        self._callback = callback
        self._read = 0

    @property
    def bytes_read(self) -> int:
        return self._read

    @property
    def total(self) -> int:
        return self._total

    def readable(self) -> bool:
        return True

    def read(self, size: int = -1) -> bytes:
        chunk = self._stream.read(size)
        self._read += len(chunk)
        self._callback(self._read, self._total)
        return chunk
