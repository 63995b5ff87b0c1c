"""Length-limited view over a byte stream."""

import io
import os
from typing import BinaryIO, Optional

from ..core.model import InvalidUsageError

_SKIP_BUFFER = 8192


class LimitedReader:
    """Expose at most `limit` further bytes of `source`.

    End-of-stream is signalled once the budget is spent even if `source`
    still has data, so one chunk can be read without touching the next.
    The wrapped source is never closed.
    """

    def __init__(self, source: BinaryIO, limit: int):
        if limit < 0:
            raise InvalidUsageError(f"Limit cannot be negative: {limit}")
        self._source = source
        self._remaining = limit
        self._mark_remaining: Optional[int] = None
        self._mark_position: Optional[int] = None

    @property
    def remaining(self) -> int:
        """Bytes left in the budget."""
        return self._remaining

    def readable(self) -> bool:
        return True

    def seekable(self) -> bool:
        """Whether mark()/reset() can rewind the source."""
        seekable = getattr(self._source, "seekable", None)
        return bool(seekable and seekable())

    def read(self, size: Optional[int] = -1) -> Optional[bytes]:
        # read(0) reports end-of-stream without touching the budget
        if self._remaining == 0 or size == 0:
            return b""
        if size is None or size < 0 or size > self._remaining:
            size = self._remaining
        data = self._source.read(size)
        # None from a non-blocking source means no data yet, not end-of-stream
        if data:
            self._remaining -= len(data)
        return data

    def readinto(self, buffer) -> Optional[int]:
        view = memoryview(buffer)
        if self._remaining == 0 or len(view) == 0:
            return 0
        data = self.read(len(view))
        if data is None:
            return None
        view[:len(data)] = data
        return len(data)

    def skip(self, n: int) -> int:
        """Skip at most `n` bytes within the budget and return how many were skipped."""
        n = min(max(n, 0), self._remaining)
        if n == 0:
            return 0
        if self.seekable():
            start = self._source.tell()
            end = self._source.seek(0, os.SEEK_END)
            skipped = max(0, min(n, end - start))
            self._source.seek(start + skipped)
        else:
            skipped = 0
            while skipped < n:
                data = self._source.read(min(_SKIP_BUFFER, n - skipped))
                if not data:
                    break
                skipped += len(data)
        self._remaining -= skipped
        return skipped

    def mark(self) -> None:
        """Remember the current position together with the remaining budget."""
        self._mark_remaining = self._remaining
        self._mark_position = self._source.tell() if self.seekable() else None

    def reset(self) -> None:
        """Rewind to the last mark() and restore the budget captured with it."""
        if not self.seekable():
            raise io.UnsupportedOperation("Mark is not supported.")
        if self._mark_remaining is None or self._mark_position is None:
            raise InvalidUsageError("Mark is not set.")
        self._source.seek(self._mark_position)
        self._remaining = self._mark_remaining
