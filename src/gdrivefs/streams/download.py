"""Lazy ranged download stream."""

from __future__ import annotations

import io
import logging
from typing import Callable, Optional

logger = logging.getLogger(__name__)

DEFAULT_DOWNLOAD_CHUNK_SIZE = 4 * 1024 * 1024

# fetch(start, end) returns bytes [start, end] inclusive; b"" past the end.
RangeFetcher = Callable[[int, int], bytes]


class DriveDownloadStream(io.RawIOBase):
    """
    Read-only stream over remote content starting at a byte offset.

    Content is fetched one chunk at a time with inclusive byte ranges and
    nothing beyond the current chunk is kept. A chunk shorter than
    requested marks the end of the content.
    """

    def __init__(
        self,
        fetch: RangeFetcher,
        *,
        offset: int = 0,
        size: Optional[int] = None,
        chunk_size: int = DEFAULT_DOWNLOAD_CHUNK_SIZE,
    ) -> None:
        super().__init__()
        if offset < 0:
            raise ValueError("offset must be >= 0")
        if chunk_size <= 0:
            raise ValueError("chunk_size must be > 0")
        self._fetch = fetch
        self._position = offset
        self._size = size
        self._chunk_size = chunk_size
        self._chunk = b""
        self._chunk_pos = 0
        self._last_chunk = False

    @property
    def position(self) -> int:
        return self._position

    def readable(self) -> bool:
        return True

    def readinto(self, b) -> int:
        if self.closed:
            raise ValueError("read from closed stream")
        view = memoryview(b).cast("B")
        if not view:
            return 0
        if self._chunk_pos >= len(self._chunk) and not self._next_chunk():
            return 0
        n = min(len(view), len(self._chunk) - self._chunk_pos)
        view[:n] = self._chunk[self._chunk_pos : self._chunk_pos + n]
        self._chunk_pos += n
        self._position += n
        return n

    def _next_chunk(self) -> bool:
        if self._last_chunk:
            return False
        start = self._position
        end = start + self._chunk_size - 1
        if self._size is not None:
            if start >= self._size:
                self._last_chunk = True
                return False
            end = min(end, self._size - 1)
        logger.debug("Fetching bytes %d-%d", start, end)
        data = self._fetch(start, end)
        if len(data) < end - start + 1:
            self._last_chunk = True
        self._chunk = data
        self._chunk_pos = 0
        return bool(data)
