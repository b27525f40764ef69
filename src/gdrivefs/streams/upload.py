"""Streaming resumable upload and the thread that runs it."""

from __future__ import annotations

import logging
import threading
from concurrent.futures import Future
from typing import BinaryIO, Callable, Generic, Optional, TypeVar

from googleapiclient.http import MediaUpload

from gdrivefs.util.mime import FILE_MIME

from .pipe import DEFAULT_PIPE_CAPACITY, PipeReader, make_pipe

logger = logging.getLogger(__name__)

DEFAULT_UPLOAD_CHUNK_SIZE = 4 * 1024 * 1024

T = TypeVar("T")


class StreamMediaUpload(MediaUpload):
    """
    Resumable media of unknown length read sequentially from a stream.

    googleapiclient asks for size() before every chunk and then for
    getbytes(progress, chunksize). size() reads one chunk plus one byte
    ahead so that the request carrying the final bytes also carries the
    total length; until the end is seen it reports None ("*"). Bytes
    below the requested offset are dropped, bytes still unacknowledged by
    the server are kept so a chunk can be sent again.
    """

    def __init__(
        self,
        stream: BinaryIO,
        mimetype: str = FILE_MIME,
        chunksize: int = DEFAULT_UPLOAD_CHUNK_SIZE,
    ) -> None:
        if chunksize <= 0:
            raise ValueError("chunksize must be > 0")
        self._stream = stream
        self._mimetype = mimetype
        self._chunksize = chunksize
        self._buffer = bytearray()
        self._buffer_start = 0
        self._served_end = 0
        self._eof = False

    def chunksize(self) -> int:
        return self._chunksize

    def mimetype(self) -> str:
        return self._mimetype

    def resumable(self) -> bool:
        return True

    def has_stream(self) -> bool:
        return False

    def size(self) -> Optional[int]:
        self._fill(self._served_end + self._chunksize + 1)
        if self._eof:
            return self._buffer_start + len(self._buffer)
        return None

    def getbytes(self, begin: int, length: int) -> bytes:
        if begin < self._buffer_start:
            raise ValueError(
                f"offset {begin} was already discarded (buffer starts at {self._buffer_start})"
            )
        drop = min(begin - self._buffer_start, len(self._buffer))
        del self._buffer[:drop]
        self._buffer_start += drop
        self._fill(begin + length)
        offset = begin - self._buffer_start
        data = bytes(self._buffer[offset : offset + length])
        self._served_end = max(self._served_end, begin + len(data))
        return data

    def _fill(self, target_end: int) -> None:
        while not self._eof:
            missing = target_end - (self._buffer_start + len(self._buffer))
            if missing <= 0:
                return
            data = self._stream.read(missing)
            if not data:
                self._eof = True
                return
            self._buffer += data


class UploadBridge(Generic[T]):
    """
    Runs upload(reader) on a daemon thread while the caller feeds writer.

    The outcome is delivered once through ``done``. The read end is closed
    when the upload returns or fails, after which writes to the pipe are
    discarded and the failure is reported by :meth:`wait`.
    """

    def __init__(
        self,
        upload: Callable[[PipeReader], T],
        *,
        capacity: int = DEFAULT_PIPE_CAPACITY,
        name: str = "",
        log_lifecycle: bool = False,
    ) -> None:
        self._upload = upload
        self._name = name
        self._log_lifecycle = log_lifecycle
        self.reader, self.writer = make_pipe(capacity)
        self.done: Future[T] = Future()
        self._thread = threading.Thread(
            target=self._run, name=f"gdrivefs-upload-{name}", daemon=True
        )

    def start(self) -> None:
        self.done.set_running_or_notify_cancel()
        self._thread.start()

    def wait(self) -> T:
        """Block until the upload finished; raise its error if it failed."""
        return self.done.result()

    def _run(self) -> None:
        if self._log_lifecycle:
            logger.info("Starting the writer", extra={"file_name": self._name})
        try:
            result = self._upload(self.reader)
        except Exception as exc:
            self.reader.close()
            self.done.set_exception(exc)
            logger.debug("Upload of %s failed: %s", self._name, exc)
        else:
            self.reader.close()
            self.done.set_result(result)
        if self._log_lifecycle:
            logger.info("Writer stopped", extra={"file_name": self._name})
