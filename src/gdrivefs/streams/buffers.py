"""Write buffering strategies placed in front of the upload pipe."""

from __future__ import annotations

import io
import logging
import queue
import threading
from typing import Optional, Protocol

from gdrivefs.errors import InvalidArgumentError, UnknownBufferTypeError
from gdrivefs.models.config import WriteBufferType

logger = logging.getLogger(__name__)

# Bytes handed to the destination per drain step of AsyncBufferWriter.
_DRAIN_SIZE = 32 * 1024

_MAX_QUEUED_CHUNKS = 2000


class WriteSink(Protocol):
    """Anything a write handle can push bytes into. close() flushes."""

    def write(self, data: bytes) -> int:
        ...

    def close(self) -> None:
        ...


class AsyncBufferWriter:
    """
    Bounded byte buffer drained into dst by a background thread.

    write() copies into the buffer and blocks only while it is full. A
    failure of dst.write() is stored and raised by the next write() or by
    close(); after it, buffered bytes are discarded so writers never
    block forever.
    """

    def __init__(self, dst: WriteSink, max_size: int) -> None:
        if max_size <= 0:
            raise InvalidArgumentError("async buffer size must be > 0")
        self._dst = dst
        self._max_size = max_size
        self._buffer = bytearray()
        self._cond = threading.Condition()
        self._closed = False
        self._error: Optional[BaseException] = None
        self._thread = threading.Thread(
            target=self._run, name="gdrivefs-async-buffer", daemon=True
        )
        self._thread.start()

    def write(self, data: bytes) -> int:
        data = bytes(data)
        written = 0
        with self._cond:
            if self._closed:
                raise ValueError("write to closed buffer")
            if self._error is not None:
                raise self._error
            while written < len(data):
                available = self._max_size - len(self._buffer)
                if available <= 0:
                    self._cond.wait()
                    continue
                chunk = data[written : written + available]
                self._buffer += chunk
                written += len(chunk)
                self._cond.notify_all()
        return written

    def close(self) -> None:
        with self._cond:
            if self._closed:
                return
            self._closed = True
            self._cond.notify_all()
        self._thread.join()
        try:
            self._dst.close()
        finally:
            if self._error is not None:
                raise self._error

    def _run(self) -> None:
        while True:
            with self._cond:
                while not self._buffer and not self._closed:
                    self._cond.wait()
                if not self._buffer:
                    return
                chunk = bytes(self._buffer[:_DRAIN_SIZE])
                del self._buffer[:_DRAIN_SIZE]
                failed = self._error is not None
                self._cond.notify_all()
            if failed:
                continue
            try:
                self._dst.write(chunk)
            except Exception as exc:
                logger.debug("Async buffer write failed: %s", exc)
                with self._cond:
                    self._error = exc


class AsyncChannelWriter:
    """
    Queue of copied chunks drained into dst by a background thread.

    Backpressure is approximate: write() waits while more than max_size
    bytes are queued, then enqueues its whole chunk.
    """

    def __init__(self, dst: WriteSink, max_size: int) -> None:
        if max_size <= 0:
            raise InvalidArgumentError("async channel size must be > 0")
        self._dst = dst
        self._max_size = max_size
        self._queue: queue.Queue[Optional[bytes]] = queue.Queue(maxsize=_MAX_QUEUED_CHUNKS)
        self._queued_bytes = 0
        self._cond = threading.Condition()
        self._closed = False
        self._error: Optional[BaseException] = None
        self._thread = threading.Thread(
            target=self._run, name="gdrivefs-async-chan", daemon=True
        )
        self._thread.start()

    def write(self, data: bytes) -> int:
        chunk = bytes(data)
        with self._cond:
            if self._closed:
                raise ValueError("write to closed buffer")
            if self._error is not None:
                raise self._error
            while self._queued_bytes > self._max_size:
                self._cond.wait()
            self._queued_bytes += len(chunk)
        self._queue.put(chunk)
        return len(chunk)

    def close(self) -> None:
        with self._cond:
            if self._closed:
                return
            self._closed = True
        self._queue.put(None)
        self._thread.join()
        try:
            self._dst.close()
        finally:
            if self._error is not None:
                raise self._error

    def _run(self) -> None:
        while True:
            chunk = self._queue.get()
            if chunk is None:
                return
            with self._cond:
                self._queued_bytes -= len(chunk)
                failed = self._error is not None
                self._cond.notify_all()
            if failed:
                continue
            try:
                self._dst.write(chunk)
            except Exception as exc:
                logger.debug("Async channel write failed: %s", exc)
                with self._cond:
                    self._error = exc


def wrap_write_sink(
    dst: io.RawIOBase,
    buffer_type: WriteBufferType,
    buffer_size: int,
) -> WriteSink:
    """
    Return the sink a write handle should feed for the configured strategy.

    A buffer size of 0 (or the "none" type) returns dst itself.
    """
    if buffer_type is WriteBufferType.NONE or buffer_size == 0:
        return dst
    if buffer_type is WriteBufferType.SIMPLE:
        return io.BufferedWriter(dst, buffer_size)
    if buffer_type is WriteBufferType.ASYNC:
        return AsyncBufferWriter(dst, buffer_size)
    if buffer_type is WriteBufferType.CHAN:
        return AsyncChannelWriter(dst, buffer_size)
    raise UnknownBufferTypeError(
        f"unknown buffer type: {buffer_type!r}",
        details={"write_buffer_type": buffer_type},
    )
