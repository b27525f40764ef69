"""Bounded in-memory pipe connecting a writer thread to a reader thread."""

from __future__ import annotations

import io
import threading

DEFAULT_PIPE_CAPACITY = 4 * 1024 * 1024


class _Pipe:
    def __init__(self, capacity: int) -> None:
        if capacity <= 0:
            raise ValueError("pipe capacity must be > 0")
        self._capacity = capacity
        self._buffer = bytearray()
        self._cond = threading.Condition()
        self._writer_closed = False
        self._reader_closed = False

    def write(self, data: bytes) -> int:
        written = 0
        with self._cond:
            while written < len(data):
                if self._writer_closed:
                    raise ValueError("write to closed pipe")
                if self._reader_closed:
                    # Nobody will ever read: drop the rest.
                    return len(data)
                available = self._capacity - len(self._buffer)
                if available <= 0:
                    self._cond.wait()
                    continue
                chunk = data[written : written + available]
                self._buffer += chunk
                written += len(chunk)
                self._cond.notify_all()
        return written

    def read(self, size: int) -> bytes:
        with self._cond:
            while not self._buffer and not self._writer_closed and not self._reader_closed:
                self._cond.wait()
            if self._reader_closed:
                raise ValueError("read from closed pipe")
            if size < 0 or size > len(self._buffer):
                size = len(self._buffer)
            data = bytes(self._buffer[:size])
            del self._buffer[:size]
            self._cond.notify_all()
            return data

    def close_writer(self) -> None:
        with self._cond:
            self._writer_closed = True
            self._cond.notify_all()

    def close_reader(self) -> None:
        with self._cond:
            self._reader_closed = True
            self._buffer.clear()
            self._cond.notify_all()


class PipeReader(io.RawIOBase):
    """
    Read end of a pipe.

    read() blocks until data is available and returns b"" once the write
    end is closed and the buffer is drained.
    """

    def __init__(self, pipe: _Pipe) -> None:
        super().__init__()
        self._pipe = pipe

    def readable(self) -> bool:
        return True

    def readinto(self, b) -> int:
        view = memoryview(b).cast("B")
        data = self._pipe.read(len(view))
        view[: len(data)] = data
        return len(data)

    def read(self, size: int = -1) -> bytes:
        if self.closed:
            raise ValueError("read from closed pipe")
        if size is None or size < 0:
            return self.readall()
        return self._pipe.read(size)

    def close(self) -> None:
        if not self.closed:
            self._pipe.close_reader()
        super().close()


class PipeWriter(io.RawIOBase):
    """
    Write end of a pipe.

    write() blocks while the pipe is full. Once the read end is closed,
    writes are accepted and discarded so the reader's failure can be
    reported by whoever owns it.
    """

    def __init__(self, pipe: _Pipe) -> None:
        super().__init__()
        self._pipe = pipe

    def writable(self) -> bool:
        return True

    def write(self, b) -> int:
        if self.closed:
            raise ValueError("write to closed pipe")
        return self._pipe.write(bytes(b))

    def close(self) -> None:
        if not self.closed:
            self._pipe.close_writer()
        super().close()


def make_pipe(capacity: int = DEFAULT_PIPE_CAPACITY) -> tuple[PipeReader, PipeWriter]:
    """Return the (reader, writer) ends of a new pipe holding at most capacity bytes."""
    pipe = _Pipe(capacity)
    return PipeReader(pipe), PipeWriter(pipe)
