"""File handles returned by GoogleDriveFs.open()."""

from __future__ import annotations

import io
import logging
import os
from typing import TYPE_CHECKING, Any, Optional

from gdrivefs.controller.drive_controller import FILES_LIST_PAGE_SIZE_MAX
from gdrivefs.errors import (
    DriveStreamError,
    FileClosedError,
    FileIsDirectoryError,
    FileIsNotDirectoryError,
    GDriveFsError,
    InternalError,
    InvalidArgumentError,
    InvalidSeekError,
    ReadOnlyError,
    UnsupportedOperationError,
    WriteOnlyError,
)
from gdrivefs.models import FileInfo
from gdrivefs.streams.buffers import WriteSink
from gdrivefs.streams.upload import UploadBridge

if TYPE_CHECKING:
    from .filesystem import GoogleDriveFs

logger = logging.getLogger(__name__)


class DriveFile:
    """
    An open file or directory.

    A handle holds at most one stream: a ranged download when opened for
    reading, or a write sink feeding an upload thread when opened for
    writing. Directory handles hold neither and support readdir().

    Writes replace the whole content; the upload only completes in
    close(), which raises any error the upload hit.
    """

    def __init__(
        self,
        fs: GoogleDriveFs,
        info: FileInfo,
        path: str,
        *,
        reader: Optional[io.RawIOBase] = None,
        writer: Optional[WriteSink] = None,
        upload: Optional[UploadBridge[FileInfo]] = None,
    ) -> None:
        if writer is not None and (reader is not None or upload is None):
            raise InternalError("a write handle needs an upload and no reader")
        self._fs = fs
        self._info = info
        self._path = path
        self._reader = reader
        self._writer = writer
        self._upload = upload
        if writer is not None:
            self._mode = "wb"
        elif info.is_dir:
            self._mode = "d"
        else:
            self._mode = "rb"
        self._offset = 0
        self._closed = False
        self._list_token: Optional[str] = None
        self._listing_done = False

    def __repr__(self) -> str:
        return f"<DriveFile path={self._path!r} mode={self.mode!r}>"

    def __enter__(self) -> DriveFile:
        return self

    def __exit__(self, *exc: Any) -> None:
        self.close()

    # ----------------------------
    # Introspection
    # ----------------------------
    @property
    def name(self) -> str:
        """The path the handle was opened with."""
        return self._path

    @property
    def info(self) -> FileInfo:
        return self._info

    @property
    def mode(self) -> str:
        """"rb", "wb", or "d" for a directory."""
        return self._mode

    @property
    def closed(self) -> bool:
        return self._closed

    def readable(self) -> bool:
        return self._mode == "rb"

    def writable(self) -> bool:
        return self._mode == "wb"

    def seekable(self) -> bool:
        return self._mode == "rb"

    def stat(self) -> FileInfo:
        return self._info

    def tell(self) -> int:
        self._ensure_open()
        return self._offset

    # ----------------------------
    # Reading
    # ----------------------------
    def read(self, size: Optional[int] = -1) -> bytes:
        self._ensure_open()
        self._ensure_not_directory()
        if self._reader is None:
            raise WriteOnlyError()
        try:
            data = self._reader.read(-1 if size is None else size)
        except Exception as exc:
            raise DriveStreamError(exc) from exc
        data = data or b""
        self._offset += len(data)
        return data

    def read_at(self, offset: int, size: int = -1) -> bytes:
        """Read size bytes starting at offset. Moves the handle position."""
        self.seek(offset, os.SEEK_SET)
        return self.read(size)

    def seek(self, offset: int, whence: int = os.SEEK_SET) -> int:
        """
        Move the read position.

        The download is reopened at the new position unless it does not
        move. On a write handle only seek(0, SEEK_CUR) is accepted, which
        reports the number of bytes written so far.
        """
        self._ensure_open()
        if self._writer is not None:
            if whence == os.SEEK_CUR and offset == 0:
                return self._offset
            raise UnsupportedOperationError("seek is not supported on files opened for writing")
        self._ensure_not_directory()

        if whence == os.SEEK_SET:
            target = offset
        elif whence == os.SEEK_CUR:
            target = self._offset + offset
        elif whence == os.SEEK_END:
            if self._info.size is None:
                raise UnsupportedOperationError(
                    "seek from end needs the file size", details={"path": self._path}
                )
            target = self._info.size + offset
        else:
            raise InvalidArgumentError(f"invalid whence ({whence})")

        if target < 0:
            raise InvalidSeekError(
                "invalid seek offset",
                details={"path": self._path, "offset": target},
            )
        if target == self._offset:
            return target

        old = self._reader
        self._reader = self._fs._open_reader(self._info, target)
        self._offset = target
        try:
            old.close()
        except Exception as exc:
            raise DriveStreamError(exc) from exc
        return target

    # ----------------------------
    # Writing
    # ----------------------------
    def write(self, data: bytes) -> int:
        self._ensure_open()
        self._ensure_not_directory()
        if self._writer is None:
            raise ReadOnlyError()
        if isinstance(data, str):
            raise TypeError("write() argument must be a bytes-like object, not str")
        try:
            written = self._writer.write(data)
        except Exception as exc:
            raise DriveStreamError(exc) from exc
        self._offset += written
        return written

    def write_at(self, data: bytes, offset: int) -> int:
        raise UnsupportedOperationError("random writes are not supported")

    def truncate(self, size: Optional[int] = None) -> int:
        raise UnsupportedOperationError("truncate is not supported")

    def flush(self) -> None:
        self._ensure_open()

    def sync(self) -> None:
        self._ensure_open()

    # ----------------------------
    # Directories
    # ----------------------------
    def readdir(self, count: int = 0) -> list[FileInfo]:
        """
        Entries of the directory.

        count <= 0 lists everything from the start. count > 0 returns at
        most count entries and the next call continues where this one
        stopped; an empty list means the listing is exhausted.
        """
        self._ensure_open()
        if not self._info.is_dir:
            raise FileIsNotDirectoryError(self._path)

        if count <= 0:
            self._list_token = None
            self._listing_done = False
        elif self._listing_done:
            return []

        parent_path = self._fs._path_of(self._info)
        files: list[FileInfo] = []
        while count <= 0 or len(files) < count:
            page_size = FILES_LIST_PAGE_SIZE_MAX
            if count > 0:
                page_size = min(page_size, count - len(files))
            page, token = self._fs._list_children(self._info, page_size, self._list_token)
            files.extend(entry.with_parent_path(parent_path) for entry in page)
            self._list_token = token
            if not token:
                self._listing_done = True
                break
        return files

    def readdirnames(self, count: int = 0) -> list[str]:
        return [entry.display_name for entry in self.readdir(count)]

    # ----------------------------
    # Closing
    # ----------------------------
    def close(self) -> None:
        """
        Close the handle. Closing twice is a no-op.

        For a write handle this sends end-of-file to the upload and waits for
        it; the upload's error wins over an error from flushing the buffer.
        """
        if self._closed:
            return
        self._closed = True
        if self._writer is not None:
            self._close_writer()
        elif self._reader is not None:
            reader, self._reader = self._reader, None
            try:
                reader.close()
            except Exception as exc:
                raise DriveStreamError(exc) from exc
            if self._fs.config.log_readers_and_writers:
                logger.info("Reader closed", extra={"path": self._path})

    def _close_writer(self) -> None:
        sink, upload = self._writer, self._upload
        self._writer = None
        self._upload = None

        sink_error: Optional[Exception] = None
        try:
            sink.close()
        except Exception as exc:
            logger.warning("Closing issue on %s: %s", self._path, exc)
            sink_error = exc
        finally:
            upload.writer.close()

        try:
            info = upload.wait()
        except GDriveFsError:
            raise
        except Exception as exc:
            raise DriveStreamError(exc) from exc
        if sink_error is not None:
            raise DriveStreamError(sink_error) from sink_error

        self._info = info.with_parent_path(self._info.parent_path)

    def _ensure_open(self) -> None:
        if self._closed:
            raise FileClosedError()

    def _ensure_not_directory(self) -> None:
        if self._info.is_dir:
            raise FileIsDirectoryError(self._path)
