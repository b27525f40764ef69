"""GoogleDriveFs: a path-based filesystem over Google Drive."""

from __future__ import annotations

import functools
import logging
import os
from datetime import datetime
from typing import Optional, Sequence

from gdrivefs.auth import AuthenticateFunc, AuthInfo
from gdrivefs.controller import DriveApiWrapper, GoogleDriveController
from gdrivefs.errors import (
    EmptyPathError,
    FileExistError,
    FileNotExistError,
    InvalidArgumentError,
    UnsupportedOperationError,
)
from gdrivefs.file import DriveFile
from gdrivefs.models import DriveFsConfig, FileInfo
from gdrivefs.paths import (
    HierarchyMutator,
    PathResolver,
    validate_is_directory,
    validate_is_not_directory,
    validate_not_root,
)
from gdrivefs.streams.buffers import wrap_write_sink
from gdrivefs.streams.download import DriveDownloadStream
from gdrivefs.streams.upload import UploadBridge
from gdrivefs.util.mime import is_download_disallowed
from gdrivefs.util.time import to_rfc3339

logger = logging.getLogger(__name__)

# Property holding the mode given to chmod(). Drive does not enforce it.
FILE_MODE_PROPERTY: str = "file_mode"

_MODE_FLAGS: dict[str, int] = {
    "r": os.O_RDONLY,
    "w": os.O_WRONLY | os.O_CREAT | os.O_TRUNC,
    "x": os.O_WRONLY | os.O_CREAT | os.O_EXCL,
}


class GoogleDriveFs:
    """
    Filesystem view of a Drive folder.

    Paths are relative to the current root (the My Drive root after
    construction, see set_root_directory()). Both "/" and "\\" separate
    segments. Drive allows several entries with one name in a folder; any
    path that hits such a name fails with MultipleEntriesError.
    """

    NAME: str = "gdrive"

    def __init__(
        self,
        auth_info: AuthInfo,
        *,
        config: Optional[DriveFsConfig] = None,
        scopes: Optional[Sequence[str]] = None,
        supports_all_drives: bool = True,
        authenticate: Optional[AuthenticateFunc] = None,
    ) -> None:
        controller = GoogleDriveController(
            auth_info,
            scopes=scopes,
            supports_all_drives=supports_all_drives,
            authenticate=authenticate,
        )
        self._init_components(controller, config or DriveFsConfig())

    @classmethod
    def from_controller(
        cls,
        controller: GoogleDriveController,
        *,
        config: Optional[DriveFsConfig] = None,
    ) -> "GoogleDriveFs":
        """Create a filesystem with an injected controller (useful for tests)."""
        obj = cls.__new__(cls)
        obj._init_components(controller, config or DriveFsConfig())
        return obj

    def _init_components(self, controller: GoogleDriveController, config: DriveFsConfig) -> None:
        self._config = config
        self._controller = controller
        self._api = DriveApiWrapper(controller, use_cache=config.use_cache)
        self._resolver = PathResolver(self._api)
        self._mutator = HierarchyMutator(self._api, self._resolver, controller)
        self._root: Optional[FileInfo] = None
        self.set_root_directory("")

    # ----------------------------
    # Properties
    # ----------------------------
    @property
    def name(self) -> str:
        return self.NAME

    @property
    def config(self) -> DriveFsConfig:
        return self._config

    @property
    def root(self) -> FileInfo:
        return self._root

    @property
    def api(self) -> DriveApiWrapper:
        """The wrapper all calls go through; exposes call counts and the cache."""
        return self._api

    # ----------------------------
    # Root
    # ----------------------------
    def set_root_directory(self, path: str) -> FileInfo:
        """
        Make the folder at path (from the My Drive root) the new root.

        Must not run while other calls on this filesystem are in flight.
        """
        drive_root = self._controller.get_root()
        root = self._resolver.resolve(drive_root, path)
        validate_is_directory(root, path)
        self._root = root
        logger.info("Root directory set to '%s' (%s)", path, root.file_id)
        return root

    # ----------------------------
    # Metadata
    # ----------------------------
    def stat(self, path: str) -> FileInfo:
        return self._resolver.resolve(self._root, path)

    def chmod(self, path: str, mode: int) -> FileInfo:
        """Record mode in the entry's properties. Drive does not enforce it."""
        file = self._resolve_mutable(path)
        return self._api.update_metadata(
            file, properties={FILE_MODE_PROPERTY: str(mode)}
        ).with_parent_path(file.parent_path)

    def chtimes(self, path: str, atime: datetime, mtime: datetime) -> FileInfo:
        """Set the modified time and the viewed-by-me time (the closest thing to atime)."""
        file = self._resolve_mutable(path)
        return self._api.update_metadata(
            file,
            modified_time=to_rfc3339(mtime),
            viewed_by_me_time=to_rfc3339(atime),
        ).with_parent_path(file.parent_path)

    def chown(self, path: str, uid: int, gid: int) -> None:
        raise UnsupportedOperationError("chown is not supported")

    # ----------------------------
    # Tree
    # ----------------------------
    def mkdir(self, path: str) -> FileInfo:
        return self.mkdir_all(path)

    def mkdir_all(self, path: str) -> FileInfo:
        return self._mutator.mkdir_all(self._root, path)

    def remove(self, path: str) -> None:
        self.remove_all(path)

    def remove_all(self, path: str) -> None:
        """Delete path and everything below it (trash it if configured so)."""
        self._mutator.delete(self._root, path, trash=self._config.trash_for_delete)

    def delete_directory(self, path: str) -> None:
        self._mutator.delete_directory(self._root, path, trash=self._config.trash_for_delete)

    def rename(self, old_path: str, new_path: str) -> FileInfo:
        return self._mutator.rename(self._root, old_path, new_path)

    def trash(self, path: str) -> None:
        self._mutator.trash(self._root, path)

    def list_trash(self, path: str = "", count: int = 0) -> list[FileInfo]:
        return self._mutator.list_trash(self._root, path, count)

    def list_directory(self, path: str, count: int = 0) -> list[FileInfo]:
        info = self.stat(path)
        validate_is_directory(info, path)
        with DriveFile(self, info, path) as handle:
            return handle.readdir(count)

    # ----------------------------
    # Files
    # ----------------------------
    def open(self, path: str, mode: str = "rb") -> DriveFile:
        """
        Open path like the builtin open(), binary only.

        "r"/"rb" read, "w"/"wb" create or replace, "x"/"xb" create only.
        """
        return self.open_file(path, _mode_to_flags(mode))

    def create(self, path: str) -> DriveFile:
        return self.open_file(path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC)

    def open_file(self, path: str, flags: int = os.O_RDONLY) -> DriveFile:
        """
        Open path with os.O_* flags.

        O_RDWR and O_APPEND are rejected. A missing path is created only
        with O_CREAT and O_WRONLY together. Directories open as directory
        handles (read only).
        """
        if not path:
            raise EmptyPathError()
        if flags & os.O_RDWR:
            raise UnsupportedOperationError("option O_RDWR is not supported")
        if flags & os.O_APPEND:
            raise UnsupportedOperationError("option O_APPEND is not supported")

        write = bool(flags & os.O_WRONLY)
        create = bool(flags & os.O_CREAT)

        try:
            file: Optional[FileInfo] = self._resolver.resolve(self._root, path)
        except FileNotExistError:
            file = None

        if file is not None:
            if create and flags & os.O_EXCL:
                raise FileExistError(path)
            if file.is_dir:
                if write:
                    validate_not_root(self._root, file)
                    validate_is_not_directory(file, path)
                return DriveFile(self, file, path)
        else:
            if not (create and write):
                raise FileNotExistError(path)
            file = self._mutator.create_file(self._root, path)

        if write:
            return self._open_write(file, path)
        return self._open_read(file, path)

    def _open_read(self, file: FileInfo, path: str) -> DriveFile:
        if is_download_disallowed(file.mime_type):
            raise UnsupportedOperationError(
                f"'{path}' is a Google Apps document and has no downloadable content",
                details={"path": path, "mime_type": file.mime_type},
            )
        return DriveFile(self, file, path, reader=self._open_reader(file, 0))

    def _open_write(self, file: FileInfo, path: str) -> DriveFile:
        upload: UploadBridge[FileInfo] = UploadBridge(
            functools.partial(
                self._api.update_content,
                file,
                chunk_size=self._config.upload_chunk_size,
            ),
            capacity=self._config.pipe_capacity,
            name=file.name,
            log_lifecycle=self._config.log_readers_and_writers,
        )
        sink = wrap_write_sink(
            upload.writer,
            self._config.write_buffer_type,
            self._config.write_buffer_size,
        )
        upload.start()
        return DriveFile(self, file, path, writer=sink, upload=upload)

    # ----------------------------
    # Handle support
    # ----------------------------
    def _open_reader(self, file: FileInfo, offset: int) -> DriveDownloadStream:
        if self._config.log_readers_and_writers:
            logger.info("Opening reader", extra={"file_name": file.name, "offset": offset})
        return self._controller.download(
            file.file_id,
            offset=offset,
            chunk_size=self._config.download_chunk_size,
        )

    def _list_children(
        self,
        folder: FileInfo,
        page_size: int,
        page_token: Optional[str],
    ) -> tuple[list[FileInfo], Optional[str]]:
        return self._api.list_children_page(
            folder.file_id,
            page_size=page_size,
            page_token=page_token,
        )

    def _path_of(self, info: FileInfo) -> str:
        """Path of info relative to the root; the root itself is ""."""
        if self._root is not None and info.file_id == self._root.file_id:
            return ""
        return info.path

    def _resolve_mutable(self, path: str) -> FileInfo:
        file = self._resolver.resolve(self._root, path)
        validate_not_root(self._root, file)
        return file


def _mode_to_flags(mode: str) -> int:
    if "+" in mode:
        raise UnsupportedOperationError("read/write mode is not supported")
    if "a" in mode:
        raise UnsupportedOperationError("append mode is not supported")
    base = mode.replace("b", "", 1)
    if base not in _MODE_FLAGS:
        raise InvalidArgumentError(f"invalid mode: {mode!r}", details={"mode": mode})
    return _MODE_FLAGS[base]
