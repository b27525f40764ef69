"""Tree invariants the Drive backend does not enforce by itself."""

from __future__ import annotations

from gdrivefs.errors import (
    FileIsDirectoryError,
    FileIsNotDirectoryError,
    ForbiddenOnRootError,
)
from gdrivefs.models import FileInfo


def validate_not_root(root: FileInfo, target: FileInfo) -> None:
    if target.file_id == root.file_id:
        raise ForbiddenOnRootError()


def validate_is_directory(info: FileInfo, path: str) -> None:
    if not info.is_dir:
        raise FileIsNotDirectoryError(path)


def validate_is_not_directory(info: FileInfo, path: str) -> None:
    if info.is_dir:
        raise FileIsDirectoryError(path)
