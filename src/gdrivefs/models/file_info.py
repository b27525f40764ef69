"""Data model for Drive entries seen through a path."""

from __future__ import annotations

import stat as stat_mod
from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

from gdrivefs.util.mime import is_folder
from gdrivefs.util.naming import join_path, sanitize_name

_FILE_MODE: int = 0o666
_DIR_MODE: int = 0o777


@dataclass(frozen=True, slots=True)
class FileInfo:
    """
    A Drive entry plus the path it was reached through.

    Notes:
        - ``parent_path`` is a snapshot taken by the lookup that built this
          object. It is never re-derived from ``parents``, and it goes stale if
          an ancestor is renamed elsewhere.
        - Only the first entry of ``parents`` matters for paths; Drive allows
          several.
        - Instances are immutable; use ``with_parent_path`` (or
          ``dataclasses.replace``) to derive a new one. ``parents`` is
          stored as a tuple; ``properties`` takes no part in hashing.
    """

    file_id: str
    name: str
    mime_type: str
    parents: tuple[str, ...] = ()

    parent_path: str = ""
    trashed: bool = False
    modified_time: Optional[datetime] = None
    created_time: Optional[datetime] = None
    size: Optional[int] = None
    md5_checksum: Optional[str] = None
    properties: dict[str, str] = field(default_factory=dict, hash=False)

    def __post_init__(self) -> None:
        if not isinstance(self.parents, tuple):
            object.__setattr__(self, "parents", tuple(self.parents))

    @property
    def is_dir(self) -> bool:
        return is_folder(self.mime_type)

    @property
    def display_name(self) -> str:
        """The name as it appears in paths."""
        return sanitize_name(self.name)

    @property
    def path(self) -> str:
        """Full path of this entry, relative to the root it was resolved from."""
        return join_path(self.parent_path, self.display_name)

    @property
    def mode(self) -> int:
        """POSIX-like mode bits. Drive has no permissions model, so they are fixed."""
        if self.is_dir:
            return stat_mod.S_IFDIR | _DIR_MODE
        return stat_mod.S_IFREG | _FILE_MODE

    @property
    def primary_parent(self) -> Optional[str]:
        return self.parents[0] if self.parents else None

    def with_parent_path(self, parent_path: str) -> FileInfo:
        return FileInfo(
            file_id=self.file_id,
            name=self.name,
            mime_type=self.mime_type,
            parents=self.parents,
            parent_path=parent_path,
            trashed=self.trashed,
            modified_time=self.modified_time,
            created_time=self.created_time,
            size=self.size,
            md5_checksum=self.md5_checksum,
            properties=dict(self.properties),
        )
