"""Path to Drive entry resolution."""

from __future__ import annotations

import logging
from typing import Optional, Sequence

from gdrivefs.controller.api_wrapper import DriveApiWrapper
from gdrivefs.controller.fields import LOOKUP_FIELDS
from gdrivefs.errors import FileNotExistError, MultipleEntriesError
from gdrivefs.models import FileInfo
from gdrivefs.util.naming import join_path, join_sanitized, split_path

logger = logging.getLogger(__name__)


class PathResolver:
    """
    Walks a slash-separated path one segment at a time from a root entry.

    Drive has no paths, only parent links, so every segment costs one
    lookup by (parent id, name); the lookups go through the API wrapper
    and its cache. Intermediate segments only fetch ids, the last one
    fetches the requested fields.
    """

    def __init__(self, api: DriveApiWrapper) -> None:
        self._api = api

    def resolve(self, root: FileInfo, path: str, *, fields: str = LOOKUP_FIELDS) -> FileInfo:
        """
        Return the entry at path below root ("" and "/" give root itself).

        Raises:
            FileNotExistError: a segment has no match.
            MultipleEntriesError: a segment has several matches.
            DriveApiCallError: a lookup failed.
        """
        return self.resolve_parts(root, split_path(path), fields=fields)

    def resolve_parts(
        self,
        root: FileInfo,
        parts: Sequence[str],
        *,
        fields: str = LOOKUP_FIELDS,
    ) -> FileInfo:
        if not parts:
            return root

        parts = list(parts)
        last = len(parts) - 1
        current_id = root.file_id
        found = root

        for i, part in enumerate(parts):
            files = self._api.get_file_by_folder_and_name(
                current_id,
                part,
                fields=fields if i == last else "",
            )
            if not files:
                raise FileNotExistError(join_path(*parts[: i + 1]))
            if len(files) > 1:
                raise MultipleEntriesError(join_path(*parts[: i + 1]), len(files))
            found = files[0]
            current_id = found.file_id

        return found.with_parent_path(join_sanitized(parts[:-1]))

    def find(self, root: FileInfo, path: str, *, fields: str = LOOKUP_FIELDS) -> Optional[FileInfo]:
        """Like resolve(), but None when the path does not exist."""
        return self.find_parts(root, split_path(path), fields=fields)

    def find_parts(
        self,
        root: FileInfo,
        parts: Sequence[str],
        *,
        fields: str = LOOKUP_FIELDS,
    ) -> Optional[FileInfo]:
        try:
            return self.resolve_parts(root, parts, fields=fields)
        except FileNotExistError:
            return None
