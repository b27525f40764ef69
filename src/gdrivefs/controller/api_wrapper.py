"""Call counting and lookup caching in front of GoogleDriveController."""

from __future__ import annotations

import logging
import threading
from typing import TYPE_CHECKING, BinaryIO, Iterable, Optional

from gdrivefs.cache import Cache
from gdrivefs.models import FileInfo
from gdrivefs.streams.upload import DEFAULT_UPLOAD_CHUNK_SIZE
from gdrivefs.util.mime import FILE_MIME
from gdrivefs.util.naming import sanitize_name

from .fields import FILE_FIELDS, ID_ONLY_LOOKUP_FIELDS

if TYPE_CHECKING:
    from .drive_controller import GoogleDriveController

logger = logging.getLogger(__name__)

FILES_CREATE = "Files.Create"
FILES_UPDATE = "Files.Update"
FILES_DELETE = "Files.Delete"
FILES_LIST = "Files.List"

API_CALLS: tuple[str, ...] = (FILES_CREATE, FILES_UPDATE, FILES_DELETE, FILES_LIST)


def _folder_prefix(folder_id: str) -> str:
    return f"{folder_id}/"


def _lookup_key(folder_id: str, name: str, fields: str) -> str:
    return f"{folder_id}/lookup/{name}/{fields}"


class DriveApiWrapper:
    """
    Proxies the controller calls that take part in path handling.

    Child lookups are cached per (folder, name, fields). Each mutation evicts
    the entries it may have made stale:

        - create under P: entries of P
        - delete/trash: everything for a folder, entries of each parent for a file
        - rename/move: entries of the old parents and of the new parent
        - content or metadata update: entries of each parent

    With use_cache off, entries already present are still served but no new
    ones are stored.
    """

    def __init__(
        self,
        controller: GoogleDriveController,
        *,
        use_cache: bool = True,
        cache: Optional[Cache] = None,
    ) -> None:
        self._controller = controller
        self._cache = cache if cache is not None else Cache()
        self.use_cache = use_cache
        self._calls = {name: 0 for name in API_CALLS}
        self._calls_lock = threading.Lock()

    @property
    def controller(self) -> GoogleDriveController:
        return self._controller

    @property
    def cache(self) -> Cache:
        return self._cache

    def calls(self) -> dict[str, int]:
        """Snapshot of the number of calls per API operation."""
        with self._calls_lock:
            return dict(self._calls)

    def total_calls(self) -> int:
        with self._calls_lock:
            return sum(self._calls.values())

    def _calling(self, api_name: str) -> None:
        with self._calls_lock:
            self._calls[api_name] = self._calls.get(api_name, 0) + 1

    def _invalidate_folders(self, folder_ids: Iterable[str]) -> None:
        for folder_id in dict.fromkeys(folder_ids):
            self._cache.cleanup_by_prefix(_folder_prefix(folder_id))

    # ----------------------------
    # Lookups
    # ----------------------------
    def get_file_by_folder_and_name(
        self,
        folder_id: str,
        file_name: str,
        *,
        fields: str = "",
    ) -> list[FileInfo]:
        """
        Non-trashed children of folder_id whose name is file_name (sanitized).

        An empty fields selector requests the ids only.
        """
        query_fields = fields or ID_ONLY_LOOKUP_FIELDS
        name = sanitize_name(file_name)
        key = _lookup_key(folder_id, name, query_fields)

        cached, found = self._cache.get(key)
        if found:
            logger.debug("Cache hit for %s", key)
            return list(cached)

        self._calling(FILES_LIST)
        files = self._controller.find_children_by_name(folder_id, name, fields=query_fields)
        logger.debug("Looked up '%s' in %s: %d match(es)", name, folder_id, len(files))
        if self.use_cache:
            self._cache.set(key, tuple(files))
        return files

    def list_children_page(
        self,
        folder_id: str,
        *,
        page_size: int,
        page_token: Optional[str] = None,
    ) -> tuple[list[FileInfo], Optional[str]]:
        """One page of a directory listing. Listings are never cached."""
        self._calling(FILES_LIST)
        return self._controller.list_children_page(
            folder_id, page_size=page_size, page_token=page_token
        )

    # ----------------------------
    # Mutations
    # ----------------------------
    def create_file(
        self,
        folder_id: str,
        file_name: str,
        mime_type: str,
        *,
        fields: str = FILE_FIELDS,
    ) -> FileInfo:
        self._calling(FILES_CREATE)
        info = self._controller.create(
            folder_id, sanitize_name(file_name), mime_type, fields=fields
        )
        self._invalidate_folders([folder_id])
        logger.info("Created %s '%s' in %s", "folder" if info.is_dir else "file", info.name, folder_id)
        return info

    def rename_file(
        self,
        file: FileInfo,
        target_folder_id: str,
        target_name: str,
        *,
        fields: str = FILE_FIELDS,
    ) -> FileInfo:
        """Set the name of file and make target_folder_id its only parent."""
        old_parents = list(file.parents)
        add_parents = [] if target_folder_id in old_parents else [target_folder_id]
        remove_parents = [p for p in old_parents if p != target_folder_id]

        self._calling(FILES_UPDATE)
        info = self._controller.update(
            file.file_id,
            name=sanitize_name(target_name),
            add_parents=add_parents,
            remove_parents=remove_parents,
            fields=fields,
        )
        self._invalidate_folders([*old_parents, target_folder_id])
        logger.info("Renamed '%s' to '%s' in %s", file.name, info.name, target_folder_id)
        return info

    def delete_file(self, file: FileInfo, *, trash: bool) -> None:
        if trash:
            self._calling(FILES_UPDATE)
            self._controller.update(file.file_id, trashed=True, fields="id")
        else:
            self._calling(FILES_DELETE)
            self._controller.delete(file.file_id)

        if file.is_dir:
            # Any cached lookup below the folder may now be stale.
            self._cache.cleanup_everything()
        else:
            self._invalidate_folders(file.parents)
        logger.info("%s '%s' (%s)", "Trashed" if trash else "Deleted", file.name, file.file_id)

    def update_content(
        self,
        file: FileInfo,
        stream: BinaryIO,
        *,
        mime_type: Optional[str] = None,
        chunk_size: int = DEFAULT_UPLOAD_CHUNK_SIZE,
    ) -> FileInfo:
        self._calling(FILES_UPDATE)
        info = self._controller.update_content(
            file.file_id,
            stream,
            mime_type=mime_type or file.mime_type or FILE_MIME,
            chunk_size=chunk_size,
        )
        self._invalidate_folders(file.parents)
        return info

    def update_metadata(
        self,
        file: FileInfo,
        *,
        properties: Optional[dict[str, str]] = None,
        modified_time: Optional[str] = None,
        viewed_by_me_time: Optional[str] = None,
    ) -> FileInfo:
        self._calling(FILES_UPDATE)
        info = self._controller.update(
            file.file_id,
            properties=properties,
            modified_time=modified_time,
            viewed_by_me_time=viewed_by_me_time,
        )
        self._invalidate_folders(file.parents)
        return info
