"""Directory tree mutations emulated over Drive parent links."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Sequence

from gdrivefs.controller.api_wrapper import DriveApiWrapper
from gdrivefs.controller.fields import ANCESTOR_FIELDS, LOOKUP_FIELDS
from gdrivefs.errors import EmptyPathError, FileExistError, MultipleEntriesError
from gdrivefs.models import FileInfo
from gdrivefs.util.mime import FILE_MIME, FOLDER_MIME
from gdrivefs.util.naming import join_path, join_sanitized, sanitize_name, split_path

from .resolver import PathResolver
from .validators import validate_is_directory, validate_not_root

if TYPE_CHECKING:
    from gdrivefs.controller.drive_controller import GoogleDriveController

logger = logging.getLogger(__name__)


class HierarchyMutator:
    """
    mkdir -p, create, rename/move, delete and trash on top of a PathResolver.

    Nothing here is transactional: a failure half way through mkdir_all
    leaves the folders created so far in place, and running it again
    picks them up.
    """

    def __init__(
        self,
        api: DriveApiWrapper,
        resolver: PathResolver,
        controller: GoogleDriveController,
    ) -> None:
        self._api = api
        self._resolver = resolver
        self._controller = controller

    # ----------------------------
    # Directories
    # ----------------------------
    def mkdir_all(self, root: FileInfo, path: str) -> FileInfo:
        return self.make_directory_by_parts(root, split_path(path))

    def make_directory_by_parts(self, root: FileInfo, parts: Sequence[str]) -> FileInfo:
        """
        Return the folder at parts below root, creating missing segments.

        Raises:
            FileIsNotDirectoryError: a segment (or the target) is a file.
            MultipleEntriesError: a segment has several matches.
        """
        parts = list(parts)
        current = root

        for i, part in enumerate(parts):
            validate_is_directory(current, join_path(*parts[:i]))
            files = self._api.get_file_by_folder_and_name(
                current.file_id, part, fields=LOOKUP_FIELDS
            )
            parent_path = join_sanitized(parts[:i])
            if not files:
                created = self._api.create_file(current.file_id, part, FOLDER_MIME)
                current = created.with_parent_path(parent_path)
            elif len(files) == 1:
                current = files[0].with_parent_path(parent_path)
            else:
                raise MultipleEntriesError(join_path(*parts[: i + 1]), len(files))

        validate_is_directory(current, join_path(*parts))
        return current

    # ----------------------------
    # Files
    # ----------------------------
    def create_file(self, root: FileInfo, path: str) -> FileInfo:
        """
        Create an empty file at path, creating missing parent folders.

        Raises:
            EmptyPathError: path has no segment.
            ForbiddenOnRootError: path is the root.
            FileExistError: something already exists at path.
        """
        parts = split_path(path)
        if not parts:
            raise EmptyPathError()

        existing = self._resolver.find_parts(root, parts)
        if existing is not None:
            validate_not_root(root, existing)
            raise FileExistError(join_path(*parts))

        parent = root
        if len(parts) > 1:
            parent = self.make_directory_by_parts(root, parts[:-1])

        created = self._api.create_file(parent.file_id, parts[-1], FILE_MIME)
        return created.with_parent_path(join_sanitized(parts[:-1]))

    def rename(self, root: FileInfo, old_path: str, new_path: str) -> FileInfo:
        """
        Rename and/or move the entry at old_path to new_path.

        One update call sets the new name, adds the new parent and detaches
        every previous parent, so an entry with several parents ends up with
        exactly one.
        """
        new_parts = split_path(new_path)
        if not new_parts:
            raise EmptyPathError()

        file = self._resolver.resolve(root, old_path)
        validate_not_root(root, file)

        existing = self._resolver.find_parts(root, new_parts)
        if existing is not None and existing.file_id != file.file_id:
            raise FileExistError(join_path(*new_parts))

        parent = root
        if len(new_parts) > 1:
            parent = self.make_directory_by_parts(root, new_parts[:-1])

        renamed = self._api.rename_file(file, parent.file_id, new_parts[-1])
        return renamed.with_parent_path(join_sanitized(new_parts[:-1]))

    # ----------------------------
    # Delete / trash
    # ----------------------------
    def delete(self, root: FileInfo, path: str, *, trash: bool) -> None:
        """Delete (or trash) the entry at path; folders go with their content."""
        file = self._resolver.resolve(root, path)
        validate_not_root(root, file)
        self._api.delete_file(file, trash=trash)

    def delete_directory(self, root: FileInfo, path: str, *, trash: bool) -> None:
        file = self._resolver.resolve(root, path)
        validate_not_root(root, file)
        validate_is_directory(file, join_path(*split_path(path)))
        self._api.delete_file(file, trash=trash)

    def trash(self, root: FileInfo, path: str) -> None:
        self.delete(root, path, trash=True)

    def list_trash(self, root: FileInfo, scope_path: str = "", count: int = 0) -> list[FileInfo]:
        """
        Trashed entries located below scope_path.

        Drive only lists the trash globally, so each candidate's parent
        chain is walked upwards (one uncached get per ancestor) until it
        reaches the scope folder or runs out of parents. count > 0 caps the
        number of results.
        """
        scope = self._resolver.resolve(root, scope_path)
        base_path = "" if scope.file_id == root.file_id else scope.path

        results: list[FileInfo] = []
        for entry in self._controller.list_trashed():
            in_scope, parent_path = is_in_root(self._controller, scope.file_id, entry, "")
            if not in_scope:
                continue
            results.append(entry.with_parent_path(join_path(base_path, parent_path)))
            if count > 0 and len(results) >= count:
                break

        logger.debug("Found %d trashed entries below '%s'", len(results), base_path)
        return results


def is_in_root(
    controller: GoogleDriveController,
    root_id: str,
    file: FileInfo,
    base_path: str,
) -> tuple[bool, str]:
    """
    Whether file descends from root_id, and if so its parent path below root.

    Every parent is followed, so an entry with several parents is in scope
    as soon as one of its chains reaches root_id.
    """
    for parent_id in file.parents:
        if parent_id == root_id:
            return True, base_path

        parent = controller.get(parent_id, fields=ANCESTOR_FIELDS)
        in_root, parent_path = is_in_root(
            controller,
            root_id,
            parent,
            join_path(sanitize_name(parent.name), base_path),
        )
        if in_root:
            return True, parent_path

    return False, ""
