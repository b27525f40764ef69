"""In-memory stand-in for GoogleDriveController used by filesystem-level tests."""

import functools
import itertools
import threading
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Optional

from gdrivefs.errors import ApiError, RemoteNotFoundError
from gdrivefs.models import FileInfo
from gdrivefs.streams.download import DriveDownloadStream
from gdrivefs.util.mime import FILE_MIME, FOLDER_MIME, is_folder
from gdrivefs.util.time import parse_rfc3339

ROOT_ID = "root"


@dataclass
class _Entry:
    file_id: str
    name: str
    mime_type: str
    parents: list
    content: bytes = b""
    trashed: bool = False
    properties: dict = field(default_factory=dict)
    modified_time: datetime = field(
        default_factory=lambda: datetime(2025, 1, 1, tzinfo=timezone.utc)
    )
    viewed_by_me_time: Optional[datetime] = None


class FakeController:
    """
    Behaves like GoogleDriveController over a dict of entries.

    Duplicate names are allowed, like on Drive. Every call is recorded in
    ``calls`` as (method, first_argument).
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._ids = itertools.count(1)
        self.entries: dict[str, _Entry] = {
            ROOT_ID: _Entry(ROOT_ID, "My Drive", FOLDER_MIME, [])
        }
        self.calls: list[tuple] = []
        self.fail_uploads: Optional[Exception] = None
        self.upload_chunk_sizes: list[int] = []

    # ----------------------------
    # Seeding helpers
    # ----------------------------
    def add(self, parent_id: str, name: str, *, folder: bool = False, content: bytes = b"",
            mime_type: Optional[str] = None) -> str:
        file_id = f"id{next(self._ids)}"
        self.entries[file_id] = _Entry(
            file_id,
            name,
            mime_type or (FOLDER_MIME if folder else FILE_MIME),
            [parent_id],
            content=content,
        )
        return file_id

    def content_of(self, file_id: str) -> bytes:
        return self.entries[file_id].content

    def children_of(self, parent_id: str) -> list[_Entry]:
        return [
            e for e in self.entries.values()
            if parent_id in e.parents and not e.trashed
        ]

    def remote_calls(self, *names: str) -> list[tuple]:
        return [c for c in self.calls if not names or c[0] in names]

    # ----------------------------
    # Controller surface
    # ----------------------------
    def get(self, file_id: str, *, fields: str = "") -> FileInfo:
        self.calls.append(("get", file_id))
        return self._info(self._entry(file_id))

    def get_root(self) -> FileInfo:
        return self.get(ROOT_ID)

    def find_children_by_name(self, parent_id: str, name: str, *, fields: str = "") -> list[FileInfo]:
        self.calls.append(("find_children_by_name", parent_id, name))
        with self._lock:
            return [self._info(e) for e in self.children_of(parent_id) if e.name == name]

    def list_children_page(self, parent_id: str, *, page_size: int = 1000,
                           page_token: Optional[str] = None, fields: str = ""):
        self.calls.append(("list_children_page", parent_id, page_size, page_token))
        with self._lock:
            children = sorted(self.children_of(parent_id), key=lambda e: e.name)
        start = int(page_token) if page_token else 0
        page = children[start : start + page_size]
        end = start + len(page)
        token = str(end) if end < len(children) else None
        return [self._info(e) for e in page], token

    def list_trashed(self, *, fields: str = "") -> list[FileInfo]:
        self.calls.append(("list_trashed",))
        with self._lock:
            return [self._info(e) for e in self.entries.values() if e.trashed]

    def create(self, parent_id: str, name: str, mime_type: str, *, fields: str = "") -> FileInfo:
        self.calls.append(("create", parent_id, name, mime_type))
        with self._lock:
            self._entry(parent_id)
            file_id = self.add(parent_id, name, mime_type=mime_type)
            return self._info(self.entries[file_id])

    def update(self, file_id: str, *, name=None, add_parents=None, remove_parents=None,
               trashed=None, properties=None, modified_time=None, viewed_by_me_time=None,
               fields: str = "") -> FileInfo:
        self.calls.append(("update", file_id))
        with self._lock:
            entry = self._entry(file_id)
            if name is not None:
                entry.name = name
            for parent in remove_parents or []:
                entry.parents.remove(parent)
            for parent in add_parents or []:
                entry.parents.append(parent)
            if trashed is not None:
                entry.trashed = trashed
            if properties is not None:
                entry.properties.update(properties)
            if modified_time is not None:
                entry.modified_time = parse_rfc3339(modified_time)
            if viewed_by_me_time is not None:
                entry.viewed_by_me_time = parse_rfc3339(viewed_by_me_time)
            return self._info(entry)

    def update_content(self, file_id: str, stream, *, mime_type: str = FILE_MIME,
                       fields: str = "", chunk_size: int = 1024) -> FileInfo:
        self.calls.append(("update_content", file_id))
        self.upload_chunk_sizes.append(chunk_size)
        self._entry(file_id)
        data = bytearray()
        while True:
            chunk = stream.read(chunk_size)
            if self.fail_uploads is not None:
                raise self.fail_uploads
            if not chunk:
                break
            data.extend(chunk)
        with self._lock:
            entry = self._entry(file_id)
            entry.content = bytes(data)
            entry.modified_time = datetime(2025, 6, 1, tzinfo=timezone.utc)
            return self._info(entry)

    def delete(self, file_id: str) -> None:
        self.calls.append(("delete", file_id))
        with self._lock:
            self._entry(file_id)
            doomed = [file_id]
            while doomed:
                current = doomed.pop()
                doomed.extend(e.file_id for e in self.entries.values() if current in e.parents)
                self.entries.pop(current, None)

    def download(self, file_id: str, *, offset: int = 0, size: Optional[int] = None,
                 chunk_size: int = 1024) -> DriveDownloadStream:
        self.calls.append(("download", file_id, offset))
        return DriveDownloadStream(
            functools.partial(self.fetch_range, file_id),
            offset=offset,
            size=size,
            chunk_size=chunk_size,
        )

    def fetch_range(self, file_id: str, start: int, end: int) -> bytes:
        self.calls.append(("fetch_range", file_id, start, end))
        return self._entry(file_id).content[start : end + 1]

    # ----------------------------
    # Internals
    # ----------------------------
    def _entry(self, file_id: str) -> _Entry:
        entry = self.entries.get(file_id)
        if entry is None:
            raise RemoteNotFoundError(
                "File not found", details={"status_code": 404, "file_id": file_id}
            )
        return entry

    def _info(self, entry: _Entry) -> FileInfo:
        return FileInfo(
            file_id=entry.file_id,
            name=entry.name,
            mime_type=entry.mime_type,
            parents=tuple(entry.parents),
            trashed=entry.trashed,
            modified_time=entry.modified_time,
            size=None if is_folder(entry.mime_type) else len(entry.content),
            properties=dict(entry.properties),
        )


def upload_failure() -> ApiError:
    return ApiError("upload rejected", details={"status_code": 500})
