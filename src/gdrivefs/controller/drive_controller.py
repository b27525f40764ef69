"""Google Drive API controller."""

from __future__ import annotations

import functools
import io
import json
import logging
import time
from dataclasses import dataclass
from typing import Any, BinaryIO, Callable, Optional, Sequence, TypeVar

from googleapiclient.errors import HttpError
from googleapiclient.http import MediaIoBaseUpload

from gdrivefs.auth import (
    AuthenticateFunc,
    AuthInfo,
    OAuthClient,
    authorized_http_for,
    drive_service_for,
)
from gdrivefs.auth.oauth_client import DEFAULT_SCOPES
from gdrivefs.errors import (
    ApiError,
    DriveApiCallError,
    HttpErrorInfo,
    NetworkError,
    RateLimitError,
    map_http_error,
)
from gdrivefs.models import FileInfo
from gdrivefs.streams.download import DEFAULT_DOWNLOAD_CHUNK_SIZE, DriveDownloadStream
from gdrivefs.streams.upload import DEFAULT_UPLOAD_CHUNK_SIZE, StreamMediaUpload
from gdrivefs.util.mime import FILE_MIME, is_folder
from gdrivefs.util.time import parse_rfc3339

from .fields import FILE_FIELDS, LIST_FIELDS, LOOKUP_FIELDS, with_page_token

logger = logging.getLogger(__name__)

T = TypeVar("T")

# Returns a new transport (httplib2.Http-like) for one upload thread.
HttpFactory = Callable[[], Any]

# files.list refuses larger pages.
FILES_LIST_PAGE_SIZE_MAX: int = 1000

_HTTP_RANGE_NOT_SATISFIABLE: int = 416


@dataclass(frozen=True)
class _RetryPolicy:
    max_retries: int = 3
    initial_delay_sec: float = 1.0


class GoogleDriveController:
    """
    Drive v3 operations used by the filesystem.

    Every failure leaves this class as a DriveApiCallError subclass carrying
    the original exception. Rate limits, network errors and 5xx responses
    are retried with exponential backoff first.

    Notes:
        - The Drive `service` object is NOT exposed.
        - `supports_all_drives` is applied to all requests consistently.
        - httplib2 transports are not thread-safe. Content uploads run on
          their own threads and each one executes over a transport of its
          own; every other call uses the service's transport.
    """

    DEFAULT_SCOPES: tuple[str, ...] = DEFAULT_SCOPES

    def __init__(
        self,
        auth_info: AuthInfo,
        *,
        scopes: Optional[Sequence[str]] = None,
        supports_all_drives: bool = True,
        authenticate: Optional[AuthenticateFunc] = None,
    ) -> None:
        self._supports_all_drives = supports_all_drives
        self._retry_policy = _RetryPolicy()

        use_scopes = list(scopes) if scopes is not None else list(self.DEFAULT_SCOPES)
        client = OAuthClient(auth_info, authenticate=authenticate)
        creds = client.get_credentials(use_scopes, ensure_valid=True)
        self._service = drive_service_for(creds)
        self._upload_http_factory: Optional[HttpFactory] = functools.partial(
            authorized_http_for, creds
        )

    @classmethod
    def from_service(
        cls,
        service: Any,
        *,
        supports_all_drives: bool = True,
        retry_delay_sec: float = 1.0,
        upload_http_factory: Optional[HttpFactory] = None,
    ) -> "GoogleDriveController":
        """
        Create controller from a pre-built Drive service (useful for tests).

        upload_http_factory gives each content upload its own transport.
        Without it uploads use the service's transport, which is only safe
        when no other call runs while a file is open for writing.
        """
        obj = cls.__new__(cls)
        obj._supports_all_drives = supports_all_drives
        obj._retry_policy = _RetryPolicy(initial_delay_sec=retry_delay_sec)
        obj._service = service
        obj._upload_http_factory = upload_http_factory
        return obj

    # ----------------------------
    # Metadata
    # ----------------------------
    def get(self, file_id: str, *, fields: str = FILE_FIELDS) -> FileInfo:
        req = self._service.files().get(
            fileId=file_id,
            fields=fields,
            **self._common_get_kwargs(),
        )
        data = self._execute(req.execute)
        return _file_dict_to_file_info(data)

    def get_root(self) -> FileInfo:
        """The root folder of My Drive ("root" is an alias for its id)."""
        return self.get("root")

    def find_children_by_name(
        self,
        parent_id: str,
        name: str,
        *,
        fields: str = LOOKUP_FIELDS,
    ) -> list[FileInfo]:
        """Non-trashed children of parent_id named exactly name (already sanitized)."""
        q = _build_name_query(parent_id, name)
        return self._find_by_query(q, fields=with_page_token(fields))

    def list_children_page(
        self,
        parent_id: str,
        *,
        page_size: int = FILES_LIST_PAGE_SIZE_MAX,
        page_token: Optional[str] = None,
        fields: str = LIST_FIELDS,
    ) -> tuple[list[FileInfo], Optional[str]]:
        """
        One page of non-trashed children ordered by name.

        Returns:
            (children, next_page_token). The token is None on the last page.
        """
        page_size = max(1, min(page_size, FILES_LIST_PAGE_SIZE_MAX))
        req = self._service.files().list(
            q=_build_parent_query(parent_id),
            fields=with_page_token(fields),
            pageSize=page_size,
            pageToken=page_token,
            orderBy="name",
            **self._common_list_kwargs(),
        )
        data = self._execute(req.execute)
        files = [_file_dict_to_file_info(f) for f in data.get("files", [])]
        return files, data.get("nextPageToken") or None

    def list_trashed(self, *, fields: str = LIST_FIELDS) -> list[FileInfo]:
        return self._find_by_query("trashed = true", fields=with_page_token(fields))

    # ----------------------------
    # Mutations
    # ----------------------------
    def create(
        self,
        parent_id: str,
        name: str,
        mime_type: str,
        *,
        fields: str = FILE_FIELDS,
    ) -> FileInfo:
        """Create a folder, or an empty file when mime_type is not the folder type."""
        body = {"name": name, "mimeType": mime_type, "parents": [parent_id]}
        kwargs: dict[str, Any] = {}
        if not is_folder(mime_type):
            kwargs["media_body"] = MediaIoBaseUpload(
                io.BytesIO(b""), mimetype=mime_type, resumable=False
            )
        req = self._service.files().create(
            body=body,
            fields=fields,
            **kwargs,
            **self._common_write_kwargs(),
        )
        data = self._execute(req.execute)
        return _file_dict_to_file_info(data)

    def update(
        self,
        file_id: str,
        *,
        name: Optional[str] = None,
        add_parents: Optional[Sequence[str]] = None,
        remove_parents: Optional[Sequence[str]] = None,
        trashed: Optional[bool] = None,
        properties: Optional[dict[str, str]] = None,
        modified_time: Optional[str] = None,
        viewed_by_me_time: Optional[str] = None,
        fields: str = FILE_FIELDS,
    ) -> FileInfo:
        """
        Update metadata in one call.

        Times are RFC3339 strings. Parents are reattached through the
        addParents/removeParents query parameters.
        """
        body: dict[str, Any] = {}
        if name is not None:
            body["name"] = name
        if trashed is not None:
            body["trashed"] = trashed
        if properties is not None:
            body["properties"] = properties
        if modified_time is not None:
            body["modifiedTime"] = modified_time
        if viewed_by_me_time is not None:
            body["viewedByMeTime"] = viewed_by_me_time

        kwargs: dict[str, Any] = {}
        if add_parents:
            kwargs["addParents"] = ",".join(add_parents)
        if remove_parents:
            kwargs["removeParents"] = ",".join(remove_parents)

        req = self._service.files().update(
            fileId=file_id,
            body=body,
            fields=fields,
            **kwargs,
            **self._common_write_kwargs(),
        )
        data = self._execute(req.execute)
        return _file_dict_to_file_info(data)

    def update_content(
        self,
        file_id: str,
        stream: BinaryIO,
        *,
        mime_type: str = FILE_MIME,
        fields: str = FILE_FIELDS,
        chunk_size: int = DEFAULT_UPLOAD_CHUNK_SIZE,
    ) -> FileInfo:
        """Replace the content of file_id with everything read from stream until EOF."""
        media = StreamMediaUpload(stream, mimetype=mime_type, chunksize=chunk_size)
        req = self._service.files().update(
            fileId=file_id,
            media_body=media,
            fields=fields,
            **self._common_write_kwargs(),
        )
        execute = req.execute
        if self._upload_http_factory is not None:
            execute = functools.partial(req.execute, http=self._upload_http_factory())
        data = self._execute(execute)
        return _file_dict_to_file_info(data)

    def delete(self, file_id: str) -> None:
        req = self._service.files().delete(
            fileId=file_id,
            **self._common_write_kwargs(),
        )
        self._execute(req.execute)

    # ----------------------------
    # Content
    # ----------------------------
    def download(
        self,
        file_id: str,
        *,
        offset: int = 0,
        size: Optional[int] = None,
        chunk_size: int = DEFAULT_DOWNLOAD_CHUNK_SIZE,
    ) -> DriveDownloadStream:
        """Open a lazy ranged stream over the content of file_id starting at offset."""
        return DriveDownloadStream(
            functools.partial(self.fetch_range, file_id),
            offset=offset,
            size=size,
            chunk_size=chunk_size,
        )

    def fetch_range(self, file_id: str, start: int, end: int) -> bytes:
        """Bytes [start, end] (inclusive) of the content; b"" past the end."""
        req = self._service.files().get_media(
            fileId=file_id,
            **self._common_get_kwargs(),
        )
        req.headers["Range"] = f"bytes={start}-{end}"
        try:
            return self._execute(req.execute)
        except DriveApiCallError as exc:
            if exc.details.get("status_code") == _HTTP_RANGE_NOT_SATISFIABLE:
                return b""
            raise

    # ----------------------------
    # Internals
    # ----------------------------
    def _common_get_kwargs(self) -> dict[str, Any]:
        if not self._supports_all_drives:
            return {}
        return {"supportsAllDrives": True}

    def _common_list_kwargs(self) -> dict[str, Any]:
        if not self._supports_all_drives:
            return {}
        return {"supportsAllDrives": True, "includeItemsFromAllDrives": True}

    def _common_write_kwargs(self) -> dict[str, Any]:
        if not self._supports_all_drives:
            return {}
        return {"supportsAllDrives": True}

    def _find_by_query(self, q: str, *, fields: str) -> list[FileInfo]:
        all_files: list[FileInfo] = []
        page_token: Optional[str] = None

        while True:
            logger.debug("Listing files: %s", q)
            req = self._service.files().list(
                q=q,
                fields=fields,
                pageSize=FILES_LIST_PAGE_SIZE_MAX,
                pageToken=page_token,
                **self._common_list_kwargs(),
            )
            data = self._execute(req.execute)
            for f in data.get("files", []):
                all_files.append(_file_dict_to_file_info(f))

            page_token = data.get("nextPageToken")
            if not page_token:
                break

        return all_files

    def _execute(self, func: Callable[[], T]) -> T:
        delay = self._retry_policy.initial_delay_sec
        for attempt in range(self._retry_policy.max_retries + 1):
            try:
                return func()
            except Exception as exc:
                mapped = self._map_exception(exc)
                if self._should_retry(mapped) and attempt < self._retry_policy.max_retries:
                    logger.warning(
                        "Drive call failed (%s), retrying in %.1fs", mapped, delay
                    )
                    time.sleep(delay)
                    delay *= 2
                    continue
                raise mapped from exc

        raise ApiError("Unexpected retry loop termination")

    def _should_retry(self, exc: Exception) -> bool:
        if isinstance(exc, RateLimitError):
            return True
        if isinstance(exc, NetworkError):
            return True
        if isinstance(exc, ApiError):
            status_code = getattr(exc, "details", {}).get("status_code")
            return isinstance(status_code, int) and 500 <= status_code <= 599
        return False

    def _map_exception(self, exc: Exception) -> DriveApiCallError:
        if isinstance(exc, DriveApiCallError):
            return exc

        if isinstance(exc, HttpError):
            info = _http_error_to_info(exc)
            return map_http_error(info, cause=exc)

        if isinstance(exc, (OSError, TimeoutError)):
            return NetworkError("Network error", cause=exc)

        return ApiError("Drive API error", cause=exc)


def _build_parent_query(parent_id: str) -> str:
    return f"'{parent_id}' in parents and trashed = false"


def _build_name_query(parent_id: str, name: str) -> str:
    return f"'{parent_id}' in parents and name='{name}' and trashed = false"


def _file_dict_to_file_info(data: dict[str, Any]) -> FileInfo:
    file_id = data.get("id")
    name = data.get("name", "")
    mime_type = data.get("mimeType", "")
    parents = data.get("parents", []) or []
    trashed = bool(data.get("trashed", False))

    modified_time = None
    created_time = None

    if isinstance(data.get("modifiedTime"), str):
        try:
            modified_time = parse_rfc3339(data["modifiedTime"])
        except ValueError:
            modified_time = None

    if isinstance(data.get("createdTime"), str):
        try:
            created_time = parse_rfc3339(data["createdTime"])
        except ValueError:
            created_time = None

    size = None
    if isinstance(data.get("size"), str) and data["size"].isdigit():
        size = int(data["size"])
    elif isinstance(data.get("size"), int):
        size = data["size"]

    md5 = data.get("md5Checksum")
    properties = data.get("properties")

    return FileInfo(
        file_id=file_id if isinstance(file_id, str) else "",
        name=name if isinstance(name, str) else "",
        mime_type=mime_type if isinstance(mime_type, str) else "",
        parents=tuple(parents) if isinstance(parents, list) else (),
        trashed=trashed,
        modified_time=modified_time,
        created_time=created_time,
        size=size,
        md5_checksum=md5 if isinstance(md5, str) else None,
        properties=dict(properties) if isinstance(properties, dict) else {},
    )


def _http_error_to_info(exc: HttpError) -> HttpErrorInfo:
    status_code = getattr(getattr(exc, "resp", None), "status", None)
    reason = getattr(getattr(exc, "resp", None), "reason", None)

    message = None
    details: dict[str, Any] = {}

    content = getattr(exc, "content", None)
    if isinstance(content, (bytes, bytearray)) and content:
        try:
            payload = json.loads(content.decode("utf-8"))
        except ValueError:
            payload = None
        err = payload.get("error") if isinstance(payload, dict) else None
        if isinstance(err, dict):
            message = err.get("message") or None
            errors = err.get("errors") or []
            if errors and isinstance(errors, list) and isinstance(errors[0], dict):
                details["domain"] = errors[0].get("domain")
                details["reason_detail"] = errors[0].get("reason")
                if isinstance(errors[0].get("reason"), str):
                    reason = errors[0]["reason"]

    if not isinstance(status_code, int):
        status_code = 0

    return HttpErrorInfo(
        status_code=status_code,
        reason=reason if isinstance(reason, str) else None,
        message=message,
        details=details or None,
    )
