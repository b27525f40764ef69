"""Exception hierarchy and HTTP error mapping for gdrivefs."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional


class GDriveFsError(Exception):
    """
    Base exception for gdrivefs.

    Attributes:
        details: Optional structured information (e.g., path, HTTP status).
        cause: Optional original exception that triggered this error.
    """

    def __init__(
        self,
        message: str,
        *,
        details: Optional[dict[str, Any]] = None,
        cause: Optional[BaseException] = None,
    ) -> None:
        super().__init__(message)
        self.details = details or {}
        self.cause = cause


# ----------------------------
# Path / tree errors
# ----------------------------
class FileNotExistError(GDriveFsError):
    """Raised when a path (or one of its ancestors) does not exist."""

    def __init__(self, path: str) -> None:
        super().__init__(f"'{path}' does not exist", details={"path": path})
        self.path = path


class FileExistError(GDriveFsError):
    """Raised when an entry already exists at the target path."""

    def __init__(self, path: str) -> None:
        super().__init__(f"'{path}' already exists", details={"path": path})
        self.path = path


class FileIsDirectoryError(GDriveFsError):
    """Raised when a file operation targets a directory."""

    def __init__(self, path: str) -> None:
        super().__init__(f"'{path}' is a directory", details={"path": path})
        self.path = path


class FileIsNotDirectoryError(GDriveFsError):
    """Raised when a directory operation targets a file."""

    def __init__(self, path: str) -> None:
        super().__init__(f"file {path} is not a directory", details={"path": path})
        self.path = path


class MultipleEntriesError(GDriveFsError):
    """
    Raised when a path segment matches several entries.

    Drive allows duplicate names inside one folder; the ambiguity is
    reported, never resolved by picking one.
    """

    def __init__(self, path: str, count: int = 0) -> None:
        super().__init__(
            f"multiple entries found for '{path}'",
            details={"path": path, "count": count},
        )
        self.path = path
        self.count = count


class EmptyPathError(GDriveFsError):
    """Raised when an operation requires a non-empty path."""

    def __init__(self) -> None:
        super().__init__("path cannot be empty")


class ForbiddenOnRootError(GDriveFsError):
    """Raised when a mutation targets the root directory."""

    def __init__(self) -> None:
        super().__init__("forbidden for root directory")


# ----------------------------
# Usage errors
# ----------------------------
class UnsupportedOperationError(GDriveFsError):
    """Raised for operations Drive cannot express (random writes, O_RDWR, chown...)."""


class ReadOnlyError(GDriveFsError):
    """Raised when writing to a handle opened for reading."""

    def __init__(self) -> None:
        super().__init__("file is opened in read-only mode")


class WriteOnlyError(GDriveFsError):
    """Raised when reading from a handle opened for writing."""

    def __init__(self) -> None:
        super().__init__("file is opened in write-only mode")


class InvalidSeekError(GDriveFsError):
    """Raised when a seek would move before the start of the file."""


class FileClosedError(GDriveFsError):
    """Raised when a closed handle is used."""

    def __init__(self) -> None:
        super().__init__("I/O operation on closed file")


class InvalidArgumentError(GDriveFsError):
    """Raised when arguments are invalid (bad mode string, bad scopes, etc.)."""


class UnknownBufferTypeError(GDriveFsError):
    """Raised when an unknown write buffer type is configured."""


class AuthError(GDriveFsError):
    """Raised when OAuth authentication/refresh fails."""


class InternalError(GDriveFsError):
    """Raised when an internal invariant is broken. Indicates a bug."""


# ----------------------------
# Remote / stream errors
# ----------------------------
class DriveApiCallError(GDriveFsError):
    """
    Raised when a call to the Drive API fails.

    Every transport failure is wrapped in this class (or one of its
    subclasses below); the original exception is kept in ``cause``.
    """

    def __init__(
        self,
        message: str = "problem calling the drive API",
        *,
        details: Optional[dict[str, Any]] = None,
        cause: Optional[BaseException] = None,
    ) -> None:
        super().__init__(message, details=details, cause=cause)


class DriveAuthError(DriveApiCallError):
    """Raised on HTTP 401."""


class PermissionDeniedError(DriveApiCallError):
    """Raised when access is denied (HTTP 403 non-quota)."""


class BadRequestError(DriveApiCallError):
    """Raised when Drive rejects the request arguments (HTTP 400)."""


class RemoteNotFoundError(DriveApiCallError):
    """Raised when a Drive resource id is not found (HTTP 404)."""


class ConflictError(DriveApiCallError):
    """Raised when a conflict occurs (HTTP 409/412)."""


class RateLimitError(DriveApiCallError):
    """Raised when rate-limited (HTTP 429)."""


class QuotaExceededError(DriveApiCallError):
    """Raised when quota is exceeded (HTTP 403 with quota-related reason)."""


class NetworkError(DriveApiCallError):
    """Raised when network/timeout issues prevent the request."""


class ApiError(DriveApiCallError):
    """Raised for unclassified API errors (5xx, unknown 4xx, etc.)."""


class DriveStreamError(GDriveFsError):
    """Raised when a stream opened on Drive content fails."""

    def __init__(self, cause: BaseException) -> None:
        super().__init__(f"problem with drive stream: {cause}", cause=cause)


@dataclass(frozen=True)
class HttpErrorInfo:
    """Lightweight HTTP error information for mapping to gdrivefs exceptions."""

    status_code: int
    reason: str | None = None
    message: str | None = None
    details: dict[str, Any] | None = None


_QUOTA_REASON_KEYWORDS: tuple[str, ...] = (
    "quota",
    "dailyLimitExceeded",
    "usageLimits",
    "storageQuotaExceeded",
)

_RATE_LIMIT_REASONS: tuple[str, ...] = (
    "rateLimitExceeded",
    "userRateLimitExceeded",
)


def _is_quota_reason(reason: str | None) -> bool:
    if not reason:
        return False
    return any(key.lower() in reason.lower() for key in _QUOTA_REASON_KEYWORDS)


def map_http_error(
    info: HttpErrorInfo,
    *,
    cause: Optional[BaseException] = None,
) -> DriveApiCallError:
    """
    Map an HTTP error to a gdrivefs exception.

    Policy:
        - 401 -> DriveAuthError
        - 403 -> RateLimitError for rate-limit reasons, QuotaExceededError if
          quota-related, PermissionDeniedError otherwise
        - 404 -> RemoteNotFoundError
        - 409/412 -> ConflictError
        - 429 -> RateLimitError
        - 400 -> BadRequestError
        - 5xx and anything else -> ApiError
    """
    details: dict[str, Any] = {
        "status_code": info.status_code,
        "reason": info.reason,
    }
    if info.details:
        details.update(info.details)

    message = info.message or f"HTTP error {info.status_code}"

    if info.status_code == 400:
        return BadRequestError(message, details=details, cause=cause)
    if info.status_code == 401:
        return DriveAuthError(message, details=details, cause=cause)
    if info.status_code == 403:
        if info.reason in _RATE_LIMIT_REASONS:
            return RateLimitError(message, details=details, cause=cause)
        if _is_quota_reason(info.reason):
            return QuotaExceededError(message, details=details, cause=cause)
        return PermissionDeniedError(message, details=details, cause=cause)
    if info.status_code == 404:
        return RemoteNotFoundError(message, details=details, cause=cause)
    if info.status_code in (409, 412):
        return ConflictError(message, details=details, cause=cause)
    if info.status_code == 429:
        return RateLimitError(message, details=details, cause=cause)

    return ApiError(message, details=details, cause=cause)
