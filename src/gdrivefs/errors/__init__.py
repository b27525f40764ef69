"""Public error exports for gdrivefs."""

from __future__ import annotations

from .exceptions import (
    ApiError,
    AuthError,
    BadRequestError,
    ConflictError,
    DriveApiCallError,
    DriveAuthError,
    DriveStreamError,
    EmptyPathError,
    FileClosedError,
    FileExistError,
    FileIsDirectoryError,
    FileIsNotDirectoryError,
    FileNotExistError,
    ForbiddenOnRootError,
    GDriveFsError,
    HttpErrorInfo,
    InternalError,
    InvalidArgumentError,
    InvalidSeekError,
    MultipleEntriesError,
    NetworkError,
    PermissionDeniedError,
    QuotaExceededError,
    RateLimitError,
    ReadOnlyError,
    RemoteNotFoundError,
    UnknownBufferTypeError,
    UnsupportedOperationError,
    WriteOnlyError,
    map_http_error,
)

__all__ = [
    "GDriveFsError",
    "FileNotExistError",
    "FileExistError",
    "FileIsDirectoryError",
    "FileIsNotDirectoryError",
    "MultipleEntriesError",
    "EmptyPathError",
    "ForbiddenOnRootError",
    "UnsupportedOperationError",
    "ReadOnlyError",
    "WriteOnlyError",
    "InvalidSeekError",
    "FileClosedError",
    "InvalidArgumentError",
    "UnknownBufferTypeError",
    "AuthError",
    "InternalError",
    "DriveApiCallError",
    "DriveAuthError",
    "PermissionDeniedError",
    "BadRequestError",
    "RemoteNotFoundError",
    "ConflictError",
    "RateLimitError",
    "QuotaExceededError",
    "NetworkError",
    "ApiError",
    "DriveStreamError",
    "HttpErrorInfo",
    "map_http_error",
]
