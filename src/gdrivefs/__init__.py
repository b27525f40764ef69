"""gdrivefs public API."""

from __future__ import annotations

import logging

from gdrivefs.auth import AuthInfo, OAuthClient
from gdrivefs.cache import Cache
from gdrivefs.controller import DriveApiWrapper, GoogleDriveController
from gdrivefs.errors import (
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
from gdrivefs.file import DriveFile
from gdrivefs.filesystem import GoogleDriveFs
from gdrivefs.models import DriveFsConfig, FileInfo, WriteBufferType

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    # High-level
    "GoogleDriveFs",
    "DriveFile",
    "DriveFsConfig",
    "WriteBufferType",
    # Auth
    "AuthInfo",
    "OAuthClient",
    # Building blocks
    "Cache",
    "DriveApiWrapper",
    "GoogleDriveController",
    "FileInfo",
    # Errors
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
