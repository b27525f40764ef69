from .mime import (
    FILE_MIME,
    FOLDER_MIME,
    GOOGLE_APP_MIMES,
    is_download_disallowed,
    is_folder,
    is_google_app,
)
from .naming import (
    PATH_SEPARATORS,
    is_path_separator,
    join_path,
    join_sanitized,
    sanitize_name,
    split_path,
)
from .time import normalize_dt, parse_rfc3339, to_rfc3339

__all__ = [
    "FILE_MIME",
    "FOLDER_MIME",
    "GOOGLE_APP_MIMES",
    "is_folder",
    "is_google_app",
    "is_download_disallowed",
    "PATH_SEPARATORS",
    "is_path_separator",
    "sanitize_name",
    "split_path",
    "join_path",
    "join_sanitized",
    "parse_rfc3339",
    "to_rfc3339",
    "normalize_dt",
]
