"""Public model exports for gdrivefs."""

from __future__ import annotations

from .config import DriveFsConfig, WriteBufferType
from .file_info import FileInfo

__all__ = [
    "FileInfo",
    "DriveFsConfig",
    "WriteBufferType",
]
