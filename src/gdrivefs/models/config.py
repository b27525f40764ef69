"""Driver configuration for gdrivefs."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from gdrivefs.errors import InvalidArgumentError, UnknownBufferTypeError

_MIB: int = 1024 * 1024

# Resumable upload chunks must be a multiple of 256 KiB.
_UPLOAD_CHUNK_ALIGNMENT: int = 256 * 1024


class WriteBufferType(str, Enum):
    """How writes are buffered before they reach the upload pipe."""

    NONE = "none"
    SIMPLE = "simple"
    ASYNC = "async"
    CHAN = "chan"


@dataclass(frozen=True, slots=True)
class DriveFsConfig:
    """
    Options recognized by GoogleDriveFs.

    Attributes:
        write_buffer_type: Buffering strategy wrapped around the upload pipe.
        write_buffer_size: Buffer size in bytes. 0 disables buffering whatever
            the buffer type.
        trash_for_delete: Move entries to the trash instead of deleting them.
        log_readers_and_writers: Log the lifecycle of every stream at INFO.
        use_cache: Store child lookups in the cache.
        pipe_capacity: Bytes the upload pipe holds before write() blocks.
        download_chunk_size: Bytes fetched per ranged download request.
        upload_chunk_size: Bytes sent per resumable upload request.
    """

    write_buffer_type: WriteBufferType = WriteBufferType.NONE
    write_buffer_size: int = 0
    trash_for_delete: bool = False
    log_readers_and_writers: bool = False
    use_cache: bool = True
    pipe_capacity: int = 4 * _MIB
    download_chunk_size: int = 4 * _MIB
    upload_chunk_size: int = 4 * _MIB

    def __post_init__(self) -> None:
        if not isinstance(self.write_buffer_type, WriteBufferType):
            try:
                buffer_type = WriteBufferType(self.write_buffer_type or "none")
            except ValueError as exc:
                raise UnknownBufferTypeError(
                    f"unknown buffer type: {self.write_buffer_type!r}",
                    details={"write_buffer_type": self.write_buffer_type},
                    cause=exc,
                ) from exc
            object.__setattr__(self, "write_buffer_type", buffer_type)

        if self.write_buffer_size < 0:
            raise InvalidArgumentError("write_buffer_size must be >= 0")

        for key in ("pipe_capacity", "download_chunk_size"):
            if getattr(self, key) <= 0:
                raise InvalidArgumentError(f"{key} must be > 0")

        if (
            self.upload_chunk_size <= 0
            or self.upload_chunk_size % _UPLOAD_CHUNK_ALIGNMENT != 0
        ):
            raise InvalidArgumentError(
                "upload_chunk_size must be a positive multiple of 256 KiB",
                details={"upload_chunk_size": self.upload_chunk_size},
            )

    @property
    def buffered(self) -> bool:
        return (
            self.write_buffer_size > 0
            and self.write_buffer_type is not WriteBufferType.NONE
        )
