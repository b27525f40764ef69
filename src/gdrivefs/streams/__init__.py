"""Stream adapters between file handles and Drive transfers."""

from __future__ import annotations

from .buffers import AsyncBufferWriter, AsyncChannelWriter, WriteSink, wrap_write_sink
from .download import DriveDownloadStream
from .pipe import PipeReader, PipeWriter, make_pipe
from .upload import StreamMediaUpload, UploadBridge

__all__ = [
    "AsyncBufferWriter",
    "AsyncChannelWriter",
    "DriveDownloadStream",
    "PipeReader",
    "PipeWriter",
    "StreamMediaUpload",
    "UploadBridge",
    "WriteSink",
    "make_pipe",
    "wrap_write_sink",
]
