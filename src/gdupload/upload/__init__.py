"""Upload exports for gdupload."""

from __future__ import annotations

from .rate import TransferRateTracker
from .session import DEFAULT_CHUNK_SIZE, ProgressSink, UploadSession, format_progress_line

__all__ = [
    "UploadSession",
    "TransferRateTracker",
    "ProgressSink",
    "DEFAULT_CHUNK_SIZE",
    "format_progress_line",
]
