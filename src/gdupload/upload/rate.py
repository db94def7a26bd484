"""Throughput tracking for an upload in progress."""

from __future__ import annotations

import time
from typing import Callable

from gdupload.models import TransferProgress
from gdupload.util.humanize import format_rate


class TransferRateTracker:
    """Track bytes sent against a start time and format the throughput."""

    def __init__(
        self,
        total_bytes: int,
        *,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if total_bytes < 0:
            raise ValueError("total_bytes must be non-negative")
        self._clock = clock
        self.progress = TransferProgress(total_bytes=total_bytes, started_at=clock())

    @property
    def elapsed(self) -> float:
        return self._clock() - self.progress.started_at

    def record_and_format(self, bytes_so_far: int) -> str:
        """Record the cumulative byte count and return the rate, e.g. "1.5 MB/s"."""
        self.progress.bytes_sent = bytes_so_far
        return format_rate(bytes_so_far, self.elapsed)
