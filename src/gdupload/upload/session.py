"""Resumable upload of one local file with progress reporting."""

from __future__ import annotations

import logging
import os
import time
from typing import BinaryIO, Callable, Optional

from googleapiclient.http import MediaIoBaseUpload

from gdupload.catalog import DriveCatalog
from gdupload.catalog.drive_catalog import file_dict_to_remote_file
from gdupload.errors import LocalFileError, UploadError
from gdupload.models import RemoteFile, TransferProgress, UploadDescriptor
from gdupload.util.humanize import group_thousands

from .rate import TransferRateTracker

logger = logging.getLogger(__name__)

DEFAULT_CHUNK_SIZE = 8 * 1024 * 1024

ProgressSink = Callable[[str], None]


def format_progress_line(rate: str, bytes_sent: int, total_bytes: int) -> str:
    return f"Uploaded at {rate}, {group_thousands(bytes_sent)}/{group_thousands(total_bytes)}"


class UploadSession:
    """
    Stream a local file to Drive as a resumable upload.

    The progress sink is called synchronously from the transfer loop: once
    before the first chunk, after every chunk, and once on completion (for
    non-empty files). It receives a ready-to-print status line.

    A failed transfer is not resumed; call upload() again to restart from
    byte zero.
    """

    def __init__(
        self,
        catalog: DriveCatalog,
        *,
        chunk_size: int = DEFAULT_CHUNK_SIZE,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if chunk_size <= 0:
            raise ValueError("chunk_size must be positive")
        self._catalog = catalog
        self._chunk_size = chunk_size
        self._clock = clock
        self.last_progress: Optional[TransferProgress] = None
        self.last_rate: Optional[str] = None

    def check_local(self, local_path: str) -> int:
        """
        Open and size `local_path` without contacting Drive; return its size.

        Raises:
            LocalFileError: if the file cannot be opened or sized.
        """
        f, total = _open_local(local_path)
        with f:
            return total

    def upload(
        self,
        descriptor: UploadDescriptor,
        local_path: str,
        progress: Optional[ProgressSink] = None,
    ) -> RemoteFile:
        """
        Upload `local_path` under `descriptor`.

        Raises:
            LocalFileError: if the file cannot be opened or sized. Nothing is
                sent to Drive in that case.
            UploadError: on any transport failure during the transfer.
        """
        f, total = _open_local(local_path)
        with f:
            tracker = TransferRateTracker(total, clock=self._clock)
            self.last_progress = tracker.progress

            def emit(bytes_sent: int) -> None:
                self.last_rate = tracker.record_and_format(bytes_sent)
                if progress is not None:
                    progress(format_progress_line(self.last_rate, bytes_sent, total))

            logger.info("Start upload of %s (%d bytes)", local_path, total)
            emit(0)
            response = self._transfer(descriptor, f, local_path, emit)
            if total > 0:
                emit(total)

        remote = file_dict_to_remote_file(response)
        if remote.size is None:
            remote.size = total
        logger.info("Uploaded %r as %s", descriptor.title, remote.file_id)
        return remote

    def _transfer(self, descriptor, fd, local_path, emit) -> dict:
        media = MediaIoBaseUpload(
            fd,
            mimetype=descriptor.mime_type,
            chunksize=self._chunk_size,
            resumable=True,
        )
        response = None
        try:
            request = self._catalog.begin_upload(descriptor.to_metadata(), media)
            while response is None:
                status, response = request.next_chunk()
                if status is not None:
                    emit(status.resumable_progress)
        except Exception as exc:
            cause = self._catalog.map_exception(exc)
            raise UploadError(
                "Upload failed",
                details={"local_path": local_path, "title": descriptor.title, **cause.details},
                cause=cause,
            ) from exc
        return response


def _open_local(local_path: str) -> tuple[BinaryIO, int]:
    try:
        f = open(local_path, "rb")
    except OSError as exc:
        raise LocalFileError(
            "Unable to open file for upload",
            details={"local_path": local_path},
            cause=exc,
        ) from exc

    try:
        total = os.fstat(f.fileno()).st_size
    except OSError as exc:
        f.close()
        raise LocalFileError(
            "Unable to determine file size",
            details={"local_path": local_path},
            cause=exc,
        ) from exc
    return f, total
