"""Google Drive files resource wrapper."""

from __future__ import annotations

import json
import logging
import time
from dataclasses import dataclass
from typing import Any, Callable, Optional, TypeVar

from google.auth.exceptions import RefreshError
from googleapiclient.errors import HttpError

from gdupload.errors import (
    ApiError,
    AuthError,
    GDUploadError,
    HttpErrorInfo,
    InvalidArgumentError,
    NetworkError,
    RateLimitError,
    map_http_error,
)
from gdupload.models import RemoteFile
from gdupload.util.mime import FOLDER_MIME
from gdupload.util.time import parse_rfc3339

from .fields import FILE_FIELDS, LIST_FIELDS

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class RetryPolicy:
    max_retries: int = 3
    initial_delay_sec: float = 1.0


class DriveCatalog:
    """
    Minimal capability over the Drive v3 `files` resource.

    Notes:
        - Read-only calls (find, list_recent) are retried on 429/5xx/network
          errors. Writes are never retried: a retried create could leave a
          duplicate behind.
        - Errors are raised as gdupload exceptions (see map_http_error).
    """

    def __init__(
        self,
        service: Any,
        *,
        retry_policy: Optional[RetryPolicy] = None,
    ) -> None:
        self._service = service
        self._retry_policy = retry_policy or RetryPolicy()

    # ----------------------------
    # Public API
    # ----------------------------
    def find(self, query: str, *, limit: int = 1) -> list[RemoteFile]:
        """Return at most `limit` items matching a Drive query string (one page)."""
        if not isinstance(query, str) or not query.strip():
            raise InvalidArgumentError("query must be a non-empty string")
        if limit < 1:
            raise InvalidArgumentError("limit must be positive", details={"limit": limit})

        return self._list_page(q=query, page_size=limit)

    def create_folder(self, name: str, *, description: str = "") -> RemoteFile:
        body: dict[str, Any] = {"name": name, "mimeType": FOLDER_MIME}
        if description:
            body["description"] = description
        req = self._service.files().create(body=body, fields=FILE_FIELDS)
        data = self._execute(req.execute, retry=False)
        return file_dict_to_remote_file(data)

    def begin_upload(self, metadata: dict[str, Any], media: Any) -> Any:
        """Return an unexecuted files.create request for a resumable media upload."""
        return self._service.files().create(
            body=metadata,
            media_body=media,
            fields=FILE_FIELDS,
        )

    def list_recent(self, limit: int = 10) -> list[RemoteFile]:
        """Return up to `limit` most recently modified, non-trashed items."""
        if limit < 1:
            raise InvalidArgumentError("limit must be positive", details={"limit": limit})
        return self._list_page(
            q="trashed = false",
            page_size=limit,
            order_by="modifiedTime desc",
        )

    def map_exception(self, exc: BaseException) -> GDUploadError:
        """Translate a googleapiclient/transport exception into a gdupload error."""
        if isinstance(exc, GDUploadError):
            return exc
        if isinstance(exc, HttpError):
            return map_http_error(http_error_to_info(exc), cause=exc)
        if isinstance(exc, RefreshError):
            return AuthError("OAuth token refresh was rejected", cause=exc)
        if isinstance(exc, (OSError, TimeoutError)):
            return NetworkError("Network error", cause=exc)
        return ApiError("Drive API error", cause=exc)

    # ----------------------------
    # Internals
    # ----------------------------
    def _list_page(
        self,
        *,
        q: str,
        page_size: int,
        order_by: Optional[str] = None,
    ) -> list[RemoteFile]:
        kwargs: dict[str, Any] = {"q": q, "pageSize": page_size, "fields": LIST_FIELDS}
        if order_by:
            kwargs["orderBy"] = order_by
        req = self._service.files().list(**kwargs)
        data = self._execute(req.execute)
        return [file_dict_to_remote_file(f) for f in data.get("files", [])]

    def _execute(self, func: Callable[[], T], *, retry: bool = True) -> T:
        delay = self._retry_policy.initial_delay_sec
        max_retries = self._retry_policy.max_retries if retry else 0
        for attempt in range(max_retries + 1):
            try:
                return func()
            except Exception as exc:
                mapped = self.map_exception(exc)
                if self._should_retry(mapped) and attempt < max_retries:
                    logger.info(
                        "Drive request failed (%s), retrying in %.1fs", mapped, delay
                    )
                    time.sleep(delay)
                    delay *= 2
                    continue
                if mapped is exc:
                    raise
                raise mapped from exc

        raise ApiError("Unexpected retry loop termination")

    def _should_retry(self, exc: Exception) -> bool:
        if isinstance(exc, (RateLimitError, NetworkError)):
            return True
        if isinstance(exc, ApiError):
            status_code = exc.details.get("status_code")
            return isinstance(status_code, int) and 500 <= status_code <= 599
        return False


def file_dict_to_remote_file(data: dict[str, Any]) -> RemoteFile:
    file_id = data.get("id")
    name = data.get("name", "")
    mime_type = data.get("mimeType", "")
    parents = data.get("parents", []) or []

    size = None
    if isinstance(data.get("size"), str) and data["size"].isdigit():
        size = int(data["size"])
    elif isinstance(data.get("size"), int):
        size = data["size"]

    modified_time = None
    if isinstance(data.get("modifiedTime"), str):
        try:
            modified_time = parse_rfc3339(data["modifiedTime"])
        except ValueError:
            modified_time = None

    description = data.get("description")
    link = data.get("webContentLink")
    return RemoteFile(
        file_id=file_id if isinstance(file_id, str) else "",
        name=name if isinstance(name, str) else "",
        mime_type=mime_type if isinstance(mime_type, str) else "",
        parents=list(parents) if isinstance(parents, list) else [],
        size=size,
        description=description if isinstance(description, str) else None,
        web_content_link=link if isinstance(link, str) else None,
        modified_time=modified_time,
    )


def http_error_to_info(exc: Any) -> HttpErrorInfo:
    status_code = getattr(getattr(exc, "resp", None), "status", None)
    reason = getattr(getattr(exc, "resp", None), "reason", None)

    message = None
    details: dict[str, Any] = {}

    content = getattr(exc, "content", None)
    if isinstance(content, (bytes, bytearray)):
        try:
            payload = json.loads(content.decode("utf-8"))
        except ValueError:
            payload = None
        err = payload.get("error") if isinstance(payload, dict) else None
        if isinstance(err, dict):
            message = err.get("message") or None
            errors = err.get("errors") or []
            if errors and isinstance(errors, list) and isinstance(errors[0], dict):
                details["domain"] = errors[0].get("domain")
                details["reason_detail"] = errors[0].get("reason")
                if isinstance(errors[0].get("reason"), str):
                    reason = errors[0]["reason"]

    if not isinstance(status_code, int):
        status_code = 0

    return HttpErrorInfo(
        status_code=status_code,
        reason=reason if isinstance(reason, str) else None,
        message=message if isinstance(message, str) else None,
        details=details or None,
    )
