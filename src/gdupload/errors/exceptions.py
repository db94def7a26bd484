"""Exception hierarchy and HTTP error mapping for gdupload."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional


class GDUploadError(Exception):
    """
    Base exception for gdupload.

    Attributes:
        details: Optional structured information (e.g., HTTP status, path).
        cause: Optional original exception that triggered this error.
    """

    def __init__(
        self,
        message: str,
        *,
        details: Optional[dict[str, Any]] = None,
        cause: Optional[BaseException] = None,
    ) -> None:
        super().__init__(message)
        self.details = details or {}
        self.cause = cause


# ----------------------------
# Run-level errors (one per pipeline step)
# ----------------------------
class ConfigError(GDUploadError):
    """Raised when the client secret or command-line options are unusable."""


class CacheIOError(GDUploadError):
    """Raised when the credential cache directory or file cannot be written."""


class AuthError(GDUploadError):
    """Raised when an authorized Drive transport cannot be built."""


class AuthExchangeError(AuthError):
    """Raised when the interactive authorization code is missing or rejected."""


class FolderResolutionError(GDUploadError):
    """Raised when the destination folder lookup is rejected."""


class UploadError(GDUploadError):
    """Raised when a transfer fails. The upload must restart from byte zero."""


class LocalFileError(UploadError):
    """Raised when the local source file cannot be opened or sized."""


class ListError(GDUploadError):
    """Raised when the post-upload file listing fails."""


# ----------------------------
# Drive API errors (raised by the catalog, wrapped as `cause` above)
# ----------------------------
class PermissionError(GDUploadError):
    """Raised when access is denied (HTTP 403 non-quota)."""


class InvalidArgumentError(GDUploadError):
    """Raised when request arguments are invalid (HTTP 400, etc.)."""


class NotFoundError(GDUploadError):
    """Raised when a Drive resource is not found (HTTP 404)."""


class RateLimitError(GDUploadError):
    """Raised when rate-limited (HTTP 429)."""


class QuotaExceededError(GDUploadError):
    """Raised when quota is exceeded (HTTP 403 with quota-related reason)."""


class NetworkError(GDUploadError):
    """Raised when network/timeout issues prevent the request."""


class ApiError(GDUploadError):
    """Raised for unclassified API errors (5xx, unknown 4xx, etc.)."""


@dataclass(frozen=True)
class HttpErrorInfo:
    """Lightweight HTTP error information for mapping to gdupload exceptions."""

    status_code: int
    reason: str | None = None
    message: str | None = None
    details: dict[str, Any] | None = None


_QUOTA_REASON_KEYWORDS: tuple[str, ...] = (
    "quota",
    "rateLimitExceeded",
    "userRateLimitExceeded",
    "dailyLimitExceeded",
    "usageLimits",
    "storageQuotaExceeded",
)


def _is_quota_reason(reason: str | None) -> bool:
    if not reason:
        return False
    return any(key.lower() in reason.lower() for key in _QUOTA_REASON_KEYWORDS)


def map_http_error(
    info: HttpErrorInfo,
    *,
    cause: Optional[BaseException] = None,
) -> GDUploadError:
    """
    Map an HTTP error to a gdupload exception.

    Policy:
        - 401 -> AuthError (token rejected and not refreshable)
        - 403 -> PermissionError, or QuotaExceededError if quota-related
        - 404 -> NotFoundError
        - 429 -> RateLimitError
        - 400 -> InvalidArgumentError
        - otherwise -> ApiError
    """
    details: dict[str, Any] = {
        "status_code": info.status_code,
        "reason": info.reason,
    }
    if info.details:
        details.update(info.details)

    message = info.message or f"HTTP error {info.status_code}"

    if info.status_code == 400:
        return InvalidArgumentError(message, details=details, cause=cause)
    if info.status_code == 401:
        return AuthError(message, details=details, cause=cause)
    if info.status_code == 403:
        if _is_quota_reason(info.reason):
            return QuotaExceededError(message, details=details, cause=cause)
        return PermissionError(message, details=details, cause=cause)
    if info.status_code == 404:
        return NotFoundError(message, details=details, cause=cause)
    if info.status_code == 429:
        return RateLimitError(message, details=details, cause=cause)

    return ApiError(message, details=details, cause=cause)
