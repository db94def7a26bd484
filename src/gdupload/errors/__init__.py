"""Public error exports for gdupload."""

from __future__ import annotations

from .exceptions import (
    ApiError,
    AuthError,
    AuthExchangeError,
    CacheIOError,
    ConfigError,
    FolderResolutionError,
    GDUploadError,
    HttpErrorInfo,
    InvalidArgumentError,
    ListError,
    LocalFileError,
    NetworkError,
    NotFoundError,
    PermissionError,
    QuotaExceededError,
    RateLimitError,
    UploadError,
    map_http_error,
)

__all__ = [
    "GDUploadError",
    "ConfigError",
    "CacheIOError",
    "AuthError",
    "AuthExchangeError",
    "FolderResolutionError",
    "UploadError",
    "LocalFileError",
    "ListError",
    "PermissionError",
    "InvalidArgumentError",
    "NotFoundError",
    "RateLimitError",
    "QuotaExceededError",
    "NetworkError",
    "ApiError",
    "HttpErrorInfo",
    "map_http_error",
]
