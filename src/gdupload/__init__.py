"""gdupload public API."""

from __future__ import annotations

from gdupload.auth import AuthSession, AuthState, ClientConfig, CredentialStore, load_client_config
from gdupload.catalog import DriveCatalog
from gdupload.config import UploadConfig
from gdupload.errors import (
    ApiError,
    AuthError,
    AuthExchangeError,
    CacheIOError,
    ConfigError,
    FolderResolutionError,
    GDUploadError,
    ListError,
    LocalFileError,
    NetworkError,
    NotFoundError,
    PermissionError,
    QuotaExceededError,
    RateLimitError,
    UploadError,
)
from gdupload.folders import FolderResolver
from gdupload.models import Credential, FolderHandle, RemoteFile, TransferProgress, UploadDescriptor
from gdupload.upload import TransferRateTracker, UploadSession
from gdupload.util.humanize import format_rate, format_size, group_thousands

__all__ = [
    # Pipeline
    "UploadConfig",
    "AuthSession",
    "AuthState",
    "ClientConfig",
    "CredentialStore",
    "load_client_config",
    "DriveCatalog",
    "FolderResolver",
    "UploadSession",
    "TransferRateTracker",
    # Models
    "Credential",
    "FolderHandle",
    "RemoteFile",
    "TransferProgress",
    "UploadDescriptor",
    # Formatting
    "format_size",
    "format_rate",
    "group_thousands",
    # Errors
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
    "NotFoundError",
    "RateLimitError",
    "QuotaExceededError",
    "NetworkError",
    "ApiError",
]
