"""Public auth exports for gdupload."""

from __future__ import annotations

from .auth_session import DEFAULT_REDIRECT_URI, AuthSession, AuthState, extract_authorization_code
from .client_config import ClientConfig, load_client_config
from .credential_store import DEFAULT_CREDENTIALS_DIR, DEFAULT_TOKEN_NAME, CredentialStore

__all__ = [
    "AuthSession",
    "AuthState",
    "DEFAULT_REDIRECT_URI",
    "extract_authorization_code",
    "ClientConfig",
    "load_client_config",
    "CredentialStore",
    "DEFAULT_CREDENTIALS_DIR",
    "DEFAULT_TOKEN_NAME",
]
