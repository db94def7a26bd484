"""On-disk cache for the OAuth token."""

from __future__ import annotations

import json
import logging
import os
from typing import Optional
from urllib.parse import quote_plus

from google.oauth2.credentials import Credentials

from gdupload.errors import CacheIOError
from gdupload.models import Credential

logger = logging.getLogger(__name__)

DEFAULT_CREDENTIALS_DIR = ".credentials"
DEFAULT_TOKEN_NAME = "drive-api-cert.json"


class CredentialStore:
    """
    Load and save a single Credential.

    The file holds google-auth's authorized-user JSON (`Credentials.to_json()`)
    plus a `token_type` key. It lives at `<directory>/<quote_plus(token_name)>`;
    the directory is created with mode 0700 on first use.
    """

    def __init__(
        self,
        directory: str = DEFAULT_CREDENTIALS_DIR,
        token_name: str = DEFAULT_TOKEN_NAME,
    ) -> None:
        if not isinstance(directory, str) or not directory.strip():
            raise ValueError("directory must be a non-empty string")
        if not isinstance(token_name, str) or not token_name.strip():
            raise ValueError("token_name must be a non-empty string")
        self._directory = directory
        self._token_name = token_name

    @property
    def path(self) -> str:
        return os.path.join(self._directory, quote_plus(self._token_name))

    def cache_file(self) -> str:
        """
        Return the cache file path, creating its directory if needed.

        Raises:
            CacheIOError: if the directory cannot be created.
        """
        try:
            os.makedirs(self._directory, mode=0o700, exist_ok=True)
        except OSError as exc:
            raise CacheIOError(
                "Unable to create credential cache directory",
                details={"directory": self._directory},
                cause=exc,
            ) from exc
        return self.path

    def load(self) -> Optional[Credential]:
        """
        Return the cached Credential, or None when there is no usable cache.

        An absent, unreadable or malformed file is treated as not found.
        """
        path = self.cache_file()
        try:
            with open(path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except FileNotFoundError:
            logger.debug("No cached credential at %s", path)
            return None
        except (OSError, ValueError) as exc:
            logger.warning("Ignoring unreadable credential cache %s: %s", path, exc)
            return None

        if not isinstance(data, dict):
            logger.warning("Ignoring malformed credential cache %s: not a JSON object", path)
            return None

        try:
            creds = Credentials.from_authorized_user_info(data)
            return Credential.from_google(creds, data.get("token_type") or "Bearer")
        except ValueError as exc:
            logger.warning("Ignoring malformed credential cache %s: %s", path, exc)
            return None

    def save(self, credential: Credential) -> None:
        """
        Write `credential`, replacing any previous cache file.

        Raises:
            ValueError: if `credential` has no google-auth credential behind it.
            CacheIOError: if the file cannot be created or written.
        """
        if credential.google is None:
            raise ValueError("credential must carry a google-auth Credentials object")

        data = json.loads(credential.google.to_json())
        data["token_type"] = credential.token_type

        path = self.cache_file()
        logger.info("Saving credential file to %s", path)
        try:
            fd = os.open(path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o600)
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(data, f)
                f.write("\n")
        except OSError as exc:
            raise CacheIOError(
                "Unable to cache OAuth token",
                details={"token_file": path},
                cause=exc,
            ) from exc
