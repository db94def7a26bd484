"""OAuth client secret loading for gdupload."""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any

from gdupload.errors import ConfigError

_SECTIONS: tuple[str, ...] = ("installed", "web")
_DEFAULT_AUTH_URI = "https://accounts.google.com/o/oauth2/auth"
_DEFAULT_TOKEN_URI = "https://oauth2.googleapis.com/token"


@dataclass(slots=True, frozen=True)
class ClientConfig:
    """
    Application-level OAuth client, as downloaded from the Cloud console.

    `raw` keeps the original document so it can be handed to
    google_auth_oauthlib unchanged.
    """

    client_id: str
    client_secret: str
    auth_uri: str
    token_uri: str
    raw: dict[str, Any]

    @classmethod
    def from_dict(cls, data: Any) -> "ClientConfig":
        if not isinstance(data, dict):
            raise ConfigError("Client secret must be a JSON object")

        section_name = next((name for name in _SECTIONS if name in data), None)
        if section_name is None:
            raise ConfigError(
                "Client secret has no 'installed' or 'web' section",
                details={"keys": sorted(data)},
            )

        section = data[section_name]
        if not isinstance(section, dict):
            raise ConfigError(f"Client secret section '{section_name}' must be an object")

        for key in ("client_id", "client_secret"):
            value = section.get(key)
            if not isinstance(value, str) or not value.strip():
                raise ConfigError(f"Client secret is missing '{key}'")

        return cls(
            client_id=section["client_id"],
            client_secret=section["client_secret"],
            auth_uri=section.get("auth_uri") or _DEFAULT_AUTH_URI,
            token_uri=section.get("token_uri") or _DEFAULT_TOKEN_URI,
            raw=data,
        )


def load_client_config(path: str) -> ClientConfig:
    """
    Read and validate the OAuth client secret JSON at `path`.

    Raises:
        ConfigError: if the file is missing, unreadable or malformed.
    """
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except OSError as exc:
        raise ConfigError(
            "Unable to read client secret file",
            details={"client_secrets_file": path},
            cause=exc,
        ) from exc
    except ValueError as exc:
        raise ConfigError(
            "Unable to parse client secret file",
            details={"client_secrets_file": path},
            cause=exc,
        ) from exc

    try:
        return ClientConfig.from_dict(data)
    except ConfigError as exc:
        exc.details.setdefault("client_secrets_file", path)
        raise
