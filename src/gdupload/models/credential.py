"""Cached OAuth token record."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

from google.oauth2.credentials import Credentials


@dataclass(slots=True, frozen=True)
class Credential:
    """
    OAuth2 token as persisted in the credential cache.

    The fields are a snapshot of the google-auth `Credentials` object kept in
    `google`. google-auth refreshes that object in place, so comparing a fresh
    snapshot against this one tells whether the token changed. `expiry` is
    naive UTC, as google-auth keeps it.
    """

    access_token: str
    refresh_token: Optional[str] = None
    expiry: Optional[datetime] = None
    token_type: str = "Bearer"
    google: Optional[Credentials] = field(default=None, compare=False, repr=False)

    def __post_init__(self) -> None:
        if not isinstance(self.access_token, str) or not self.access_token:
            raise ValueError("Credential.access_token must be a non-empty string")

    @classmethod
    def from_google(cls, creds: Credentials, token_type: str = "Bearer") -> "Credential":
        """
        Snapshot a google-auth credential.

        Raises:
            ValueError: if `creds` carries no access token.
        """
        return cls(
            access_token=creds.token or "",
            refresh_token=creds.refresh_token,
            expiry=creds.expiry,
            token_type=token_type or "Bearer",
            google=creds,
        )

    def refreshed(self) -> "Credential":
        """Snapshot the current state of the backing google-auth credential."""
        if self.google is None:
            return self
        return Credential.from_google(self.google, self.token_type)
