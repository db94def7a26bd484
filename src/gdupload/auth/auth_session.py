"""OAuth session: cached token or interactive authorization, then a Drive transport."""

from __future__ import annotations

import enum
import logging
from typing import Any, Callable, Optional, Sequence
from urllib.parse import parse_qs, urlparse

from google_auth_oauthlib.flow import Flow
from googleapiclient.discovery import build
from rich.console import Console

from gdupload.errors import AuthError, AuthExchangeError, InvalidArgumentError
from gdupload.models import Credential

from .client_config import ClientConfig
from .credential_store import CredentialStore

logger = logging.getLogger(__name__)

# Loopback redirect for desktop clients. Nothing needs to listen on it: the
# operator copies the code (or the whole address) from the browser.
DEFAULT_REDIRECT_URI = "http://localhost"


class AuthState(str, enum.Enum):
    START = "start"
    CACHE_LOOKUP = "cache_lookup"
    CACHE_HIT = "cache_hit"
    CACHE_MISS = "cache_miss"
    INTERACTIVE_FLOW = "interactive_flow"
    PERSIST_TOKEN = "persist_token"
    READY = "ready"


def extract_authorization_code(text: str, expected_state: Optional[str] = None) -> str:
    """
    Return the authorization code from what the operator pasted.

    Accepts either the bare code or the full address the browser was
    redirected to (`http://localhost/?code=...&state=...`).

    Raises:
        AuthExchangeError: if the address reports an error, carries no code,
            or belongs to a different authorization request.
    """
    if "://" not in text:
        return text

    params = parse_qs(urlparse(text).query)
    if "error" in params:
        raise AuthExchangeError(
            "Authorization was denied",
            details={"error": params["error"][0]},
        )

    code = (params.get("code") or [""])[0]
    if not code:
        raise AuthExchangeError("Redirect address carries no authorization code")

    state = (params.get("state") or [None])[0]
    if expected_state and state is not None and state != expected_state:
        raise AuthExchangeError("Authorization state mismatch; restart to get a fresh URL")
    return code


class AuthSession:
    """
    Turn a one-time interactive authorization into a reusable Drive session.

    States:
        START -> CACHE_LOOKUP -> CACHE_HIT -> READY
        START -> CACHE_LOOKUP -> CACHE_MISS -> INTERACTIVE_FLOW
              -> PERSIST_TOKEN -> READY

    A cached token is used as-is. If it has expired, google-auth refreshes it
    on the first request; call persist_refreshed() at the end of the run to
    write the new token back. A token that cannot be refreshed surfaces later
    as an AuthError from the Drive call that hit it.
    """

    def __init__(
        self,
        client_config: ClientConfig,
        store: CredentialStore,
        *,
        scopes: Sequence[str],
        redirect_uri: str = DEFAULT_REDIRECT_URI,
        input_func: Callable[[str], str] = input,
        console: Optional[Console] = None,
    ) -> None:
        if not scopes or not all(isinstance(s, str) and s.strip() for s in scopes):
            raise InvalidArgumentError("scopes must be a non-empty sequence of strings")
        if not isinstance(redirect_uri, str) or not redirect_uri.strip():
            raise InvalidArgumentError("redirect_uri must be a non-empty string")

        self._client_config = client_config
        self._store = store
        self._scopes = list(scopes)
        self._redirect_uri = redirect_uri
        self._input = input_func
        self._console = console or Console()
        self._credential: Optional[Credential] = None
        self.history: list[AuthState] = [AuthState.START]

    @property
    def state(self) -> AuthState:
        """The last state reached by authorize()."""
        return self.history[-1]

    @property
    def credential(self) -> Optional[Credential]:
        """The token as last read from or written to the store."""
        return self._credential

    def authorize(self) -> Any:
        """
        Return an authorized Drive v3 service resource.

        Raises:
            CacheIOError: if the credential cache cannot be created or written.
            AuthExchangeError: if the interactive code is missing or rejected.
            AuthError: if the Drive service cannot be built.
        """
        self._enter(AuthState.CACHE_LOOKUP)
        credential = self._store.load()

        if credential is not None:
            self._enter(AuthState.CACHE_HIT)
        else:
            self._enter(AuthState.CACHE_MISS)
            self._enter(AuthState.INTERACTIVE_FLOW)
            credential = self._token_from_web()
            self._enter(AuthState.PERSIST_TOKEN)
            self._store.save(credential)

        self._credential = credential
        service = self.build_service(credential)
        self._enter(AuthState.READY)
        return service

    def persist_refreshed(self) -> bool:
        """
        Save the token again if google-auth refreshed it since it was stored.

        Returns True when the cache file was rewritten.

        Raises:
            CacheIOError: if the cache file cannot be written.
        """
        if self._credential is None:
            return False
        current = self._credential.refreshed()
        if current == self._credential:
            return False
        logger.info("Access token was refreshed during the run; updating cache")
        self._store.save(current)
        self._credential = current
        return True

    def _enter(self, state: AuthState) -> None:
        logger.debug("Auth state %s -> %s", self.state.value, state.value)
        self.history.append(state)

    def build_service(self, credential: Credential) -> Any:
        if credential.google is None:
            raise AuthError("Credential has no google-auth credentials to build a transport")
        try:
            return build("drive", "v3", credentials=credential.google, cache_discovery=False)
        except Exception as exc:
            raise AuthError("Failed to build Drive service", cause=exc) from exc

    def _token_from_web(self) -> Credential:
        flow = Flow.from_client_config(
            self._client_config.raw,
            scopes=self._scopes,
            redirect_uri=self._redirect_uri,
        )
        auth_url, state = flow.authorization_url(
            access_type="offline",
            prompt="consent",
        )

        self._console.print(
            "Go to the following link in your browser, approve access, then paste the "
            "address you were redirected to (or just its code value):",
            highlight=False,
        )
        self._console.print(auth_url, highlight=False, soft_wrap=True, markup=False)

        try:
            text = self._input("Enter verification code: ").strip()
        except (EOFError, OSError) as exc:
            raise AuthExchangeError("Unable to read authorization code", cause=exc) from exc
        if not text:
            raise AuthExchangeError("Authorization code is empty")
        code = extract_authorization_code(text, state)

        try:
            token = flow.fetch_token(code=code)
        except Exception as exc:
            raise AuthExchangeError(
                "Unable to retrieve token from web",
                details={"hint": "Restart to get a fresh authorization URL"},
                cause=exc,
            ) from exc

        creds = flow.credentials
        if not creds.token:
            raise AuthExchangeError("Token exchange returned no access token")

        token_type = "Bearer"
        if isinstance(token, dict) and isinstance(token.get("token_type"), str):
            token_type = token["token_type"]
        return Credential.from_google(creds, token_type)
