"""OAuth credentials and Drive service construction."""

from __future__ import annotations

import logging
from typing import Callable, Optional, Sequence

from google.auth.exceptions import GoogleAuthError
from google.auth.transport.requests import Request
from google_auth_httplib2 import AuthorizedHttp
from google_auth_oauthlib.flow import InstalledAppFlow
from googleapiclient.discovery import build
from googleapiclient.http import build_http

from gdrivefs.errors import AuthError, InvalidArgumentError

from .auth_info import AuthInfo
from .token_store import load_token, store_token

logger = logging.getLogger(__name__)

DEFAULT_SCOPES: tuple[str, ...] = ("https://www.googleapis.com/auth/drive",)

# Receives the authorization URL, returns the code the user pasted back.
AuthenticateFunc = Callable[[str], str]

_CONSOLE_REDIRECT_URI = "http://localhost"


class OAuthClient:
    """Create OAuth credentials and the Drive v3 service built from them."""

    def __init__(
        self,
        auth_info: AuthInfo,
        *,
        authenticate: Optional[AuthenticateFunc] = None,
    ) -> None:
        if auth_info.kind != "oauth":
            raise InvalidArgumentError("OAuthClient requires AuthInfo(kind='oauth')")
        if auth_info.flow == "console" and authenticate is None:
            raise InvalidArgumentError("console flow requires an authenticate callback")
        self._auth_info = auth_info
        self._authenticate = authenticate

    def get_credentials(self, scopes: Sequence[str] = DEFAULT_SCOPES, ensure_valid: bool = True):
        """
        Return credentials for scopes.

        A stored token is reused (and refreshed when ensure_valid is set);
        otherwise the configured authorization flow runs and the new token
        is stored.

        Raises:
            AuthError: on load/refresh/flow failures.
            InvalidArgumentError: if scopes is invalid.
        """
        if not scopes or not all(isinstance(s, str) and s.strip() for s in scopes):
            raise InvalidArgumentError("scopes must be a non-empty sequence of strings")

        token_file = self._auth_info.token_file
        creds = load_token(token_file, scopes)
        if creds is not None:
            if not ensure_valid:
                return creds
            if not creds.valid and creds.refresh_token:
                try:
                    creds.refresh(Request())
                except GoogleAuthError as exc:
                    raise AuthError(
                        "failed to refresh OAuth credentials",
                        details={"token_file": token_file},
                        cause=exc,
                    ) from exc
                store_token(token_file, creds)
            if creds.valid:
                return creds
            logger.info("Stored token is no longer valid, authorizing again")

        creds = self._run_flow(scopes)
        store_token(token_file, creds)
        return creds

    def build_drive_service(self, scopes: Sequence[str] = DEFAULT_SCOPES, ensure_valid: bool = True):
        """Build a googleapiclient Drive v3 resource."""
        creds = self.get_credentials(scopes=scopes, ensure_valid=ensure_valid)
        return drive_service_for(creds)

    def _run_flow(self, scopes: Sequence[str]):
        client_secrets = self._auth_info.client_secrets_file
        try:
            flow = InstalledAppFlow.from_client_secrets_file(client_secrets, scopes=list(scopes))
            if self._auth_info.flow == "console":
                flow.redirect_uri = _CONSOLE_REDIRECT_URI
                url, _ = flow.authorization_url(access_type="offline", prompt="consent")
                code = self._authenticate(url)
                flow.fetch_token(code=code)
                return flow.credentials
            return flow.run_local_server(port=self._auth_info.port)
        except Exception as exc:
            raise AuthError(
                "authenticate error",
                details={
                    "client_secrets_file": client_secrets,
                    "token_file": self._auth_info.token_file,
                },
                cause=exc,
            ) from exc


def drive_service_for(credentials):
    """Build a googleapiclient Drive v3 resource authorized with credentials."""
    try:
        return build("drive", "v3", credentials=credentials, cache_discovery=False)
    except Exception as exc:
        raise AuthError("failed to build Drive service", cause=exc) from exc


def authorized_http_for(credentials) -> AuthorizedHttp:
    """
    A new authorized transport for credentials.

    httplib2.Http objects are not thread-safe: every thread issuing
    requests needs its own, passed as ``execute(http=...)``.
    """
    return AuthorizedHttp(credentials, http=build_http())
