"""OAuth helpers that build the Drive service used by gdrivefs."""

from __future__ import annotations

from .auth_info import AuthInfo
from .oauth_client import AuthenticateFunc, OAuthClient, authorized_http_for, drive_service_for
from .token_store import load_token, store_token

__all__ = [
    "AuthInfo",
    "AuthenticateFunc",
    "OAuthClient",
    "authorized_http_for",
    "drive_service_for",
    "load_token",
    "store_token",
]
