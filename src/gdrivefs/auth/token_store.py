"""Load and store authorized-user tokens as JSON files."""

from __future__ import annotations

import logging
import os
from typing import Optional, Sequence

from google.oauth2.credentials import Credentials

from gdrivefs.errors import AuthError

logger = logging.getLogger(__name__)


def load_token(token_file: str, scopes: Sequence[str]) -> Optional[Credentials]:
    """
    Restore credentials saved by :func:`store_token`.

    Returns None when the file does not exist; raises AuthError when it
    exists but cannot be decoded.
    """
    if not os.path.exists(token_file):
        return None
    try:
        creds = Credentials.from_authorized_user_file(token_file, scopes=list(scopes))
    except (OSError, ValueError) as exc:
        raise AuthError(
            "unable to decode token",
            details={"token_file": token_file},
            cause=exc,
        ) from exc
    logger.debug("Loaded token from %s", token_file)
    return creds


def store_token(token_file: str, creds: Credentials) -> None:
    """Write credentials to token_file, creating parent directories."""
    token_dir = os.path.dirname(token_file)
    try:
        if token_dir:
            os.makedirs(token_dir, exist_ok=True)
        with open(token_file, "w", encoding="utf-8") as f:
            f.write(creds.to_json())
    except OSError as exc:
        raise AuthError(
            "unable to store token",
            details={"token_file": token_file},
            cause=exc,
        ) from exc
    logger.debug("Stored token to %s", token_file)
