"""Authentication parameters for gdrivefs."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

_FLOWS = ("local_server", "console")


@dataclass(slots=True, frozen=True)
class AuthInfo:
    """
    OAuth parameters for an installed application.

    kind must be "oauth"; data must include:
        - client_secrets_file: client id/secret JSON from the Cloud console
        - token_file: where the authorized-user token is restored from and
          stored to, so later runs skip the authorization step

    Optional keys:
        - flow: "local_server" (default) opens a loopback redirect;
          "console" hands the authorization URL to a callback that
          returns the code
        - port: loopback port for the local server flow (0 picks one)
    """

    kind: str
    data: dict[str, Any]

    def __post_init__(self) -> None:
        if self.kind != "oauth":
            raise ValueError("AuthInfo.kind must be 'oauth'")

        if not isinstance(self.data, dict):
            raise TypeError("AuthInfo.data must be a dict")

        for key in ("client_secrets_file", "token_file"):
            value = self.data.get(key)
            if not isinstance(value, str) or not value.strip():
                raise ValueError(f"AuthInfo.data['{key}'] must be a non-empty string")

        if self.flow not in _FLOWS:
            raise ValueError(f"AuthInfo.data['flow'] must be one of {_FLOWS}")

        port = self.data.get("port", 0)
        if not isinstance(port, int) or isinstance(port, bool) or port < 0:
            raise ValueError("AuthInfo.data['port'] must be a non-negative int")

    @property
    def client_secrets_file(self) -> str:
        return str(self.data["client_secrets_file"])

    @property
    def token_file(self) -> str:
        return str(self.data["token_file"])

    @property
    def flow(self) -> str:
        return str(self.data.get("flow", "local_server"))

    @property
    def port(self) -> int:
        return int(self.data.get("port", 0))
