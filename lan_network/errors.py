from __future__ import annotations

from enum import Enum


class ErrorKind(str, Enum):
    PARSE = "parse"
    NO_ROUTE = "no_route"
    DHCP_TIMEOUT = "dhcp_timeout"


class DiscoveryError(Exception):
    """A failed discovery step, tagged with what went wrong."""

    def __init__(self, kind: ErrorKind, message: str) -> None:
        super().__init__(message)
        self.kind = kind
        self.message = message

    def __repr__(self) -> str:
        return f"DiscoveryError({self.kind.value!r}, {self.message!r})"
