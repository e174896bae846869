"""Transport protocols: the client depends on these, not on a concrete HTTP stack."""

from __future__ import annotations

import dataclasses
import json
from collections.abc import Mapping
from typing import Any, Protocol
from urllib.parse import urlsplit

from requests.structures import CaseInsensitiveDict

from .errors import UnsupportedOperation

_MAX_HOST_LABEL = 63


@dataclasses.dataclass(frozen=True)
class Response:
    status: int
    headers: CaseInsensitiveDict[str]
    body: bytes = b""

    @classmethod
    def build(cls, status: int, headers: Mapping[str, str] | None = None, body: bytes = b"") -> Response:
        return cls(status=status, headers=CaseInsensitiveDict(headers or {}), body=body)

    @property
    def is_success(self) -> bool:
        return 200 <= self.status < 300

    @property
    def text(self) -> str:
        return self.body.decode("utf-8", errors="replace")

    def json(self) -> Any:
        return json.loads(self.body)


def check_url(url: str) -> None:
    """
    Reject URLs neither backend can send, before either HTTP stack parses them,
    so both report the same ``UnsupportedOperation``.
    """
    if any(char.isspace() or ord(char) < 0x20 or ord(char) == 0x7F for char in url):
        raise UnsupportedOperation(f"URL contains whitespace or control characters: {url!r}")
    try:
        parts = urlsplit(url)
        host = parts.hostname
        parts.port
    except ValueError as exc:
        raise UnsupportedOperation(f"Invalid URL {url!r}: {exc}") from exc
    if parts.scheme not in ("http", "https"):
        raise UnsupportedOperation(f"Unsupported URL scheme in {url!r}")
    if not host:
        raise UnsupportedOperation(f"URL has no host: {url!r}")
    if ":" not in host:
        labels = host[:-1].split(".") if host.endswith(".") else host.split(".")
        if any(not label or len(label) > _MAX_HOST_LABEL for label in labels):
            raise UnsupportedOperation(f"Invalid host name in {url!r}")


class Transport(Protocol):
    def send(self, method: str, url: str, headers: Mapping[str, str], body: bytes) -> Response: ...

    def close(self) -> None: ...


class AsyncTransport(Protocol):
    async def send(self, method: str, url: str, headers: Mapping[str, str], body: bytes) -> Response: ...

    async def aclose(self) -> None: ...


__all__ = ["AsyncTransport", "Response", "Transport", "check_url"]
