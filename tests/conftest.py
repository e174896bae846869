from __future__ import annotations

from collections.abc import Mapping
from typing import Any

import pytest

from discord_webhook_kit import Attachment, Message, Response

WEBHOOK_URL = "https://discord.test/api/webhooks/12345/abcdef"


class RecordingTransport:
    """Transport double that replays canned responses and records every call."""

    def __init__(self, *responses: Response | Exception):
        self.responses = list(responses)
        self.calls: list[dict[str, Any]] = []
        self.closed = False

    def _next(self, method: str, url: str, headers: Mapping[str, str], body: bytes) -> Response:
        self.calls.append({"method": method, "url": url, "headers": dict(headers), "body": body})
        if not self.responses:
            raise AssertionError("transport called more often than expected")
        item = self.responses.pop(0)
        if isinstance(item, Exception):
            raise item
        return item

    def send(self, method: str, url: str, headers: Mapping[str, str], body: bytes) -> Response:
        return self._next(method, url, headers, body)

    def close(self) -> None:
        self.closed = True


class AsyncRecordingTransport(RecordingTransport):
    async def send(self, method: str, url: str, headers: Mapping[str, str], body: bytes) -> Response:  # type: ignore[override]
        return self._next(method, url, headers, body)

    async def aclose(self) -> None:
        self.closed = True


@pytest.fixture
def message() -> Message:
    return Message(
        content="hello world",
        attachments=[Attachment("image.png", b"\x89PNG\x00\x01\x02binary")],
    )
