import json

import httpx
import pytest
from conftest import WEBHOOK_URL, AsyncRecordingTransport

from discord_webhook_kit import (
    Attachment,
    AsyncWebhookClient,
    AttachmentsTooLarge,
    Failed,
    HttpxTransport,
    Message,
    RateLimited,
    Rejected,
    Succeeded,
    TransportTimeout,
)


def mock_client(handler) -> AsyncWebhookClient:
    transport = HttpxTransport(client=httpx.AsyncClient(transport=httpx.MockTransport(handler)))
    return AsyncWebhookClient(transport)


@pytest.mark.asyncio
async def test_multipart_request_reaches_discord(message: Message) -> None:
    last_request: dict[str, httpx.Request] = {}

    def handler(request: httpx.Request) -> httpx.Response:
        last_request["request"] = request
        return httpx.Response(200, json={"id": "987"})

    outcome = await mock_client(handler).send_message(WEBHOOK_URL, message)

    assert isinstance(outcome, Succeeded)
    assert outcome.message_id == "987"
    request = last_request["request"]
    assert request.method == "POST"
    assert request.url.params["wait"] == "true"
    assert request.headers["content-type"].startswith("multipart/form-data; boundary=")
    assert b'name="payload_json"' in request.content
    assert b"\x89PNG\x00\x01\x02binary" in request.content


@pytest.mark.asyncio
async def test_rate_limit_is_surfaced_without_resending(message: Message) -> None:
    attempts = 0

    def handler(request: httpx.Request) -> httpx.Response:
        nonlocal attempts
        attempts += 1
        return httpx.Response(429, headers={"Retry-After": "2.5"}, json={"retry_after": 2.5, "global": False})

    outcome = await mock_client(handler).send_message(WEBHOOK_URL, message)

    assert isinstance(outcome, RateLimited)
    assert outcome.retry_after == 2.5
    assert attempts == 1


@pytest.mark.asyncio
async def test_rejected_keeps_body(message: Message) -> None:
    def handler(_: httpx.Request) -> httpx.Response:
        return httpx.Response(400, content=b'{"message": "bad"}')

    outcome = await mock_client(handler).send_message(WEBHOOK_URL, message)

    assert isinstance(outcome, Failed)
    assert isinstance(outcome.error, Rejected)
    assert outcome.error.body == b'{"message": "bad"}'


@pytest.mark.asyncio
async def test_timeout_becomes_failed_outcome(message: Message) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ReadTimeout("timed out", request=request)

    outcome = await mock_client(handler).send_message(WEBHOOK_URL, message)

    assert isinstance(outcome, Failed)
    assert isinstance(outcome.error, TransportTimeout)


@pytest.mark.asyncio
async def test_oversized_message_skips_transport() -> None:
    transport = AsyncRecordingTransport()
    client = AsyncWebhookClient(transport, max_attachment_bytes=4)

    outcome = await client.send_message(WEBHOOK_URL, Message(content="x", attachments=[Attachment("a.bin", b"12345")]))

    assert isinstance(outcome, Failed)
    assert isinstance(outcome.error, AttachmentsTooLarge)
    assert transport.calls == []


@pytest.mark.asyncio
async def test_async_context_manager_leaves_injected_transport_open() -> None:
    transport = AsyncRecordingTransport()
    async with AsyncWebhookClient(transport):
        pass
    assert not transport.closed


@pytest.mark.asyncio
async def test_payload_json_matches_message(message: Message) -> None:
    seen: dict[str, bytes] = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["body"] = request.content
        return httpx.Response(204)

    outcome = await mock_client(handler).send_message(WEBHOOK_URL, message)

    assert isinstance(outcome, Succeeded)
    body = seen["body"]
    start = body.index(b"\r\n\r\n") + 4
    payload = json.loads(body[start : body.index(b"\r\n--", start)])
    assert payload == message.to_payload()
