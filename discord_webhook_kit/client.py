from __future__ import annotations

import json
import logging
from types import TracebackType
from typing import Any
from urllib.parse import parse_qsl, urlencode, urlsplit, urlunsplit

from .edge import HttpxTransport
from .errors import EncodingError, Rejected, ServiceError, TransportError, UnsupportedOperation
from .models import Message, RateLimitState, parse_float, validate_identity
from .multipart import DEFAULT_MAX_ATTACHMENT_BYTES, EncodedRequestBody, encode
from .native import RequestsTransport
from .outcomes import SCOPE_GLOBAL, SCOPE_USER, Failed, RateLimited, SendOutcome, Succeeded
from .transport import AsyncTransport, Response, Transport

_DEFAULT_USER_AGENT = "discord-webhook-kit/0.1"
_DEFAULT_RETRY_AFTER = 1.0


class _WebhookClientBase:
    """
    Encoding and response interpretation shared by the blocking and the async
    client. Subclasses only differ in how they hand the request to their
    transport; each ``send_message`` issues exactly one request and never
    sleeps or retries.
    """

    def __init__(
        self,
        *,
        max_attachment_bytes: int = DEFAULT_MAX_ATTACHMENT_BYTES,
        wait: bool = True,
        default_username: str | None = None,
        default_avatar_url: str | None = None,
        user_agent: str = _DEFAULT_USER_AGENT,
        logger: logging.Logger | None = None,
    ):
        validate_identity(default_username, default_avatar_url)
        self.max_attachment_bytes = max_attachment_bytes
        self.wait = wait
        self.default_username = default_username
        self.default_avatar_url = default_avatar_url
        self.user_agent = user_agent
        self.logger = logger or logging.getLogger(__name__)

    def _encode(
        self,
        message: Message,
        prior_rate_limit: RateLimitState | None,
    ) -> EncodedRequestBody | Failed:
        self.logger.debug("webhook state=encoding attachments=%d", len(message.attachments))
        if prior_rate_limit is not None and prior_rate_limit.exhausted:
            self.logger.debug(
                "webhook bucket %s looked exhausted, next reset in %.2fs",
                prior_rate_limit.bucket,
                prior_rate_limit.delay(),
            )

        message = message.with_defaults(self.default_username, self.default_avatar_url)
        try:
            return encode(message, max_attachment_bytes=self.max_attachment_bytes)
        except EncodingError as exc:
            return self._fail(Failed(exc))

    def _request_args(self, webhook_url: str, body: EncodedRequestBody) -> tuple[str, dict[str, str], bytes]:
        url = _with_query(webhook_url, wait="true" if self.wait else "false")
        headers = {"Content-Type": body.content_type, "User-Agent": self.user_agent}
        self.logger.debug("webhook state=sending boundary=%s", body.boundary)
        return url, headers, body.to_bytes()

    def _interpret(self, response: Response) -> SendOutcome:
        self.logger.debug("webhook state=awaiting_result status=%s", response.status)
        rate_limit = RateLimitState.from_headers(response.headers)

        if response.is_success:
            outcome = Succeeded(
                status=response.status,
                body=response.body,
                data=_json_or_none(response.body),
                rate_limit=rate_limit,
            )
            self.logger.debug("webhook state=succeeded status=%s", response.status)
            return outcome

        if response.status == 429:
            outcome = _rate_limited(response, rate_limit)
            self.logger.debug("webhook state=rate_limited")
            self.logger.warning(
                "Rate limited by Discord webhook, retry after %s seconds (scope: %s)",
                outcome.retry_after,
                outcome.scope,
            )
            return outcome

        if 500 <= response.status < 600:
            return self._fail(Failed(ServiceError(response.status, response.body), rate_limit))
        return self._fail(Failed(Rejected(response.status, response.body), rate_limit))

    def _fail(self, outcome: Failed) -> Failed:
        self.logger.debug("webhook state=failed error=%s", type(outcome.error).__name__)
        self.logger.warning("Discord webhook send failed: %s", outcome.error)
        return outcome


class WebhookClient(_WebhookClientBase):
    """
    Blocking Discord webhook client. Sends ``payload_json`` plus file parts
    and reports rate limits to the caller instead of sleeping on them.
    """

    def __init__(self, transport: Transport | None = None, *, timeout: float = 30, **kwargs: Any):
        super().__init__(**kwargs)
        self._transport = transport or RequestsTransport(timeout=timeout)
        self._owns_transport = transport is None

    def __enter__(self) -> "WebhookClient":
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()

    def close(self) -> None:
        if self._owns_transport:
            self._transport.close()

    def send_message(
        self,
        webhook_url: str,
        message: Message,
        prior_rate_limit: RateLimitState | None = None,
    ) -> SendOutcome:
        body = self._encode(message, prior_rate_limit)
        if isinstance(body, Failed):
            return body

        try:
            url, headers, content = self._request_args(webhook_url, body)
            response = self._transport.send("POST", url, headers, content)
        except TransportError as exc:
            return self._fail(Failed(exc))
        return self._interpret(response)


class AsyncWebhookClient(_WebhookClientBase):
    """Async twin of :class:`WebhookClient` for event loops and edge workers."""

    def __init__(self, transport: AsyncTransport | None = None, *, timeout: float = 30, **kwargs: Any):
        super().__init__(**kwargs)
        self._transport = transport or HttpxTransport(timeout=timeout)
        self._owns_transport = transport is None

    async def __aenter__(self) -> "AsyncWebhookClient":
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_transport:
            await self._transport.aclose()

    async def send_message(
        self,
        webhook_url: str,
        message: Message,
        prior_rate_limit: RateLimitState | None = None,
    ) -> SendOutcome:
        body = self._encode(message, prior_rate_limit)
        if isinstance(body, Failed):
            return body

        try:
            url, headers, content = self._request_args(webhook_url, body)
            response = await self._transport.send("POST", url, headers, content)
        except TransportError as exc:
            return self._fail(Failed(exc))
        return self._interpret(response)


def _rate_limited(response: Response, rate_limit: RateLimitState | None) -> RateLimited:
    data = _json_or_none(response.body)
    if not isinstance(data, dict):
        data = {}

    retry_after = _delay(response.headers.get("Retry-After"))
    if retry_after is None:
        retry_after = _delay(str(data.get("retry_after", "")))
    if retry_after is None:
        retry_after = _DEFAULT_RETRY_AFTER

    scope = response.headers.get("X-RateLimit-Scope")
    if not scope:
        is_global = response.headers.get("X-RateLimit-Global", "").lower() == "true" or data.get("global") is True
        scope = SCOPE_GLOBAL if is_global else SCOPE_USER

    return RateLimited(retry_after=retry_after, scope=scope.lower(), body=response.body, rate_limit=rate_limit)


def _delay(value: str | None) -> float | None:
    seconds = parse_float(value)
    if seconds is None or seconds < 0:
        return None
    return seconds


def _json_or_none(body: bytes) -> Any:
    if not body:
        return None
    try:
        return json.loads(body)
    except ValueError:
        return None


def _with_query(url: str, **params: str) -> str:
    try:
        parts = urlsplit(url)
    except ValueError as exc:
        raise UnsupportedOperation(f"Invalid webhook URL {url!r}: {exc}") from exc
    query = [(key, value) for key, value in parse_qsl(parts.query, keep_blank_values=True) if key not in params]
    query.extend(params.items())
    return urlunsplit(parts._replace(query=urlencode(query)))


__all__ = ["AsyncWebhookClient", "WebhookClient"]
