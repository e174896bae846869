"""
Exception hierarchy shared by the encoder, the transports and the client.

The webhook client never lets an encoding or transport error escape; it wraps
them in a ``Failed`` outcome so the caller always gets a value back.
"""


class DiscordWebhookError(Exception):
    """Base class for every error raised by this package."""


class EncodingError(DiscordWebhookError):
    """The message could not be turned into a multipart request body."""


class AttachmentsTooLarge(EncodingError):
    def __init__(self, total: int, limit: int):
        self.total = total
        self.limit = limit
        super().__init__(f"Attachments total {total} bytes, limit is {limit} bytes")


class BoundaryCollision(EncodingError):
    def __init__(self, attempts: int):
        self.attempts = attempts
        super().__init__(f"Could not find a collision-free multipart boundary after {attempts} attempts")


class SerializationFailed(EncodingError):
    def __init__(self, reason: str):
        self.reason = reason
        super().__init__(f"Message payload is not JSON serializable: {reason}")


class TransportError(DiscordWebhookError):
    """The request never produced a usable HTTP response."""


class ConnectionFailed(TransportError):
    pass


class TransportTimeout(TransportError):
    pass


class MalformedResponse(TransportError):
    pass


class UnsupportedOperation(TransportError):
    pass


class WebhookError(DiscordWebhookError):
    """Discord answered, but not with a success status."""

    def __init__(self, status: int, body: bytes):
        self.status = status
        self.body = body
        super().__init__(f"Discord webhook responded with status={status}: {body[:200]!r}")


class Rejected(WebhookError):
    """Non-retryable client error (bad payload, unknown webhook, ...)."""


class ServiceError(WebhookError):
    """Discord side failure, worth retrying with backoff."""


__all__ = [
    "AttachmentsTooLarge",
    "BoundaryCollision",
    "ConnectionFailed",
    "DiscordWebhookError",
    "EncodingError",
    "MalformedResponse",
    "Rejected",
    "SerializationFailed",
    "ServiceError",
    "TransportError",
    "TransportTimeout",
    "UnsupportedOperation",
    "WebhookError",
]
