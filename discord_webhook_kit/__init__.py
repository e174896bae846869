from .client import AsyncWebhookClient, WebhookClient
from .edge import HttpxTransport
from .errors import (
    AttachmentsTooLarge,
    BoundaryCollision,
    ConnectionFailed,
    DiscordWebhookError,
    EncodingError,
    MalformedResponse,
    Rejected,
    SerializationFailed,
    ServiceError,
    TransportError,
    TransportTimeout,
    UnsupportedOperation,
    WebhookError,
)
from .log import init_logging
from .models import Attachment, Embed, EmbedField, EmbedFooter, EmbedImage, Message, RateLimitState
from .multipart import DEFAULT_MAX_ATTACHMENT_BYTES, EncodedRequestBody, Part, encode
from .native import RequestsTransport
from .outcomes import Failed, RateLimited, SendOutcome, Succeeded
from .transport import AsyncTransport, Response, Transport

__all__ = [
    "DEFAULT_MAX_ATTACHMENT_BYTES",
    "AsyncTransport",
    "AsyncWebhookClient",
    "Attachment",
    "AttachmentsTooLarge",
    "BoundaryCollision",
    "ConnectionFailed",
    "DiscordWebhookError",
    "Embed",
    "EmbedField",
    "EmbedFooter",
    "EmbedImage",
    "EncodedRequestBody",
    "EncodingError",
    "Failed",
    "HttpxTransport",
    "MalformedResponse",
    "Message",
    "Part",
    "RateLimitState",
    "RateLimited",
    "Rejected",
    "RequestsTransport",
    "Response",
    "SendOutcome",
    "SerializationFailed",
    "ServiceError",
    "Succeeded",
    "Transport",
    "TransportError",
    "TransportTimeout",
    "UnsupportedOperation",
    "WebhookClient",
    "WebhookError",
    "encode",
    "init_logging",
]
