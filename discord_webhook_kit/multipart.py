"""
multipart/form-data encoding for webhook messages with file uploads.

Discord expects the JSON body in a ``payload_json`` part and every file in a
``files[i]`` part, where ``i`` matches the ``id`` in the ``attachments`` array
of the JSON payload.
"""

from __future__ import annotations

import dataclasses
import json
import secrets
from collections.abc import Callable

from .errors import AttachmentsTooLarge, BoundaryCollision, SerializationFailed
from .models import Message

# Non-boosted guilds accept 8 MiB of uploads per message.
DEFAULT_MAX_ATTACHMENT_BYTES = 8 * 1024 * 1024

_BOUNDARY_ATTEMPTS = 2
_CRLF = b"\r\n"


def generate_boundary() -> str:
    return f"discord-webhook-kit-{secrets.token_hex(16)}"


@dataclasses.dataclass(frozen=True)
class Part:
    name: str
    data: bytes
    filename: str | None = None
    content_type: str | None = None

    @property
    def headers(self) -> tuple[tuple[str, str], ...]:
        disposition = f'form-data; name="{self.name}"'
        if self.filename is not None:
            disposition += f'; filename="{_quote(self.filename)}"'
        headers = [("Content-Disposition", disposition)]
        if self.content_type is not None:
            headers.append(("Content-Type", self.content_type))
        return tuple(headers)


@dataclasses.dataclass(frozen=True)
class EncodedRequestBody:
    """One send attempt's worth of multipart body. Re-encode for a retry."""

    boundary: str
    parts: tuple[Part, ...]

    @property
    def content_type(self) -> str:
        return f"multipart/form-data; boundary={self.boundary}"

    def to_bytes(self) -> bytes:
        delimiter = b"--" + self.boundary.encode("ascii")
        chunks: list[bytes] = []
        for part in self.parts:
            chunks.append(delimiter + _CRLF)
            for name, value in part.headers:
                chunks.append(f"{name}: {value}".encode() + _CRLF)
            chunks.append(_CRLF)
            chunks.append(part.data + _CRLF)
        chunks.append(delimiter + b"--" + _CRLF)
        return b"".join(chunks)


def encode(
    message: Message,
    *,
    max_attachment_bytes: int = DEFAULT_MAX_ATTACHMENT_BYTES,
    boundary_factory: Callable[[], str] | None = None,
) -> EncodedRequestBody:
    """
    Build the multipart body for ``message``.

    The attachment size limit is checked before anything else so an oversized
    message never reaches the network. Parts keep the attachments' insertion
    order, which lets callers reference ``attachment://<filename>`` in embeds
    up front.
    """
    total = message.attachments_size
    if total > max_attachment_bytes:
        raise AttachmentsTooLarge(total, max_attachment_bytes)

    try:
        payload = json.dumps(message.to_payload(), ensure_ascii=False).encode("utf-8")
    except (TypeError, ValueError) as exc:
        raise SerializationFailed(str(exc)) from exc

    contents = [payload, *(attachment.data for attachment in message.attachments)]
    boundary = _pick_boundary(contents, boundary_factory or generate_boundary)

    parts = [Part(name="payload_json", data=payload, content_type="application/json")]
    for index, attachment in enumerate(message.attachments):
        parts.append(
            Part(
                name=f"files[{index}]",
                data=attachment.data,
                filename=attachment.filename,
                content_type=attachment.content_type,
            )
        )
    return EncodedRequestBody(boundary=boundary, parts=tuple(parts))


def _pick_boundary(contents: list[bytes], factory: Callable[[], str]) -> str:
    for _ in range(_BOUNDARY_ATTEMPTS):
        boundary = factory()
        delimiter = b"--" + boundary.encode("ascii")
        if not any(delimiter in content for content in contents):
            return boundary
    raise BoundaryCollision(_BOUNDARY_ATTEMPTS)


def _quote(value: str) -> str:
    return value.replace("\\", "\\\\").replace('"', '\\"').replace("\r", "").replace("\n", "")


__all__ = [
    "DEFAULT_MAX_ATTACHMENT_BYTES",
    "EncodedRequestBody",
    "Part",
    "encode",
    "generate_boundary",
]
