"""
Dataclass representations of Discord webhook payloads.

Reference:
https://discord.com/developers/docs/resources/webhook#execute-webhook-jsonform-params
"""

from __future__ import annotations

import dataclasses
import math
import mimetypes
import time
from collections.abc import Mapping
from typing import Any

# Discord webhook constraints from the public API docs.
_MAX_CONTENT_LENGTH = 2000
_MAX_USERNAME_LENGTH = 80
_MAX_AVATAR_URL_LENGTH = 2048
_MAX_EMBEDS = 10
_MAX_EMBED_TITLE = 256
_MAX_EMBED_DESCRIPTION = 4096
_MAX_EMBED_FIELDS = 25
_MAX_FIELD_NAME = 256
_MAX_FIELD_VALUE = 1024
_MAX_ATTACHMENTS = 10

_DEFAULT_CONTENT_TYPE = "application/octet-stream"


def validate_identity(username: str | None, avatar_url: str | None) -> None:
    if username and len(username) > _MAX_USERNAME_LENGTH:
        raise ValueError("Username exceeds Discord limit of 80 characters")
    if avatar_url and len(avatar_url) > _MAX_AVATAR_URL_LENGTH:
        raise ValueError("Avatar URL exceeds Discord length limit")


def _drop_none(data: dict[str, Any]) -> dict[str, Any]:
    return {key: value for key, value in data.items() if value is not None}


@dataclasses.dataclass(frozen=True)
class EmbedField:
    """Represents a single field in an embed."""

    name: str
    value: str = ""
    inline: bool = False

    def __post_init__(self) -> None:
        if not self.name:
            raise ValueError("Embed field name is required")
        if len(self.name) > _MAX_FIELD_NAME:
            raise ValueError("Embed field name exceeds Discord limit of 256 characters")
        if len(self.value) > _MAX_FIELD_VALUE:
            raise ValueError("Embed field value exceeds Discord limit of 1024 characters")

    def to_dict(self) -> dict[str, Any]:
        # Discord rejects empty field values.
        return {"name": self.name, "value": self.value or "-", "inline": self.inline}

    def __str__(self) -> str:  # pragma: no cover - utility formatting
        return f"{self.name}: {self.value}"


@dataclasses.dataclass(frozen=True)
class EmbedImage:
    """Image or thumbnail; ``url`` may be ``attachment://<filename>``."""

    url: str

    def to_dict(self) -> dict[str, Any]:
        return {"url": self.url}


@dataclasses.dataclass(frozen=True)
class EmbedFooter:
    text: str
    icon_url: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return _drop_none({"text": self.text, "icon_url": self.icon_url})


@dataclasses.dataclass(frozen=True)
class Embed:
    """Represents an embed object."""

    title: str | None = None
    description: str | None = None
    color: int | None = None
    url: str | None = None
    timestamp: str | None = None
    image: EmbedImage | None = None
    thumbnail: EmbedImage | None = None
    footer: EmbedFooter | None = None
    fields: tuple[EmbedField, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "fields", tuple(self.fields))

        if self.title and len(self.title) > _MAX_EMBED_TITLE:
            raise ValueError("Embed title exceeds Discord limit of 256 characters")
        if self.description and len(self.description) > _MAX_EMBED_DESCRIPTION:
            raise ValueError("Embed description exceeds Discord limit of 4096 characters")
        if self.color is not None and not (0 <= self.color <= 0xFFFFFF):
            raise ValueError("Embed color must be between 0x000000 and 0xFFFFFF")
        if len(self.fields) > _MAX_EMBED_FIELDS:
            raise ValueError("Discord allows a maximum of 25 embed fields")

    def to_dict(self) -> dict[str, Any]:
        data = _drop_none(
            {
                "title": self.title,
                "description": self.description,
                "color": self.color,
                "url": self.url,
                "timestamp": self.timestamp,
                "image": self.image.to_dict() if self.image else None,
                "thumbnail": self.thumbnail.to_dict() if self.thumbnail else None,
                "footer": self.footer.to_dict() if self.footer else None,
            }
        )
        if self.fields:
            data["fields"] = [field.to_dict() for field in self.fields]
        return data

    def __str__(self) -> str:  # pragma: no cover - utility formatting
        return "\n".join(map(str, self.fields))


@dataclasses.dataclass(frozen=True)
class Attachment:
    """A file uploaded alongside the message as a ``files[i]`` part."""

    filename: str
    data: bytes
    content_type: str | None = None
    description: str | None = None

    def __post_init__(self) -> None:
        if not self.filename:
            raise ValueError("Attachment filename is required")
        if not self.data:
            raise ValueError(f"Attachment {self.filename!r} has no data")
        object.__setattr__(self, "data", bytes(self.data))
        if self.content_type is None:
            guessed, _ = mimetypes.guess_type(self.filename)
            object.__setattr__(self, "content_type", guessed or _DEFAULT_CONTENT_TYPE)
        elif "\r" in self.content_type or "\n" in self.content_type:
            raise ValueError(f"Attachment {self.filename!r} content type must be a single header line")

    @property
    def size(self) -> int:
        return len(self.data)

    @property
    def reference(self) -> str:
        """URL usable in embed image fields to point at this upload."""
        return f"attachment://{self.filename}"


@dataclasses.dataclass(frozen=True)
class Message:
    """Top-level webhook payload."""

    content: str | None = None
    embeds: tuple[Embed, ...] = ()
    attachments: tuple[Attachment, ...] = ()
    username: str | None = None
    avatar_url: str | None = None
    tts: bool = False

    def __post_init__(self) -> None:
        object.__setattr__(self, "embeds", tuple(self.embeds))
        object.__setattr__(self, "attachments", tuple(self.attachments))

        if not self.content and not self.embeds:
            raise ValueError("Discord notification requires content or embeds")
        if self.content and len(self.content) > _MAX_CONTENT_LENGTH:
            raise ValueError("Content exceeds Discord limit of 2000 characters")
        validate_identity(self.username, self.avatar_url)
        if len(self.embeds) > _MAX_EMBEDS:
            raise ValueError("Discord allows a maximum of 10 embeds")
        if len(self.attachments) > _MAX_ATTACHMENTS:
            raise ValueError("Discord allows a maximum of 10 attachments")

    @property
    def attachments_size(self) -> int:
        return sum(attachment.size for attachment in self.attachments)

    def with_defaults(self, username: str | None, avatar_url: str | None) -> Message:
        """Fill in username and avatar when the message does not set its own."""
        return dataclasses.replace(
            self,
            username=self.username or username,
            avatar_url=self.avatar_url or avatar_url,
        )

    def to_payload(self) -> dict[str, Any]:
        """Everything but the file bytes, ready for ``payload_json``."""
        payload: dict[str, Any] = _drop_none(
            {
                "content": self.content or None,
                "username": self.username,
                "avatar_url": self.avatar_url,
            }
        )
        if self.tts:
            payload["tts"] = True
        if self.embeds:
            payload["embeds"] = [embed.to_dict() for embed in self.embeds]
        if self.attachments:
            payload["attachments"] = [
                _drop_none({"id": index, "filename": attachment.filename, "description": attachment.description})
                for index, attachment in enumerate(self.attachments)
            ]
        return payload

    def __str__(self) -> str:  # pragma: no cover - utility formatting
        return f"{self.content}:\n" + "\n".join(map(str, self.embeds))


@dataclasses.dataclass(frozen=True)
class RateLimitState:
    """
    Advisory bucket state taken from the ``X-RateLimit-*`` headers of the last
    response. The live 429 stays authoritative; nothing here blocks a send.
    """

    remaining: int | None = None
    reset_after: float | None = None
    bucket: str | None = None
    observed_at: float = dataclasses.field(default_factory=time.monotonic)

    @classmethod
    def from_headers(cls, headers: Mapping[str, str], now: float | None = None) -> RateLimitState | None:
        remaining = parse_int(headers.get("X-RateLimit-Remaining"))
        reset_after = parse_float(headers.get("X-RateLimit-Reset-After"))
        bucket = headers.get("X-RateLimit-Bucket")
        if remaining is None and reset_after is None and bucket is None:
            return None
        return cls(
            remaining=remaining,
            reset_after=reset_after,
            bucket=bucket,
            observed_at=time.monotonic() if now is None else now,
        )

    @property
    def exhausted(self) -> bool:
        return self.remaining is not None and self.remaining <= 0

    def delay(self, now: float | None = None) -> float:
        """Seconds a caller should wait before the next send to this bucket."""
        if not self.exhausted or self.reset_after is None:
            return 0.0
        now = time.monotonic() if now is None else now
        return max(0.0, self.observed_at + self.reset_after - now)


def parse_int(value: str | None) -> int | None:
    if value is None:
        return None
    try:
        return int(value)
    except ValueError:
        return None


def parse_float(value: str | None) -> float | None:
    """Header value as a finite float, or None."""
    if value is None:
        return None
    try:
        parsed = float(value)
    except ValueError:
        return None
    return parsed if math.isfinite(parsed) else None


__all__ = [
    "Attachment",
    "Embed",
    "EmbedField",
    "EmbedFooter",
    "EmbedImage",
    "Message",
    "RateLimitState",
    "parse_float",
    "parse_int",
    "validate_identity",
]
