"""Terminal results of a ``send_message`` call."""

from __future__ import annotations

import dataclasses
from typing import Any, NoReturn, Union

from .errors import DiscordWebhookError
from .models import RateLimitState

SCOPE_USER = "user"
SCOPE_GLOBAL = "global"
SCOPE_SHARED = "shared"


@dataclasses.dataclass(frozen=True)
class Succeeded:
    status: int
    body: bytes = b""
    # Created message object when the webhook was executed with wait=true.
    data: Any = None
    rate_limit: RateLimitState | None = None

    @property
    def message_id(self) -> str | None:
        if isinstance(self.data, dict):
            return self.data.get("id")
        return None


@dataclasses.dataclass(frozen=True)
class RateLimited:
    """Discord asked us to back off; the caller decides whether to wait or drop."""

    retry_after: float
    scope: str = SCOPE_USER
    body: bytes = b""
    rate_limit: RateLimitState | None = None

    @property
    def is_global(self) -> bool:
        return self.scope == SCOPE_GLOBAL


@dataclasses.dataclass(frozen=True)
class Failed:
    error: DiscordWebhookError
    rate_limit: RateLimitState | None = None

    def raise_error(self) -> NoReturn:
        raise self.error


SendOutcome = Union[Succeeded, RateLimited, Failed]

__all__ = [
    "Failed",
    "RateLimited",
    "SCOPE_GLOBAL",
    "SCOPE_SHARED",
    "SCOPE_USER",
    "SendOutcome",
    "Succeeded",
]
