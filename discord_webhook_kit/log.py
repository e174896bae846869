"""One-time logging setup for host applications (servers, workers, scripts)."""

from __future__ import annotations

import logging
from typing import TextIO

_PACKAGE_LOGGER = "discord_webhook_kit"
_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def init_logging(level: int = logging.INFO, stream: TextIO | None = None) -> logging.Logger:
    """
    Attach a stream handler to the package logger.

    Calling it again only updates the level; the handler is installed once per
    process. Library code never calls this, the host does at startup.
    """
    package_logger = logging.getLogger(_PACKAGE_LOGGER)
    package_logger.setLevel(level)
    if not any(getattr(handler, "_discord_webhook_kit", False) for handler in package_logger.handlers):
        handler = logging.StreamHandler(stream)
        handler.setFormatter(logging.Formatter(_FORMAT))
        handler._discord_webhook_kit = True  # type: ignore[attr-defined]
        package_logger.addHandler(handler)
    return package_logger


__all__ = ["init_logging"]
