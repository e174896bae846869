"""
Async transport backed by ``httpx.AsyncClient``.

This is the backend for event-loop hosts, including Pyodide based edge workers
where httpx goes through the runtime's ``fetch``. Those runtimes cannot stream
request bodies, so only complete ``bytes`` bodies are accepted.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

import httpx

from .errors import ConnectionFailed, MalformedResponse, TransportTimeout, UnsupportedOperation
from .transport import Response, check_url

logger = logging.getLogger(__name__)


class HttpxTransport:
    def __init__(self, *, timeout: float = 30, client: httpx.AsyncClient | None = None):
        self.timeout = timeout
        self._client = client or httpx.AsyncClient(timeout=timeout)
        self._owns_client = client is None

    async def __aenter__(self) -> "HttpxTransport":
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def send(self, method: str, url: str, headers: Mapping[str, str], body: bytes) -> Response:
        if not isinstance(body, (bytes, bytearray)):
            raise UnsupportedOperation("Streaming request bodies are not supported by the edge transport")
        check_url(url)

        try:
            response = await self._client.request(
                method,
                url,
                headers=dict(headers),
                content=bytes(body),
                timeout=self.timeout,
            )
        except httpx.TimeoutException as exc:
            raise TransportTimeout(f"{method} {url} timed out after {self.timeout}s") from exc
        except (httpx.DecodingError, httpx.RemoteProtocolError) as exc:
            raise MalformedResponse(str(exc)) from exc
        except (httpx.UnsupportedProtocol, httpx.InvalidURL) as exc:
            raise UnsupportedOperation(str(exc)) from exc
        except httpx.RequestError as exc:
            raise ConnectionFailed(str(exc)) from exc

        logger.debug("%s %s -> %s", method, url, response.status_code)
        return Response.build(response.status_code, response.headers, response.content)


__all__ = ["HttpxTransport"]
