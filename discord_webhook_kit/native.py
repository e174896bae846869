"""Blocking transport for regular Python processes, backed by ``requests``."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from types import TracebackType

import requests

from .errors import ConnectionFailed, MalformedResponse, TransportTimeout, UnsupportedOperation
from .transport import Response, check_url

logger = logging.getLogger(__name__)


class RequestsTransport:
    def __init__(self, *, timeout: float = 30, session: requests.Session | None = None):
        self.timeout = timeout
        self._session = session or requests.Session()
        self._owns_session = session is None

    def __enter__(self) -> "RequestsTransport":
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()

    def close(self) -> None:
        if self._owns_session:
            self._session.close()

    def send(self, method: str, url: str, headers: Mapping[str, str], body: bytes) -> Response:
        check_url(url)
        try:
            response = self._session.request(
                method,
                url,
                headers=dict(headers),
                data=body,
                timeout=self.timeout,
            )
            content = response.content
        except requests.Timeout as exc:
            raise TransportTimeout(f"{method} {url} timed out after {self.timeout}s") from exc
        except (requests.exceptions.ContentDecodingError, requests.exceptions.ChunkedEncodingError) as exc:
            raise MalformedResponse(str(exc)) from exc
        except (requests.exceptions.InvalidURL, requests.exceptions.InvalidSchema, requests.exceptions.MissingSchema) as exc:
            raise UnsupportedOperation(str(exc)) from exc
        except requests.RequestException as exc:
            raise ConnectionFailed(str(exc)) from exc
        except ValueError as exc:
            # urllib3 URL parsing errors (LocationParseError) are ValueErrors.
            raise UnsupportedOperation(str(exc)) from exc

        logger.debug("%s %s -> %s", method, url, response.status_code)
        return Response.build(response.status_code, response.headers, content)


__all__ = ["RequestsTransport"]
