"""Synchronous transport using httpx."""

import logging
import ssl
from typing import BinaryIO, Iterator, Mapping, Optional

import httpx

from ..config import ClientConfig
from ..core.model import TransportError
from ..core.protocol import AUTHORIZATION
from ..core.util import iter_chunks
from .base import TransportResponse

logger = logging.getLogger(__name__)


def _verify(config: ClientConfig):
    if isinstance(config.verify, str):
        return ssl.create_default_context(cafile=config.verify)
    return config.verify


class HTTPXTransport:
    """Carries out one request per call over an httpx.Client."""

    def __init__(self, config: ClientConfig, client: Optional[httpx.Client] = None):
        self.config = config
        self.requests_made = 0
        self._owns_client = client is None
        if client is None:
            client = httpx.Client(
                base_url=config.api_endpoint + "/",
                timeout=httpx.Timeout(config.read_timeout, connect=config.connect_timeout),
                verify=_verify(config),
                limits=httpx.Limits(max_connections=1),
            )
        self._client = client

    def _headers(self, headers: Mapping[str, str]) -> dict:
        merged = {}
        if self.config.auth_token:
            merged[AUTHORIZATION] = f"Bearer {self.config.auth_token}"
        merged.update(headers)
        return merged

    def _iter_bytes(self, response: httpx.Response) -> Iterator[bytes]:
        try:
            yield from response.iter_bytes(chunk_size=self.config.buffer_size)
        except httpx.HTTPError as e:
            raise TransportError(f"Reading response body failed: {e}") from e

    def request(self, method: str, route: str, headers: Mapping[str, str],
                body: Optional[BinaryIO] = None) -> TransportResponse:
        content = iter_chunks(body, self.config.chunk_size) if body is not None else None
        self.requests_made += 1
        logger.debug(f"{method} {route} body={'yes' if body is not None else 'no'}")
        try:
            request = self._client.build_request(method, route.lstrip("/"),
                                                 headers=self._headers(headers), content=content)
            response = self._client.send(request, stream=True)
        except httpx.HTTPError as e:
            raise TransportError(f"{method} request failed: {e}") from e
        finally:
            if content is not None:
                content.close()

        logger.debug(f"{method} {route} status={response.status_code}")
        return TransportResponse(response.status_code, response.headers,
                                 self._iter_bytes(response), on_close=response.close)

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()

    def close(self):
        """Close the client if we created it."""
        if self._owns_client:
            self._client.close()


def open_httpx_transport(config: ClientConfig) -> HTTPXTransport:
    """Create an httpx-backed transport."""
    return HTTPXTransport(config)
