"""Synchronous transport using requests."""

import logging
from typing import BinaryIO, Iterator, Mapping, Optional

import requests
from requests.adapters import HTTPAdapter

from ..config import ClientConfig
from ..core.model import TransportError
from ..core.protocol import AUTHORIZATION
from ..core.util import iter_chunks
from .base import TransportResponse

logger = logging.getLogger(__name__)


def _new_session() -> requests.Session:
    """Session pinned to a single pooled connection per host."""
    session = requests.Session()
    adapter = HTTPAdapter(pool_connections=1, pool_maxsize=1)
    session.mount("https://", adapter)
    session.mount("http://", adapter)
    return session


class RequestsTransport:
    """Carries out one request per call over a requests.Session."""

    def __init__(self, config: ClientConfig, session: Optional[requests.Session] = None):
        self.config = config
        self.requests_made = 0
        self._owns_session = session is None
        self._session = session if session is not None else _new_session()

    def _url(self, route: str) -> str:
        return f"{self.config.api_endpoint}/{route.lstrip('/')}"

    def _headers(self, headers: Mapping[str, str]) -> dict:
        merged = {}
        if self.config.auth_token:
            merged[AUTHORIZATION] = f"Bearer {self.config.auth_token}"
        merged.update(headers)
        return merged

    def _iter_content(self, response: requests.Response) -> Iterator[bytes]:
        try:
            yield from response.iter_content(chunk_size=self.config.buffer_size)
        except requests.RequestException as e:
            raise TransportError(f"Reading response body failed: {e}") from e

    def request(self, method: str, route: str, headers: Mapping[str, str],
                body: Optional[BinaryIO] = None) -> TransportResponse:
        url = self._url(route)
        # a generator body makes requests stream it with chunked encoding
        data = iter_chunks(body, self.config.chunk_size) if body is not None else None
        self.requests_made += 1
        logger.debug(f"{method} {url} body={'yes' if body is not None else 'no'}")
        try:
            response = self._session.request(
                method,
                url,
                headers=self._headers(headers),
                data=data,
                stream=True,
                timeout=(self.config.connect_timeout, self.config.read_timeout),
                verify=self.config.verify,
                allow_redirects=False,
            )
        except requests.RequestException as e:
            raise TransportError(f"{method} request failed: {e}") from e
        finally:
            if data is not None:
                data.close()

        logger.debug(f"{method} {url} status={response.status_code}")
        return TransportResponse(response.status_code, response.headers,
                                 self._iter_content(response), on_close=response.close)

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()

    def close(self):
        """Close the session if we created it."""
        if self._owns_session:
            self._session.close()


def open_requests_transport(config: ClientConfig) -> RequestsTransport:
    """Create a requests-backed transport."""
    return RequestsTransport(config)
