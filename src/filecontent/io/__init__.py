"""Transport layer for filecontent - one request per call, bodies streamed both ways."""

# Re-export these for import convenience
from ..core.model import InvalidUsageError
from .base import Transport, TransportResponse
from .limited import LimitedReader
from .http_sync import RequestsTransport, open_requests_transport
from .http_httpx import HTTPXTransport, open_httpx_transport

BACKENDS = ("requests", "httpx")


def open_transport(config, backend: str = "requests") -> Transport:
    """Factory function to create the Transport for `backend`."""
    if backend == "requests":
        return open_requests_transport(config)
    if backend == "httpx":
        return open_httpx_transport(config)
    raise InvalidUsageError(f"Unknown transport backend: {backend!r} (expected one of {', '.join(BACKENDS)})")
