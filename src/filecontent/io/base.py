"""Base protocols and shared types for the transport layer."""

from typing import BinaryIO, Callable, Iterable, Iterator, Mapping, Optional, Protocol, runtime_checkable

from requests.structures import CaseInsensitiveDict


class TransportResponse:
    """Status, headers and a lazily consumed body of one response.

    Closing releases the underlying connection; it happens once no matter how
    many times close() is called.
    """

    def __init__(self, status_code: int, headers: Mapping[str, str],
                 chunks: Iterable[bytes] = (), on_close: Optional[Callable[[], None]] = None):
        self.status_code = status_code
        self.headers = CaseInsensitiveDict(headers)
        self._chunks = chunks
        self._on_close = on_close
        self.closed = False

    def iter_body(self) -> Iterator[bytes]:
        if self.closed:
            raise ValueError("Response body already closed")
        for chunk in self._chunks:
            if chunk:
                yield chunk

    def close(self) -> None:
        if self.closed:
            return
        self.closed = True
        if self._on_close is not None:
            self._on_close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()


@runtime_checkable
class Transport(Protocol):
    """Protocol for objects that carry out exactly one request per call."""

    requests_made: int  # running total

    def request(self, method: str, route: str, headers: Mapping[str, str],
                body: Optional[BinaryIO] = None) -> TransportResponse:
        """Send `method` to `route` (relative to the API endpoint).

        `body` is streamed when given. Connection failures raise TransportError.
        """
        ...

    def close(self) -> None:
        ...
