from __future__ import annotations
from dataclasses import dataclass


@dataclass(slots=True, frozen=True)
class UploadSession:
    file_id: str
    etag: str
    upload_id: str


@dataclass(slots=True)
class UploadResult:
    etag: str
    upload_id: str
    chunks_sent: int
    bytes_sent: int


class FileContentError(RuntimeError):
    """Base class for every error raised by filecontent."""
    pass


class EndpointError(FileContentError):
    """Raised when the endpoint answers with a status the operation does not accept."""

    def __init__(self, status_code: int, operation: str | None = None):
        self.status_code = status_code
        self.operation = operation
        where = f" from {operation}" if operation else ""
        super().__init__(f"Unexpected return code{where}: {status_code}")


class MalformedHeaderError(FileContentError):
    """Raised when a required response header is absent or does not parse."""
    pass


class TransportError(FileContentError):
    """Raised when the request could not be carried out (connection, timeout, TLS)."""
    pass


class InvalidUsageError(FileContentError):
    """Raised on programming errors, e.g. reset() without a prior mark()."""
    pass


class IncompleteTransferError(FileContentError):
    """Raised when the endpoint committed a different offset than the chunk sent."""

    def __init__(self, expected: int, committed: int):
        self.expected = expected
        self.committed = committed
        super().__init__(f"Endpoint committed up to byte {committed}, expected {expected}")
