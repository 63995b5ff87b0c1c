"""filecontent - client for the file content resource of a strictly-consistent API endpoint."""

from .core.model import (                                             # re-export
    FileContentError, EndpointError, MalformedHeaderError, TransportError,
    InvalidUsageError, IncompleteTransferError, UploadResult, UploadSession,
)
from .core.range import ByteRange, format_content_range, parse_range, parse_range_end
from .config import ClientConfig
from .client import FileContentClient
from .io import LimitedReader, open_transport
from .transfer import upload_in_chunks


def open_client(config: ClientConfig | None = None, *, backend: str = "requests",
                **overrides) -> FileContentClient:
    """Create a FileContentClient from `config`, or from FILECONTENT_* variables and `overrides`."""
    if config is None:
        config = ClientConfig.from_env(**overrides)
    return FileContentClient.from_config(config, backend)


__all__ = [
    "open_client", "FileContentClient", "ClientConfig", "LimitedReader", "open_transport",
    "upload_in_chunks", "ByteRange", "format_content_range", "parse_range", "parse_range_end",
    "FileContentError", "EndpointError", "MalformedHeaderError", "TransportError",
    "InvalidUsageError", "IncompleteTransferError", "UploadResult", "UploadSession",
]
