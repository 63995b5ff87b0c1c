"""Client for the file content resource of the API endpoint.

Every method maps to exactly one HTTP round trip and blocks until it
completes. Updates follow a strict-consistency model: each mutating call
carries the caller's ETag as ``If-Match`` and the endpoint rejects it when the
content changed in the meantime. The client never checks ETags itself and
never retries; on an EndpointError the caller should refetch the ETag (and
possibly the content) before trying again.
"""

from __future__ import annotations
import logging
from typing import BinaryIO, Collection, Mapping, Optional

from .config import DEFAULT_BUFFER_SIZE, ClientConfig
from .core.model import EndpointError, MalformedHeaderError
from .core.protocol import (
    CONTENT_RANGE,
    CONTENT_TYPE,
    ETAG,
    IF_MATCH,
    IF_NONE_MATCH,
    OCTET_STREAM,
    RANGE,
    STATUS_BAD_STATE,
    STATUS_OK,
    STATUS_UP_TO_DATE,
    UPLOAD_ID,
    UploadIntent,
    content_route,
    upload_headers,
)
from .core.range import format_content_range, parse_range_end
from .core.util import copy_chunks
from .io import open_transport
from .io.base import Transport, TransportResponse
from .io.limited import LimitedReader

logger = logging.getLogger(__name__)


class FileContentClient:
    """Synchronous client for ``files/{file_id}/content``."""

    def __init__(self, transport: Transport, *, buffer_size: int = DEFAULT_BUFFER_SIZE,
                 up_to_date_status: int = STATUS_UP_TO_DATE):
        self.transport = transport
        self.buffer_size = buffer_size
        self.up_to_date_status = up_to_date_status

    @classmethod
    def from_config(cls, config: ClientConfig, backend: str = "requests") -> "FileContentClient":
        return cls(open_transport(config, backend),
                   buffer_size=config.buffer_size,
                   up_to_date_status=config.up_to_date_status)

    # --- plumbing ---

    def _send(self, method: str, file_id: str, headers: Mapping[str, str],
              body: Optional[BinaryIO] = None) -> TransportResponse:
        return self.transport.request(method, content_route(file_id), headers, body)

    @staticmethod
    def _expect(response: TransportResponse, operation: str,
                accepted: Collection[int] = (STATUS_OK,)) -> None:
        if response.status_code not in accepted:
            logger.warning(f"{operation} rejected status={response.status_code}")
            raise EndpointError(response.status_code, operation)

    @staticmethod
    def _header(response: TransportResponse, name: str) -> str:
        value = response.headers.get(name)
        if value is None:
            raise MalformedHeaderError(f"Response is missing the {name} header")
        return value

    # --- whole content ---

    def get_file_content(self, file_id: str, sink: BinaryIO) -> str:
        """Download the entire content of `file_id` into `sink` and return its ETag."""
        with self._send("GET", file_id, {}) as response:
            self._expect(response, "get_file_content")
            etag = self._header(response, ETAG)
            copied = copy_chunks(response.iter_body(), sink, self.buffer_size)
        logger.debug(f"Downloaded {copied} bytes [file_id={file_id}]")
        return etag

    def upload_file_content(self, file_id: str, etag: str, stream: BinaryIO) -> str:
        """Replace the entire content of `file_id` with `stream` and return the new ETag.

        Fails with EndpointError when `etag` is no longer current.
        """
        headers = {IF_MATCH: etag, CONTENT_TYPE: OCTET_STREAM}
        with self._send("PUT", file_id, headers, stream) as response:
            self._expect(response, "upload_file_content")
            return self._header(response, ETAG)

    def is_file_content_up_to_date(self, file_id: str, etag: str) -> bool:
        """True iff `etag` still matches the content on the endpoint."""
        with self._send("HEAD", file_id, {IF_NONE_MATCH: etag}) as response:
            if response.status_code == self.up_to_date_status:
                return True
            self._expect(response, "is_file_content_up_to_date")
            return False

    def get_file_content_etag(self, file_id: str) -> str:
        """Return the current ETag of `file_id` without transferring content."""
        with self._send("HEAD", file_id, {}) as response:
            self._expect(response, "get_file_content_etag")
            return self._header(response, ETAG)

    def get_file_content_range(self, file_id: str, etag: str, sink: BinaryIO,
                               start: int, end: int) -> int:
        """Download bytes `start`..`end` (inclusive) into `sink`; return the count written."""
        headers = {IF_MATCH: etag, CONTENT_RANGE: format_content_range(start, end)}
        with self._send("GET", file_id, headers) as response:
            self._expect(response, "get_file_content_range")
            return copy_chunks(response.iter_body(), sink, self.buffer_size)

    # --- chunked upload ---

    def start_chunked_upload(self, file_id: str, etag: str) -> str:
        """Open a chunked upload session and return its Upload-ID."""
        headers = upload_headers(UploadIntent.START, etag)
        with self._send("PUT", file_id, headers) as response:
            self._expect(response, "start_chunked_upload")
            upload_id = self._header(response, UPLOAD_ID)
        logger.info(f"Started chunked upload [file_id={file_id} upload_id={upload_id}]")
        return upload_id

    def do_chunked_upload(self, file_id: str, etag: str, upload_id: str, start: int, end: int,
                          stream: BinaryIO, chunk_size: int) -> int:
        """Upload at most `chunk_size` bytes of `stream` as bytes `start`..`end`.

        Returns the highest byte offset the endpoint has committed. Reading
        stops after `chunk_size` bytes so `stream` is left at the next chunk;
        a stream that runs dry earlier uploads a shorter chunk.
        """
        headers = upload_headers(UploadIntent.CHUNK, etag, upload_id=upload_id, start=start, end=end)
        body = LimitedReader(stream, chunk_size)
        with self._send("PUT", file_id, headers, body) as response:
            sent = chunk_size - body.remaining
            if sent != end - start + 1:
                logger.warning(f"Chunk {start}-{end} carried {sent} bytes "
                               f"[file_id={file_id} upload_id={upload_id}]")
            self._expect(response, "do_chunked_upload")
            committed = parse_range_end(response.headers.get(RANGE))
        logger.debug(f"Uploaded chunk {start}-{end}, committed={committed} [upload_id={upload_id}]")
        return committed

    def get_chunked_upload_progress(self, file_id: str, etag: str, upload_id: str) -> int:
        """Return the highest committed byte offset; 0 when nothing was committed yet."""
        headers = upload_headers(UploadIntent.PROBE, etag, upload_id=upload_id)
        with self._send("PUT", file_id, headers) as response:
            if response.status_code == STATUS_BAD_STATE:
                return 0
            self._expect(response, "get_chunked_upload_progress")
            return parse_range_end(response.headers.get(RANGE))

    def finish_chunked_upload(self, file_id: str, etag: str, upload_id: str, total_length: int) -> str:
        """Commit the session's content and return the new ETag."""
        headers = upload_headers(UploadIntent.FINISH, etag, upload_id=upload_id, total_length=total_length)
        with self._send("PUT", file_id, headers) as response:
            self._expect(response, "finish_chunked_upload")
            new_etag = self._header(response, ETAG)
        logger.info(f"Finished chunked upload of {total_length} bytes "
                    f"[file_id={file_id} upload_id={upload_id}]")
        return new_etag

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()

    def close(self):
        self.transport.close()
