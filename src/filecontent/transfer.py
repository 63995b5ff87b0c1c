"""Caller-side orchestration of a chunked upload: start, N chunks, finish."""

from __future__ import annotations
import logging
from typing import BinaryIO

from .client import FileContentClient
from .core.model import IncompleteTransferError, InvalidUsageError, UploadResult, UploadSession
from .io.limited import LimitedReader

logger = logging.getLogger(__name__)


def chunk_windows(offset: int, total_length: int, chunk_size: int):
    """Yield inclusive (start, end) windows covering `offset`..`total_length - 1`."""
    if chunk_size <= 0:
        raise InvalidUsageError("chunk_size must be positive")
    while offset < total_length:
        end = min(offset + chunk_size, total_length) - 1
        yield offset, end
        offset = end + 1


def upload_in_chunks(client: FileContentClient, file_id: str, etag: str, stream: BinaryIO,
                     total_length: int, chunk_size: int, upload_id: str | None = None) -> UploadResult:
    """Upload `total_length` bytes of `stream` through a chunked upload session.

    `stream` must be positioned at the first byte of the content. Passing the
    `upload_id` of an open session resumes it: the committed prefix is skipped
    and only the rest is sent.
    """
    if total_length < 0:
        raise InvalidUsageError("total_length cannot be negative")

    if upload_id is None:
        session = UploadSession(file_id, etag, client.start_chunked_upload(file_id, etag))
        offset = 0
    else:
        session = UploadSession(file_id, etag, upload_id)
        offset = _resume(client, session, stream, total_length)

    chunks_sent = 0
    bytes_sent = 0
    for start, end in chunk_windows(offset, total_length, chunk_size):
        committed = client.do_chunked_upload(session.file_id, session.etag, session.upload_id,
                                             start, end, stream, end - start + 1)
        if committed != end:
            raise IncompleteTransferError(end, committed)
        chunks_sent += 1
        bytes_sent += end - start + 1

    new_etag = client.finish_chunked_upload(session.file_id, session.etag, session.upload_id,
                                            total_length)
    return UploadResult(etag=new_etag, upload_id=session.upload_id,
                        chunks_sent=chunks_sent, bytes_sent=bytes_sent)


def _resume(client: FileContentClient, session: UploadSession, stream: BinaryIO,
            total_length: int) -> int:
    """Skip the committed prefix of `stream` and return the next offset to send."""
    committed = client.get_chunked_upload_progress(session.file_id, session.etag, session.upload_id)
    # progress 0 cannot tell "nothing" from "byte 0"; resending byte 0 is harmless
    offset = committed + 1 if committed else 0
    if offset > total_length:
        raise IncompleteTransferError(total_length - 1, committed)
    skipped = LimitedReader(stream, offset).skip(offset)
    if skipped != offset:
        raise InvalidUsageError(f"Stream ended after {skipped} bytes, cannot resume at {offset}")
    logger.info(f"Resuming chunked upload at byte {offset} "
                f"[file_id={session.file_id} upload_id={session.upload_id}]")
    return offset
