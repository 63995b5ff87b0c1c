"""Wire vocabulary of the ``files/{id}/content`` resource.

Start, chunk, progress probe and finish all share one route and the PUT
method; the endpoint tells them apart only by the headers present and by
whether a body is sent. :func:`upload_headers` is the single place that
maps each :class:`UploadIntent` to its header set.
"""

from __future__ import annotations
import enum
from typing import Dict
from urllib.parse import quote

from .model import InvalidUsageError
from .range import format_content_range

STATUS_OK = 200
STATUS_BAD_STATE = 400
# Returned by HEAD + If-None-Match when the ETag still matches. Not the
# standard 304; check it against the deployed endpoint.
STATUS_UP_TO_DATE = 316

AUTHORIZATION = "Authorization"
CONTENT_RANGE = "Content-Range"
CONTENT_TYPE = "Content-Type"
ETAG = "ETag"
IF_MATCH = "If-Match"
IF_NONE_MATCH = "If-None-Match"
RANGE = "Range"
UPLOAD_ID = "Upload-ID"

OCTET_STREAM = "application/octet-stream"


def content_route(file_id: str) -> str:
    """Route of the content resource for `file_id`, relative to the API endpoint."""
    return f"files/{quote(file_id, safe='')}/content"


class UploadIntent(enum.Enum):
    START = "start"
    CHUNK = "chunk"
    PROBE = "probe"
    FINISH = "finish"

    @property
    def carries_body(self) -> bool:
        return self is UploadIntent.CHUNK


def upload_headers(intent: UploadIntent, etag: str, *, upload_id: str | None = None,
                   start: int | None = None, end: int | None = None,
                   total_length: int | None = None) -> Dict[str, str]:
    """Build the PUT headers for one step of a chunked upload."""
    headers = {IF_MATCH: etag}
    if intent is UploadIntent.START:
        headers[CONTENT_RANGE] = format_content_range()
        return headers

    if upload_id is None:
        raise InvalidUsageError(f"{intent.name} requires an upload id")
    headers[UPLOAD_ID] = upload_id

    if intent is UploadIntent.CHUNK:
        if start is None or end is None:
            raise InvalidUsageError("CHUNK requires start and end")
        headers[CONTENT_RANGE] = format_content_range(start, end)
        headers[CONTENT_TYPE] = OCTET_STREAM
    elif intent is UploadIntent.PROBE:
        headers[CONTENT_RANGE] = format_content_range()
    elif intent is UploadIntent.FINISH:
        if total_length is None:
            raise InvalidUsageError("FINISH requires the total length")
        headers[CONTENT_RANGE] = format_content_range(total=total_length)
    else:  # pragma: no cover
        raise InvalidUsageError(f"Unknown upload intent: {intent!r}")
    return headers
