"""Shared test doubles: a scripted transport and an in-process fake endpoint."""

import re
from typing import Dict, List, Optional

import pytest
from werkzeug import Request, Response

from filecontent.io.base import TransportResponse

UP_TO_DATE = 316


class RecordingTransport:
    """Transport returning queued responses and recording every request."""

    def __init__(self, *responses):
        self.responses = list(responses)
        self.calls: List[dict] = []
        self.returned: List[TransportResponse] = []
        self.requests_made = 0
        self.closed = False

    def queue(self, status_code: int, headers: Optional[Dict[str, str]] = None, body: bytes = b""):
        self.responses.append((status_code, headers or {}, body))
        return self

    def request(self, method, route, headers, body=None):
        self.requests_made += 1
        self.calls.append({
            "method": method,
            "route": route,
            "headers": dict(headers),
            "body": body.read() if body is not None else None,
        })
        status_code, response_headers, payload = self.responses.pop(0)
        chunks = [payload[i:i + 3] for i in range(0, len(payload), 3)]
        response = TransportResponse(status_code, response_headers, chunks)
        self.returned.append(response)
        return response

    def close(self):
        self.closed = True


class FakeContentEndpoint:
    """werkzeug handler implementing the files/{id}/content protocol in memory."""

    ROUTE = re.compile(r"^/api/files/([^/]+)/content$")
    _RANGE = re.compile(r"^bytes (\d+)-(\d+)/\*$")
    _FINISH = re.compile(r"^bytes \*/(\d+)$")

    def __init__(self, token: str = "secret", up_to_date_status: int = UP_TO_DATE):
        self.token = token
        self.up_to_date_status = up_to_date_status
        self.files: Dict[str, bytes] = {}
        self.etags: Dict[str, str] = {}
        self.uploads: Dict[str, bytearray] = {}
        self.log: List[tuple] = []
        self._versions = 0
        self._upload_ids = 0

    def add_file(self, file_id: str, content: bytes) -> str:
        self.files[file_id] = content
        return self._bump(file_id)

    def _bump(self, file_id: str) -> str:
        self._versions += 1
        self.etags[file_id] = f'"v{self._versions}"'
        return self.etags[file_id]

    def __call__(self, request: Request) -> Response:
        file_id = self.ROUTE.match(request.path).group(1)
        self.log.append((request.method, file_id, dict(request.headers)))
        if request.headers.get("Authorization") != f"Bearer {self.token}":
            return Response(status=401)
        if file_id not in self.files:
            return Response(status=404)
        etag = self.etags[file_id]

        if request.method == "HEAD":
            if request.headers.get("If-None-Match") == etag:
                return Response(status=self.up_to_date_status)
            return Response(status=200, headers={"ETag": etag})

        if request.method == "GET":
            content_range = request.headers.get("Content-Range")
            if content_range is None:
                return Response(self.files[file_id], status=200, headers={"ETag": etag})
            if request.headers.get("If-Match") != etag:
                return Response(status=412)
            start, end = map(int, self._RANGE.match(content_range).groups())
            return Response(self.files[file_id][start:end + 1], status=200)

        if request.method != "PUT":
            return Response(status=405)
        if request.headers.get("If-Match") != etag:
            return Response(status=412)
        return self._put(request, file_id)

    def _put(self, request: Request, file_id: str) -> Response:
        content_range = request.headers.get("Content-Range")
        upload_id = request.headers.get("Upload-ID")

        if content_range is None:
            self.files[file_id] = request.get_data()
            return Response(status=200, headers={"ETag": self._bump(file_id)})

        if content_range == "bytes */*" and upload_id is None:
            self._upload_ids += 1
            upload_id = f"up-{self._upload_ids}"
            self.uploads[upload_id] = bytearray()
            return Response(status=200, headers={"Upload-ID": upload_id})

        if upload_id not in self.uploads:
            return Response(status=404)
        buffer = self.uploads[upload_id]

        if content_range == "bytes */*":
            if not buffer:
                return Response(status=400)
            return Response(status=200, headers={"Range": f"bytes 0-{len(buffer) - 1}"})

        finish = self._FINISH.match(content_range)
        if finish:
            if int(finish.group(1)) != len(buffer):
                return Response(status=400)
            self.files[file_id] = bytes(self.uploads.pop(upload_id))
            return Response(status=200, headers={"ETag": self._bump(file_id)})

        start, end = map(int, self._RANGE.match(content_range).groups())
        data = request.get_data()
        if start > len(buffer):
            return Response(status=400)
        buffer[start:start + len(data)] = data
        return Response(status=200, headers={"Range": f"bytes 0-{len(buffer) - 1}"})


@pytest.fixture
def transport():
    """Empty recording transport; tests queue the responses they need."""
    return RecordingTransport()
