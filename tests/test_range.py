"""Tests for the range header codec."""

import pytest

from filecontent.core.model import InvalidUsageError, MalformedHeaderError
from filecontent.core.range import ByteRange, format_content_range, parse_range, parse_range_end


class TestFormat:
    """Test encoding."""

    def test_span_with_unknown_total(self):
        assert format_content_range(0, 399) == "bytes 0-399/*"

    def test_span_with_total(self):
        assert format_content_range(400, 799, 1000) == "bytes 400-799/1000"

    def test_wildcards(self):
        assert format_content_range() == "bytes */*"
        assert format_content_range(total=1000) == "bytes */1000"
        assert format_content_range(total=0) == "bytes */0"

    @pytest.mark.parametrize("start,end,total", [
        (-1, 5, None),
        (5, 4, None),
        (0, None, None),
        (None, 3, None),
        (0, 3, -1),
    ])
    def test_invalid_bounds(self, start, end, total):
        with pytest.raises(InvalidUsageError):
            format_content_range(start, end, total)

    def test_byte_range_str(self):
        assert str(ByteRange(0, 9)) == "bytes 0-9/*"
        assert str(ByteRange(None, None, 10)) == "bytes */10"
        assert ByteRange(10, 19).length == 10
        assert ByteRange(None, None).length is None


class TestParse:
    """Test decoding."""

    @pytest.mark.parametrize("start,end,total", [
        (0, 0, None),
        (0, 999, None),
        (400, 799, 1000),
        (7, 7, 8),
        (2**40, 2**40 + 5, None),
    ])
    def test_round_trip_end(self, start, end, total):
        """Decoding an encoded range gives back its end offset."""
        assert parse_range_end(format_content_range(start, end, total)) == end

    def test_full_triple(self):
        assert parse_range("bytes 400-799/1000") == ByteRange(400, 799, 1000)
        assert parse_range("bytes 0-9/*") == ByteRange(0, 9, None)
        assert parse_range("bytes 0-9") == ByteRange(0, 9, None)

    def test_equals_form_and_whitespace(self):
        """The `bytes=0-999` form some endpoints put in the Range header is accepted."""
        assert parse_range_end("bytes=0-999") == 999
        assert parse_range_end("  bytes = 0 - 999  ") == 999
        assert parse_range_end("bytes 0 - 5 / 6") == 5

    @pytest.mark.parametrize("text", [
        "bytes abc-def",
        "bytes 0-",
        "bytes -5",
        "bytes */*",
        "bits 0-5",
        "bytes 0-5/abc",
        "bytes 0-5/",
        "0-5",
        "",
        "bytes 9-3",
        "bytes \u0660-\u0669",
        "bytes 0-5/\uff11\uff10",
    ])
    def test_malformed(self, text):
        with pytest.raises(MalformedHeaderError):
            parse_range(text)

    def test_missing_header(self):
        with pytest.raises(MalformedHeaderError, match="Missing range header"):
            parse_range_end(None)
