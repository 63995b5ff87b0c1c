"""Codec for the ``bytes <start>-<end>/<total>`` range grammar."""

from __future__ import annotations
import re
from dataclasses import dataclass

from .model import InvalidUsageError, MalformedHeaderError

WILDCARD = "*"

# "bytes 0-99/*", "bytes 0-99/1000", "bytes 0-99" and the "bytes=0-99" form
_RANGE_RE = re.compile(
    r"^\s*bytes(?:\s*=\s*|\s+)([0-9]+)\s*-\s*([0-9]+)\s*(?:/\s*(\*|[0-9]+)\s*)?$"
)


def _check_bounds(start: int | None, end: int | None, total: int | None) -> None:
    if (start is None) != (end is None):
        raise InvalidUsageError("start and end must both be given or both be omitted")
    if start is not None and start < 0:
        raise InvalidUsageError(f"Range start cannot be negative: {start}")
    if start is not None and end < start:
        raise InvalidUsageError(f"Range end {end} precedes start {start}")
    if total is not None and total < 0:
        raise InvalidUsageError(f"Total length cannot be negative: {total}")


@dataclass(frozen=True, slots=True)
class ByteRange:
    """Inclusive byte interval; ``None`` stands for the ``*`` wildcard."""
    start: int | None
    end: int | None
    total: int | None = None

    def __post_init__(self) -> None:
        _check_bounds(self.start, self.end, self.total)

    @property
    def length(self) -> int | None:
        if self.start is None:
            return None
        return self.end - self.start + 1

    def __str__(self) -> str:
        return format_content_range(self.start, self.end, self.total)


def format_content_range(start: int | None = None, end: int | None = None,
                         total: int | None = None) -> str:
    """Encode a range as ``bytes {start}-{end}/{total}`` using ``*`` for unknowns."""
    _check_bounds(start, end, total)
    span = WILDCARD if start is None else f"{start}-{end}"
    size = WILDCARD if total is None else str(total)
    return f"bytes {span}/{size}"


def parse_range(text: str | None) -> ByteRange:
    """Decode a range header into a :class:`ByteRange`."""
    if text is None:
        raise MalformedHeaderError("Missing range header")
    match = _RANGE_RE.match(text)
    if not match:
        raise MalformedHeaderError(f"Unexpected range pattern: {text!r}")
    start, end = int(match.group(1)), int(match.group(2))
    total = match.group(3)
    if start > end:
        raise MalformedHeaderError(f"Range end precedes start: {text!r}")
    return ByteRange(start, end, None if total in (None, WILDCARD) else int(total))


def parse_range_end(text: str | None) -> int:
    """Return the end offset of a range header, i.e. the highest committed byte."""
    return parse_range(text).end
