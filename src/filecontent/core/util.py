from __future__ import annotations
from typing import BinaryIO, Iterable, Iterator, Optional


def iter_chunks(stream: BinaryIO, chunk_size: int) -> Iterator[bytes]:
    """Yield successive reads of at most `chunk_size` bytes until the stream is exhausted."""
    while True:
        data = stream.read(chunk_size)
        if not data:
            return
        yield data


def _write_all(sink: BinaryIO, data: memoryview) -> None:
    # raw sinks may accept only part of a write; None means the whole piece went through
    while data:
        written = sink.write(data)
        if written is None:
            return
        data = data[written:]


def copy_chunks(chunks: Iterable[bytes], sink: BinaryIO, buffer_size: Optional[int] = None) -> int:
    """Write every chunk to `sink` and return the number of bytes written.

    With `buffer_size`, larger chunks are written in pieces of at most that size.
    """
    total = 0
    for chunk in chunks:
        view = memoryview(chunk)
        step = buffer_size or len(view) or 1
        for offset in range(0, len(view), step):
            _write_all(sink, view[offset:offset + step])
        total += len(view)
    return total
