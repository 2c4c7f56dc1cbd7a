from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass

from bytelab.utils.exceptions import InvalidRangeError


@dataclass(frozen=True)
class ByteRange:
    """Half-open range [start, end) relative to the start of the stream."""

    start: int
    end: int

    @property
    def size(self) -> int:
        return self.end - self.start


def validate_range(start: int, end: int, stream_length: int) -> ByteRange:
    """
    Check [start, end) against a stream of stream_length bytes.
    Raises InvalidRangeError unless 0 <= start <= end <= stream_length.
    """
    if start < 0 or start > end or end > stream_length:
        raise InvalidRangeError(start, end, stream_length)
    return ByteRange(start=start, end=end)


@dataclass(frozen=True)
class ChunkPlan:
    """
    Partition of a ByteRange into equal windows plus an optional smaller tail:
      whole_chunks * chunk_size + remainder == size
    An empty range has chunk_size == whole_chunks == remainder == 0.
    """

    start: int
    size: int
    chunk_size: int
    whole_chunks: int
    remainder: int

    @classmethod
    def from_range(cls, byte_range: ByteRange, accuracy: int) -> ChunkPlan:
        """
        accuracy is the requested chunk size in bytes. It is clamped to the range size;
        accuracy == 0 means a single chunk covering the whole range.
        """
        if accuracy < 0:
            raise ValueError(f"accuracy must be >= 0, got {accuracy}")
        size = byte_range.size
        if size == 0:
            return cls(start=byte_range.start, size=0, chunk_size=0, whole_chunks=0, remainder=0)

        chunk_size = size if accuracy == 0 or accuracy >= size else accuracy
        return cls(
            start=byte_range.start,
            size=size,
            chunk_size=chunk_size,
            whole_chunks=size // chunk_size,
            remainder=size % chunk_size,
        )

    @property
    def count(self) -> int:
        return self.whole_chunks + (1 if self.remainder else 0)

    def windows(self) -> Iterator[tuple[int, int]]:
        """Yield (offset, length) for every chunk in stream order."""
        offset = self.start
        for _ in range(self.whole_chunks):
            yield offset, self.chunk_size
            offset += self.chunk_size
        if self.remainder:
            yield offset, self.remainder
