"""
Errors raised by the histogram engine.

Seek/read failures of the underlying stream are not wrapped: the OSError
raised by the stream propagates to the caller as-is.
"""


class HistogramError(Exception):
    """Base class for histogram engine errors."""


class InvalidRangeError(HistogramError, ValueError):
    """Raised when a requested byte range is negative, inverted or past the end of the stream."""

    def __init__(self, start: int, end: int, stream_length: int):
        self.start = start
        self.end = end
        self.stream_length = stream_length
        super().__init__(
            f"invalid byte range [{start}, {end}) for stream of {stream_length} bytes"
        )


class ShortReadError(HistogramError, EOFError):
    """Raised when the stream returns fewer bytes than a read requested."""

    def __init__(self, offset: int, expected: int, got: int):
        self.offset = offset
        self.expected = expected
        self.got = got
        super().__init__(f"short read at offset {offset}: expected {expected} bytes, got {got}")
