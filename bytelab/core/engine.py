"""
Chunked histogram engine over a seekable binary stream.

Every call validates the requested range before touching the stream, then runs
sequential seek/read/fold cycles on the caller's handle. The engine takes over
the stream's read cursor for the duration of a call and does not restore it, so
a handle must not be shared between threads without external locking.
"""

from __future__ import annotations

import io
import logging
import os
from pathlib import Path
from typing import Any, BinaryIO

import numpy as np

from bytelab.core.histogram import empty_histogram, fold, fold_into, resolve_counter
from bytelab.core.ranges import ByteRange, ChunkPlan, validate_range
from bytelab.utils import config
from bytelab.utils.exceptions import ShortReadError

log = logging.getLogger(__name__)


def _is_plain_file(stream: BinaryIO) -> bool:
    """True when fileno() describes the bytes the stream serves (no decoding layer)."""
    return isinstance(stream, io.FileIO) or isinstance(getattr(stream, "raw", None), io.FileIO)


def stream_length(stream: BinaryIO) -> int:
    """
    Total size in bytes of the data behind stream:
      - plain files: fstat of the descriptor
      - io.BytesIO: size of its buffer
      - anything else (gzip/bz2/lzma readers, custom wrappers): seek to the end
        and restore the previous position

    The last case issues two seeks and no reads; it stands in for a length query
    the stream does not offer.
    """
    if _is_plain_file(stream):
        return os.fstat(stream.fileno()).st_size
    getbuffer = getattr(stream, "getbuffer", None)
    if callable(getbuffer):
        with getbuffer() as view:
            return view.nbytes
    pos = stream.tell()
    try:
        return stream.seek(0, io.SEEK_END)
    finally:
        stream.seek(pos)


class HistogramEngine:
    """
    Byte histograms over [start, end) ranges of one stream.

    counter selects the bucket type (numpy unsigned dtype or its name). Counts wrap
    silently modulo 2**bits when a bucket overflows; choosing a wide enough counter
    is the caller's responsibility.
    """

    def __init__(
        self,
        stream: BinaryIO,
        counter: Any = None,
        read_window: int | None = None,
    ) -> None:
        self.stream = stream
        self.counter = resolve_counter(config.DEFAULT_COUNTER if counter is None else counter)
        self.read_window = config.READ_WINDOW if read_window is None else int(read_window)
        if self.read_window <= 0:
            raise ValueError(f"read_window must be > 0, got {self.read_window}")

    def _validate(self, start: int, end: int) -> ByteRange:
        return validate_range(start, end, stream_length(self.stream))

    def _read_into(self, buf: bytearray, offset: int) -> None:
        """Fill buf from the current cursor position; offset is only used for errors."""
        view = memoryview(buf)
        readinto = getattr(self.stream, "readinto", None)
        filled = 0
        while filled < len(buf):
            if readinto is not None:
                n = readinto(view[filled:])
            else:
                chunk = self.stream.read(len(buf) - filled)
                n = len(chunk)
                view[filled : filled + n] = chunk
            if not n:
                raise ShortReadError(offset, len(buf), filled)
            filled += n

    def _read_exact_at(self, offset: int, size: int) -> bytearray:
        buf = bytearray(size)
        self.stream.seek(offset)
        self._read_into(buf, offset)
        return buf

    def histogram(self, start: int, end: int) -> np.ndarray:
        """
        Whole-range histogram of [start, end).
        The range is read after a single seek, in windows of at most read_window bytes.
        """
        rng = self._validate(start, end)
        hist = empty_histogram(self.counter)
        if rng.size == 0:
            return hist

        window = min(self.read_window, rng.size)
        log.debug("histogram [%d, %d) window=%d", rng.start, rng.end, window)
        buf = self._read_exact_at(rng.start, window)
        fold_into(hist, buf)

        offset = rng.start + window
        while offset < rng.end:
            n = min(window, rng.end - offset)
            if n != len(buf):
                buf = bytearray(n)
            self._read_into(buf, offset)
            fold_into(hist, buf)
            offset += n
        return hist

    def plan(self, start: int, end: int, accuracy: int) -> ChunkPlan:
        """Validated chunk layout histogram_delta would use for these arguments."""
        return ChunkPlan.from_range(self._validate(start, end), accuracy)

    def histogram_delta(self, start: int, end: int, accuracy: int) -> list[np.ndarray]:
        """
        One histogram per chunk of accuracy bytes over [start, end), in stream order.
        accuracy larger than the range (or 0) yields a single chunk; an empty range
        yields an empty list. The result sums bucket-wise to histogram(start, end).
        """
        plan = self.plan(start, end, accuracy)
        if plan.count == 0:
            return []

        log.debug(
            "histogram_delta [%d, %d) chunk_size=%d chunks=%d remainder=%d",
            plan.start,
            plan.start + plan.size,
            plan.chunk_size,
            plan.whole_chunks,
            plan.remainder,
        )
        deltas: list[np.ndarray] = []

        # Single seek; later chunks continue from the cursor left by the previous read
        buf = self._read_exact_at(plan.start, plan.chunk_size)
        deltas.append(fold(buf, self.counter))

        offset = plan.start + plan.chunk_size
        for _ in range(1, plan.whole_chunks):
            self._read_into(buf, offset)
            deltas.append(fold(buf, self.counter))
            offset += plan.chunk_size

        if plan.remainder:
            tail = bytearray(plan.remainder)
            self._read_into(tail, offset)
            deltas.append(fold(tail, self.counter))

        return deltas


def _resolve_end(path: Path, end: int | None) -> int:
    return path.stat().st_size if end is None else end


def histogram_file(
    path: str | Path,
    start: int = 0,
    end: int | None = None,
    counter: Any = None,
    read_window: int | None = None,
) -> np.ndarray:
    """Open path read-only and histogram [start, end); end defaults to the file size."""
    path = Path(path)
    with path.open("rb") as f:
        engine = HistogramEngine(f, counter=counter, read_window=read_window)
        return engine.histogram(start, _resolve_end(path, end))


def histogram_delta_file(
    path: str | Path,
    start: int = 0,
    end: int | None = None,
    accuracy: int | None = None,
    counter: Any = None,
) -> list[np.ndarray]:
    path = Path(path)
    with path.open("rb") as f:
        engine = HistogramEngine(f, counter=counter)
        return engine.histogram_delta(
            start,
            _resolve_end(path, end),
            config.DEFAULT_ACCURACY if accuracy is None else accuracy,
        )
