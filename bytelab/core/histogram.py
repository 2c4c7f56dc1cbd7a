"""
256-bucket byte histograms backed by numpy arrays.

The counter width is chosen by the caller (uint8, uint16, uint32 or uint64).
Counts are NOT checked for overflow: once a bucket exceeds the counter's maximum
it wraps modulo 2**bits, exactly like the counter type's own arithmetic. Pick a
counter wide enough for the largest range you intend to fold, e.g. uint32 is
safe up to 4 GiB per histogram and uint64 for anything larger.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any

import numpy as np

N_BUCKETS = 256

COUNTERS: dict[str, type[np.unsignedinteger]] = {
    "uint8": np.uint8,
    "uint16": np.uint16,
    "uint32": np.uint32,
    "uint64": np.uint64,
}


def resolve_counter(counter: Any) -> np.dtype:
    """Accept a numpy unsigned type, dtype or its name ('uint32'); return the dtype."""
    if isinstance(counter, str):
        key = counter.strip().lower()
        if key not in COUNTERS:
            raise ValueError(
                f"unknown counter type {counter!r}; expected one of {sorted(COUNTERS)}"
            )
        return np.dtype(COUNTERS[key])
    try:
        dtype = np.dtype(counter)
    except TypeError as e:
        raise ValueError(f"unknown counter type {counter!r}") from e
    if dtype.kind != "u":
        raise ValueError(f"counter type must be an unsigned integer, got {dtype}")
    return dtype


def empty_histogram(counter: Any = np.uint32) -> np.ndarray:
    return np.zeros(N_BUCKETS, dtype=resolve_counter(counter))


def fold(buf: bytes | bytearray | memoryview, counter: Any = np.uint32) -> np.ndarray:
    """
    Count every byte of buf: the byte value is the bucket index.
    Works on arbitrary binary content, not just ASCII.
    """
    data = np.frombuffer(buf, dtype=np.uint8)
    # astype wraps modulo 2**bits for narrow counters
    return np.bincount(data, minlength=N_BUCKETS).astype(resolve_counter(counter), copy=False)


def fold_into(hist: np.ndarray, buf: bytes | bytearray | memoryview) -> np.ndarray:
    """Add the bytes of buf to hist in place and return it."""
    hist += fold(buf, hist.dtype)
    return hist


def merge(histograms: Iterable[np.ndarray], counter: Any = None) -> np.ndarray:
    """
    Bucket-wise sum of histograms. With counter=None the dtype of the first
    histogram is used (uint32 for an empty input).
    """
    out: np.ndarray | None = None
    for h in histograms:
        if out is None:
            out = empty_histogram(h.dtype if counter is None else counter)
        out += h.astype(out.dtype, copy=False)
    if out is None:
        out = empty_histogram(np.uint32 if counter is None else counter)
    return out


def total(hist: np.ndarray) -> int:
    """Number of bytes folded into hist (modulo counter wraparound of each bucket)."""
    return int(hist.sum(dtype=np.uint64))


def to_dict(hist: np.ndarray, nonzero: bool = True) -> dict[int, int]:
    """{byte value: count}; only the non-zero buckets unless nonzero=False."""
    return {i: int(c) for i, c in enumerate(hist) if c or not nonzero}
