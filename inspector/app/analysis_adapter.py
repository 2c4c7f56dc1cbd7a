from __future__ import annotations

import io
from dataclasses import asdict
from typing import Any

from bytelab.core.engine import HistogramEngine
from bytelab.features.entropy import entropy_profile, shannon_entropy
from bytelab.metrics.boundaries import segment_regions


def _range(bytez: bytes, start: int | None, end: int | None) -> tuple[int, int]:
    return (0 if start is None else start), (len(bytez) if end is None else end)


def bytes_to_histogram(
    bytez: bytes, start: int | None = None, end: int | None = None, counter: Any = None
) -> dict[str, Any]:
    """Whole-range histogram of an uploaded body as a JSON-ready dict."""
    start, end = _range(bytez, start, end)
    engine = HistogramEngine(io.BytesIO(bytez), counter=counter)
    hist = engine.histogram(start, end)
    return {
        "start": start,
        "end": end,
        "size": end - start,
        "counter": engine.counter.name,
        "histogram": hist.tolist(),
        "entropy": shannon_entropy(hist),
    }


def bytes_to_delta(
    bytez: bytes,
    accuracy: int,
    start: int | None = None,
    end: int | None = None,
    counter: Any = None,
) -> dict[str, Any]:
    """Per-chunk histograms, entropy drift and regions of an uploaded body."""
    start, end = _range(bytez, start, end)
    engine = HistogramEngine(io.BytesIO(bytez), counter=counter)
    plan = engine.plan(start, end, accuracy)
    hists = engine.histogram_delta(start, end, accuracy)
    return {
        "start": start,
        "end": end,
        "counter": engine.counter.name,
        "chunk_size": plan.chunk_size,
        "count": len(hists),
        "entropy": entropy_profile(hists).tolist(),
        "histograms": [h.tolist() for h in hists],
        "regions": [asdict(r) for r in segment_regions(hists, plan)],
    }
