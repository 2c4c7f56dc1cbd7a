from __future__ import annotations

from collections.abc import Sequence
from typing import Any

import numpy as np

# printable ASCII plus tab, newline and carriage return
_TEXT_BYTES = np.zeros(256, dtype=bool)
_TEXT_BYTES[32:127] = True
_TEXT_BYTES[[9, 10, 13]] = True


def normalize(hist: np.ndarray) -> np.ndarray:
    """256-bin histogram as probabilities; all zeros for an empty histogram."""
    counts = np.asarray(hist, dtype=np.float64)
    n = counts.sum()
    if n == 0:
        return np.zeros_like(counts)
    return counts / n


def shannon_entropy(hist: np.ndarray) -> float:
    """Shannon entropy in bits per byte, between 0.0 and 8.0."""
    p = normalize(hist)
    p = p[p > 0]
    if p.size == 0:
        return 0.0
    return float(-(p * np.log2(p)).sum())


def entropy_profile(histograms: Sequence[np.ndarray]) -> np.ndarray:
    """Entropy of each chunk histogram, in order."""
    return np.fromiter(
        (shannon_entropy(h) for h in histograms), dtype=np.float64, count=len(histograms)
    )


def printable_ratio(hist: np.ndarray) -> float:
    counts = np.asarray(hist, dtype=np.float64)
    n = counts.sum()
    return float(counts[_TEXT_BYTES].sum() / n) if n else 0.0


def histogram_features(hist: np.ndarray) -> dict[str, Any]:
    """
    Flat feature dict for one histogram:
      - histogram.000..255 : normalized frequencies
      - entropy, printable_ratio
    """
    p = normalize(hist)
    width = 3
    feats: dict[str, Any] = {f"histogram.{i:0{width}d}": float(p[i]) for i in range(256)}
    feats["entropy"] = shannon_entropy(hist)
    feats["printable_ratio"] = printable_ratio(hist)
    return feats
