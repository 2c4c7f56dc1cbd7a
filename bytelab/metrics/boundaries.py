from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

import numpy as np

from bytelab.core.ranges import ChunkPlan
from bytelab.features.entropy import entropy_profile, printable_ratio, shannon_entropy

HIGH_ENTROPY = 7.2
TEXT_RATIO = 0.9


@dataclass(frozen=True)
class Region:
    start: int
    end: int
    kind: str
    mean_entropy: float

    @property
    def size(self) -> int:
        return self.end - self.start


def classify_chunk(
    hist: np.ndarray, high: float = HIGH_ENTROPY, text: float = TEXT_RATIO
) -> str:
    """
    Rough content class of one chunk:
      empty      : no bytes folded
      compressed : entropy >= high (compressed or encrypted data)
      text       : printable share >= text
      binary     : everything else
    """
    if int(np.asarray(hist).sum()) == 0:
        return "empty"
    if shannon_entropy(hist) >= high:
        return "compressed"
    if printable_ratio(hist) >= text:
        return "text"
    return "binary"


def find_boundaries(profile: np.ndarray, min_jump: float = 1.0) -> list[int]:
    """
    Indices i where |profile[i] - profile[i-1]| >= min_jump, i.e. chunk i starts
    a structurally different region.
    """
    profile = np.asarray(profile, dtype=np.float64)
    if profile.size < 2:
        return []
    jumps = np.abs(np.diff(profile))
    return [int(i) + 1 for i in np.where(jumps >= min_jump)[0]]


def segment_regions(
    histograms: Sequence[np.ndarray],
    plan: ChunkPlan,
    high: float = HIGH_ENTROPY,
    text: float = TEXT_RATIO,
) -> list[Region]:
    """
    Merge adjacent chunks of the same class into regions with absolute offsets.
    histograms is the output of histogram_delta for the range plan was built from.
    """
    if len(histograms) != plan.count:
        raise ValueError(f"expected {plan.count} histograms for this plan, got {len(histograms)}")
    if not histograms:
        return []
    profile = entropy_profile(histograms)
    regions: list[Region] = []
    run_kind: str | None = None
    run_start = plan.start
    run_entropy: list[float] = []
    end = plan.start

    for hist, ent, (offset, length) in zip(histograms, profile, plan.windows()):
        kind = classify_chunk(hist, high=high, text=text)
        if run_kind is not None and kind != run_kind:
            regions.append(Region(run_start, offset, run_kind, float(np.mean(run_entropy))))
            run_start = offset
            run_entropy = []
        run_kind = kind
        run_entropy.append(float(ent))
        end = offset + length

    regions.append(Region(run_start, end, run_kind, float(np.mean(run_entropy))))
    return regions
