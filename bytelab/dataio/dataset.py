from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path

import numpy as np
import pandas as pd

from bytelab.core.ranges import ChunkPlan
from bytelab.features.entropy import shannon_entropy

HIST_COLUMNS = [f"histogram.{i:03d}" for i in range(256)]


def discover_files(input_dir: Path) -> list[Path]:
    """Recursively find regular files under input_dir, sorted by path."""
    return sorted(p for p in input_dir.rglob("*") if p.is_file())


def histograms_to_frame(
    histograms: Sequence[np.ndarray],
    plan: ChunkPlan,
    source: str | None = None,
) -> pd.DataFrame:
    """
    One row per chunk: source, chunk, offset, length, entropy, histogram.000..255.
    Counts keep the counter dtype of the histograms.
    """
    if len(histograms) != plan.count:
        raise ValueError(f"expected {plan.count} histograms for this plan, got {len(histograms)}")
    meta = pd.DataFrame(
        [
            {
                "source": source,
                "chunk": i,
                "offset": offset,
                "length": length,
                "entropy": shannon_entropy(h),
            }
            for i, (h, (offset, length)) in enumerate(zip(histograms, plan.windows()))
        ],
        columns=["source", "chunk", "offset", "length", "entropy"],
    )
    if histograms:
        counts = pd.DataFrame(np.vstack(histograms), columns=HIST_COLUMNS)
    else:
        counts = pd.DataFrame(columns=HIST_COLUMNS)
    return pd.concat([meta, counts], axis=1)


def write_table(df: pd.DataFrame, out_path: Path) -> None:
    out_path.parent.mkdir(parents=True, exist_ok=True)
    if out_path.suffix.lower() == ".csv":
        df.to_csv(out_path, index=False)
    else:
        # default to parquet
        df.to_parquet(out_path, index=False)


def read_table(path: Path) -> pd.DataFrame:
    if path.suffix.lower() == ".csv":
        return pd.read_csv(path)
    return pd.read_parquet(path)
