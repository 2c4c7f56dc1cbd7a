from __future__ import annotations

import argparse
import os
from pathlib import Path

import pandas as pd
import yaml
from dotenv import load_dotenv

from bytelab.core.engine import HistogramEngine
from bytelab.dataio.dataset import discover_files, histograms_to_frame, write_table
from bytelab.features.entropy import entropy_profile
from bytelab.metrics.boundaries import find_boundaries, segment_regions
from bytelab.utils import config

load_dotenv()


def _expand(s: str) -> Path:
    return Path(os.path.expandvars(s)).expanduser().resolve()


def main() -> None:
    parser = argparse.ArgumentParser(
        description="Entropy profile and regions for every file under a directory."
    )
    parser.add_argument("--config", type=Path, help="YAML config file.")
    parser.add_argument("--input-dir", type=str, default=None, help="Directory of files.")
    parser.add_argument("--accuracy", type=int, default=None, help="Chunk size in bytes.")
    parser.add_argument(
        "--out", type=str, default="${OUTPUTS_DIR}/entropy_map.parquet", help="Output path."
    )
    args = parser.parse_args()

    cfg = yaml.safe_load(args.config.read_text()) if args.config else {}
    cfg = cfg or {}
    input_dir = args.input_dir or cfg.get("input_dir")
    if not input_dir:
        raise SystemExit("Set --input-dir or input_dir in --config.")
    accuracy = args.accuracy if args.accuracy is not None else int(
        cfg.get("accuracy", config.DEFAULT_ACCURACY)
    )
    counter = cfg.get("counter", config.DEFAULT_COUNTER)
    min_jump = float(cfg.get("min_jump", 1.0))
    out_path = _expand(cfg.get("out") or args.out)

    config.ensure_dirs()
    input_dir = _expand(input_dir)
    frames = []
    for path in discover_files(input_dir):
        with path.open("rb") as f:
            engine = HistogramEngine(f, counter=counter)
            end = path.stat().st_size
            plan = engine.plan(0, end, accuracy)
            hists = engine.histogram_delta(0, end, accuracy)
        if not hists:
            continue
        frames.append(histograms_to_frame(hists, plan, source=str(path)))

        profile = entropy_profile(hists)
        boundaries = find_boundaries(profile, min_jump=min_jump)
        regions = segment_regions(hists, plan)
        print(
            f"[entropy-map] {path.name}: {len(hists)} chunks, "
            f"{len(boundaries)} boundaries, {len(regions)} regions"
        )
        for r in regions:
            print(f"[entropy-map]   [{r.start}, {r.end}) {r.kind} H={r.mean_entropy:.3f}")

    if not frames:
        print(f"[entropy-map] no non-empty files found under {input_dir}")
        return

    df = pd.concat(frames, ignore_index=True)
    write_table(df, out_path)
    print(f"[entropy-map] wrote {len(df)} rows to {out_path}")


if __name__ == "__main__":
    main()
