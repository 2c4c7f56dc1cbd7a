from __future__ import annotations

import argparse
import os
from pathlib import Path

from dotenv import load_dotenv

from bytelab.core.engine import HistogramEngine
from bytelab.core.histogram import merge, to_dict, total
from bytelab.dataio.dataset import histograms_to_frame, write_table
from bytelab.features.entropy import shannon_entropy
from bytelab.utils import config

load_dotenv()


def _expand(s: str) -> Path:
    return Path(os.path.expandvars(s)).expanduser().resolve()


def main() -> None:
    parser = argparse.ArgumentParser(description="Byte histogram of a range of a file.")
    parser.add_argument("path", type=str, help="File to analyze.")
    parser.add_argument("--start", type=int, default=0, help="First byte offset.")
    parser.add_argument("--end", type=int, default=None, help="End offset (default: file size).")
    parser.add_argument(
        "--accuracy",
        type=int,
        default=None,
        help="Chunk size in bytes; emits one histogram per chunk (0 = whole range).",
    )
    parser.add_argument(
        "--counter", type=str, default=config.DEFAULT_COUNTER, help="uint8/16/32/64 buckets."
    )
    parser.add_argument("--out", type=str, default=None, help="Write a .parquet/.csv table.")
    args = parser.parse_args()

    path = _expand(args.path)
    end = path.stat().st_size if args.end is None else args.end

    with path.open("rb") as f:
        engine = HistogramEngine(f, counter=args.counter)
        plan = engine.plan(args.start, end, args.accuracy or 0)
        if args.accuracy is None:
            hists = [engine.histogram(args.start, end)] if plan.count else []
        else:
            hists = engine.histogram_delta(args.start, end, args.accuracy)

    whole = merge(hists, counter=engine.counter)
    print(f"[histogram] {path} [{args.start}, {end}) {total(whole)} bytes in {len(hists)} chunk(s)")
    print(f"[histogram] entropy: {shannon_entropy(whole):.4f} bits/byte")

    if args.out:
        out_path = _expand(args.out)
        df = histograms_to_frame(hists, plan, source=str(path))
        write_table(df, out_path)
        print(f"[histogram] wrote {len(df)} rows to {out_path}")
    else:
        top = sorted(to_dict(whole).items(), key=lambda kv: kv[1], reverse=True)[:8]
        for value, count in top:
            print(f"[histogram]   0x{value:02x}: {count}")


if __name__ == "__main__":
    main()
