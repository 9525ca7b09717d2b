#!/usr/bin/env python3
"""Benchmark incremental Impulse MACD updates.

Measures how long incremental updates take as total history grows.
Three modes:
  - full:   run_stateful on full history + tail rows (input prep grows with history)
  - tail:   run_stateful on tail rows only (true streaming cost; ~O(tail))
  - engine: ImpulseMACD.update per tail bar, no pandas at all
The vectorised impulse_macd() over the full history is timed for reference.
"""
from __future__ import annotations

import argparse
import copy
import os
import sys
from time import perf_counter
from typing import List

ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)

import numpy as np
import pandas as pd
import impulse_macd_stateful as ta


def make_ohlcv(rows: int, seed: int) -> pd.DataFrame:
    rng = np.random.default_rng(seed)
    idx = pd.date_range("2025-01-01", periods=rows, freq="1min")
    base = 100 + rng.standard_normal(rows).cumsum()
    close = base + rng.normal(0, 0.2, rows)
    high = close + rng.random(rows) * 0.5
    low = close - rng.random(rows) * 0.5
    return pd.DataFrame({"high": high, "low": low, "close": close}, index=idx)


def parse_list(value: str) -> List[int]:
    return [int(v.strip()) for v in value.split(",") if v.strip()]


def time_call(fn, runs: int) -> float:
    times = []
    for _ in range(max(runs, 1)):
        start = perf_counter()
        fn()
        times.append(perf_counter() - start)
    return sum(times) / len(times)


def main() -> None:
    ap = argparse.ArgumentParser()
    ap.add_argument(
        "--sizes",
        type=str,
        default="10000,50000,100000",
        help="comma-separated total row counts",
    )
    ap.add_argument("--tail", type=int, default=1, help="new rows per update")
    ap.add_argument("--seed", type=int, default=7)
    ap.add_argument("--warmup", type=int, default=1, help="warmup runs (not timed)")
    ap.add_argument("--runs", type=int, default=3, help="timed runs")
    ap.add_argument(
        "--mode",
        type=str,
        default="all",
        choices=("full", "tail", "engine", "all"),
        help="benchmark input mode",
    )
    args = ap.parse_args()

    sizes = parse_list(args.sizes)

    print(f"[i] sizes: {sizes}")
    print(f"[i] tail: {args.tail}")
    print(f"[i] runs: {args.runs} (warmup: {args.warmup})")
    print(f"[i] mode: {args.mode}")

    for rows in sizes:
        if rows <= args.tail + 1:
            print(f"[i] skip rows={rows} (need > tail+1)")
            continue

        df = make_ohlcv(rows, args.seed)
        split = rows - args.tail
        df_hist = df.iloc[:split]
        df_tail = df.iloc[split:]
        tail_bars = list(df_tail.itertuples(index=False))

        # Seed state from history (timed once)
        start = perf_counter()
        _, base_state = ta.run_stateful(df_hist, "impulse_macd")
        seed_s = perf_counter() - start
        state_ts = df_hist.index[-1]
        print(f"[seed] rows={split} s={seed_s:.6f}")

        def run_full():
            ta.run_stateful(df, "impulse_macd", state=copy.deepcopy(base_state),
                            state_timestamp=state_ts)

        def run_tail():
            ta.run_stateful(df_tail, "impulse_macd", state=copy.deepcopy(base_state),
                            state_timestamp=state_ts)

        def run_engine():
            copy.deepcopy(base_state).batch_update(tail_bars)

        def run_vectorised():
            ta.impulse_macd(df["high"], df["low"], df["close"])

        runners = {"full": run_full, "tail": run_tail, "engine": run_engine}
        modes = list(runners) if args.mode == "all" else [args.mode]

        # Warmup (also compiles the numba kernels)
        for _ in range(max(args.warmup, 0)):
            run_vectorised()
            for mode in modes:
                runners[mode]()

        # Timed runs
        for mode in modes:
            avg = time_call(runners[mode], args.runs)
            print(
                f"[{mode}] rows={rows} tail={args.tail} avg_s={avg:.6f} "
                f"s_per_tail={avg / max(args.tail, 1):.6f}"
            )
        avg_vec = time_call(run_vectorised, args.runs)
        print(f"[vectorised] rows={rows} avg_s={avg_vec:.6f}")


if __name__ == "__main__":
    main()
