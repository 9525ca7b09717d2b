#!/usr/bin/env python3
"""Compare vectorised impulse_macd() to the stateful incremental engine.

Two-phase stateful workflow:
1) seed on t=0..split with run_stateful()
2) update on t=split+1..end using state + state_timestamp

Both segments are compared column by column to the vectorised result.
"""
from __future__ import annotations

import argparse
import os
import sys

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
    open_ = base + rng.normal(0, 0.2, rows)
    high = np.maximum(open_, close) + rng.random(rows) * 0.5
    low = np.minimum(open_, close) - rng.random(rows) * 0.5
    volume = rng.integers(100, 1000, rows)
    return pd.DataFrame(
        {
            "open": open_,
            "high": high,
            "low": low,
            "close": close,
            "volume": volume,
        },
        index=idx,
    )


def compare_frames(ref: pd.DataFrame, test: pd.DataFrame, eps: float) -> pd.DataFrame:
    diff = (test - ref).abs()
    rel = diff / (ref.abs() + eps)
    return pd.DataFrame(
        {
            "nan_ref": ref.isna().sum(),
            "nan_test": test.isna().sum(),
            "max_abs": diff.max(),
            "mean_abs": diff.mean(),
            "mean_rel": rel.mean(),
        }
    )


def main() -> None:
    ap = argparse.ArgumentParser()
    ap.add_argument("--rows", type=int, default=2000)
    ap.add_argument("--split", type=int, default=1500, help="seed end index")
    ap.add_argument("--length-ma", type=int, default=34)
    ap.add_argument("--length-signal", type=int, default=9)
    ap.add_argument("--seed", type=int, default=7)
    ap.add_argument("--eps", type=float, default=1e-12)
    args = ap.parse_args()

    if args.split >= args.rows:
        raise SystemExit("--split must be < --rows")

    df = make_ohlcv(args.rows, args.seed)
    params = {"length_ma": args.length_ma, "length_signal": args.length_signal}

    ref = ta.impulse_macd(df["high"], df["low"], df["close"], **params)

    res_seed, state = ta.run_stateful(df.iloc[: args.split + 1], "impulse_macd", **params)
    res_inc, state = ta.run_stateful(
        df, "impulse_macd", state=state, state_timestamp=df.index[args.split], **params
    )

    combined = res_inc.copy()
    combined.iloc[: args.split + 1] = res_seed

    num_cols = [c for c in ref.columns if not c.startswith("IMPULSEc")]
    color_col = [c for c in ref.columns if c.startswith("IMPULSEc")][0]

    summary = compare_frames(ref[num_cols], combined[num_cols].astype(float), args.eps)
    mismatched = int((ref[color_col] != combined[color_col]).sum())

    print("[i] rows:", args.rows)
    print("[i] split index:", args.split)
    print("[i] bars in state:", len(state))
    print("\nNumeric columns (vectorised vs stateful):")
    print(summary)
    print(f"\n[i] colour mismatches: {mismatched}")
    if mismatched or (summary["max_abs"] > 1e-9).any():
        raise SystemExit("[X] vectorised and stateful outputs diverge")


if __name__ == "__main__":
    main()
