# -*- coding: utf-8 -*-
"""impulse-macd stateful – DataFrame runner.

Seed on history, then keep updating on new rows::

    out, state = run_stateful(df.iloc[:split + 1], "impulse_macd")
    tail, state = run_stateful(df, "impulse_macd", state=state,
                               state_timestamp=df.index[split])

*state* is updated in place; ``copy.deepcopy`` it first to branch.
"""
from __future__ import annotations

from typing import Any, Dict, List, Optional, Tuple

import warnings

import numpy as np
import pandas as pd

from ._base import (
    _as_length,
    InvalidConfiguration,
    InvalidInput,
    STATEFUL_SPEC_EXCLUDES,
    get_indicator,
    resolve_output_names,
)


def _input_column(df: pd.DataFrame, name: str) -> pd.Series:
    if name in df.columns:
        return df[name]
    lowered = {str(c).lower(): c for c in df.columns}
    if name in lowered:
        return df[lowered[name]]
    raise ValueError(f"[X] missing input column '{name}'")


def run_stateful(
    df: pd.DataFrame,
    kind: str = "impulse_macd",
    state: Any = None,
    state_timestamp: Optional[Any] = None,
    **spec: Any,
) -> Tuple[pd.DataFrame, Any]:
    """Feed *df* row by row through a registered stateful indicator.

    spec keys outside ``STATEFUL_SPEC_EXCLUDES`` are indicator params
    (e.g. ``length_ma=34``).  ``prefix`` / ``suffix`` / ``delimiter`` /
    ``col_names`` rename the outputs and ``append=True`` also writes the
    columns into *df*.

    Rows at or before *state_timestamp* are assumed already consumed by
    *state* and are left as NaN.  Rows with missing inputs are skipped
    (NaN output) with one ``UserWarning``.  An infinite or non-numeric
    input raises ``InvalidInput`` before any row is fed, so *state* is
    never partly advanced.

    When *state* is given, params it was built with (e.g. ``length_ma``)
    fill in missing spec keys; a conflicting key raises
    ``InvalidConfiguration``.

    Returns (result DataFrame, state).
    """
    indicator = get_indicator(kind)
    params: Dict[str, Any] = {k: v for k, v in spec.items() if k not in STATEFUL_SPEC_EXCLUDES}

    if state is not None and indicator.state_params is not None:
        for key, value in indicator.state_params(state).items():
            given = params.get(key)
            if given is None:
                params[key] = value
            elif _as_length(given, key) != value:
                raise InvalidConfiguration(
                    f"{kind}: {key}={given!r} does not match the passed state ({value})"
                )

    names, err = resolve_output_names(indicator.output_names(params), spec)
    if names is None:
        raise ValueError(err)

    if state is None:
        state = indicator.init(params)

    series = [_input_column(df, k) for k in indicator.inputs]
    try:
        inputs = np.vstack([s.to_numpy(dtype="float64", na_value=np.nan) for s in series])
    except (TypeError, ValueError) as e:
        raise InvalidInput(f"{kind}: inputs must be real numbers") from e
    n = len(df)

    start = 0
    if state_timestamp is not None:
        start = int(df.index.searchsorted(state_timestamp, side="right"))

    infinite = np.isinf(inputs[:, start:]).any(axis=0)
    if infinite.any():
        row = df.index[start + int(np.argmax(infinite))]
        raise InvalidInput(f"{kind}: infinite input at row {row!r}")
    missing = np.isnan(inputs).any(axis=0)

    columns: List[List[Any]] = [[np.nan] * n for _ in names]
    skipped = 0
    for i in range(start, n):
        if missing[i]:
            skipped += 1
            continue
        bar = dict(zip(indicator.inputs, (float(x) for x in inputs[:, i])))
        values, state = indicator.update(state, bar, params)
        for col, val in zip(columns, values):
            col[i] = val

    if skipped:
        warnings.warn(
            f"{kind}: skipped {skipped} rows with missing inputs.",
            UserWarning,
            stacklevel=2,
        )

    result = pd.DataFrame(dict(zip(names, columns)), index=df.index)
    if spec.get("append", False):
        for name in names:
            df[name] = result[name]
    return result, state
