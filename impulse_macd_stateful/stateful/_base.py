# -*- coding: utf-8 -*-
"""impulse-macd stateful – shared base: errors, helpers, EMA state, registries.

All category modules (``_overlap``, ``_momentum``) import from here
and populate the registries at load time.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from numbers import Integral, Real
from typing import Any, Callable, Dict, List, Optional, Tuple

import math
import warnings


# ---------------------------------------------------------------------------
# Errors
# ---------------------------------------------------------------------------

class ImpulseMACDError(ValueError):
    """Base class for every error raised by this package."""


class InvalidConfiguration(ImpulseMACDError):
    """A window length is not a positive integer."""


class InvalidInput(ImpulseMACDError):
    """A price fed to a filter is NaN, infinite or not a real number."""


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _param(params: Dict[str, Any], key: str, default: Any) -> Any:
    """Pull *key* from *params*; treat None as missing → default."""
    value = params.get(key, default)
    return default if value is None else value


def _as_length(value: Any, name: str = "length") -> int:
    """Validate a window length.  Integral floats (``34.0``) are accepted."""
    if isinstance(value, bool):
        raise InvalidConfiguration(f"{name} must be a positive integer, got {value!r}")
    if isinstance(value, Integral):
        length = int(value)
    elif isinstance(value, Real) and float(value).is_integer():
        length = int(value)
    else:
        raise InvalidConfiguration(f"{name} must be a positive integer, got {value!r}")
    if length <= 0:
        raise InvalidConfiguration(f"{name} must be a positive integer, got {value!r}")
    return length


def _as_price(value: Any, name: str = "value") -> float:
    """Validate a single filter input: finite real number → float."""
    if isinstance(value, bool) or not isinstance(value, Real):
        raise InvalidInput(f"{name} must be a real number, got {value!r}")
    x = float(value)
    if not math.isfinite(x):
        raise InvalidInput(f"{name} must be finite, got {x!r}")
    return x


# ---------------------------------------------------------------------------
# Shared state classes
# ---------------------------------------------------------------------------

@dataclass
class EMAState:
    """Single-pole exponential smoothing, alpha = 2 / (length + 1).

    ``last is None`` until the first update; the first output is the
    first input.  ``alpha`` is derived from ``length``.
    """
    length: int
    last: Optional[float] = None
    alpha: float = field(init=False)

    def __post_init__(self) -> None:
        self.length = _as_length(self.length)
        self.alpha = 2.0 / (self.length + 1.0)

    def update(self, x: float) -> float:
        x = _as_price(x)
        if self.last is None:
            self.last = x
        else:
            self.last = x * self.alpha + self.last * (1.0 - self.alpha)
        return self.last


def ema_make(length: int) -> EMAState:
    """EMA state – alpha = 2 / (length + 1)."""
    return EMAState(length=length)


# ---------------------------------------------------------------------------
# Indicator descriptor & registries  (populated by category modules)
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class StatefulIndicator:
    """Immutable descriptor for a single stateful indicator."""
    kind:         str
    inputs:       Tuple[str, ...]
    init:         Callable[[Dict[str, Any]], Any]
    update:       Callable[[Any, Dict[str, Any], Dict[str, Any]],
                           Tuple[List[Any], Any]]
    output_names: Callable[[Dict[str, Any]], List[str]]
    # state -> the params it was built with (lets a passed-in state name its outputs)
    state_params: Optional[Callable[[Any], Dict[str, Any]]] = None


# Populated by category modules at import time.
STATEFUL_REGISTRY: Dict[str, StatefulIndicator] = {}
SEED_REGISTRY:     Dict[str, Callable] = {}    # kind -> seed_fn(inputs, params) -> State


def get_indicator(kind: str) -> StatefulIndicator:
    indicator = STATEFUL_REGISTRY.get(kind)
    if indicator is None:
        raise ValueError(f"Indicator '{kind}' not found in STATEFUL_REGISTRY")
    return indicator


# ---------------------------------------------------------------------------
# Generic seed helper
# ---------------------------------------------------------------------------

def replay_seed(kind: str, inputs: Dict[str, Any], params: Dict[str, Any]) -> Any:
    """Generic seed: replay the stateful update over historical Series.

    *inputs* values must be ``pd.Series`` (or any indexable with ``.iloc``).
    Returns the final *State* after processing all rows.  Rows where any
    input is missing are skipped with a single ``UserWarning``.
    """
    import pandas as pd          # lazy – pandas not required at module load
    indicator = get_indicator(kind)
    state = indicator.init(params)
    keys = list(indicator.inputs)
    missing = [k for k in keys if k not in inputs]
    if missing:
        raise ValueError(f"Indicator '{kind}' needs inputs {missing}")
    n = len(inputs[keys[0]])
    skipped = 0
    for i in range(n):
        bar: Dict[str, float] = {}
        valid = True
        for k in keys:
            v = inputs[k].iloc[i]
            if pd.isna(v):
                valid = False
                break
            bar[k] = float(v)
        if not valid:
            skipped += 1
            continue
        _, state = indicator.update(state, bar, params)
    if skipped:
        warnings.warn(
            f"{kind}: skipped {skipped} of {n} rows with missing inputs while seeding.",
            UserWarning,
            stacklevel=2,
        )
    return state


# ---------------------------------------------------------------------------
# Output-name helpers
# ---------------------------------------------------------------------------

STATEFUL_SPEC_EXCLUDES = frozenset({
    "kind", "append", "prefix", "suffix", "delimiter",
    "col_names", "state_key", "returns", "returns_state",
    "name", "description",
})


def resolve_output_names(
        base_names: List[str], spec: Dict[str, Any]
) -> Tuple[Optional[List[str]], Optional[str]]:
    """Apply prefix / suffix / col_names overrides from *spec*."""
    names = list(base_names)
    delimiter = spec.get("delimiter", "_")
    prefix = spec.get("prefix") or ""
    suffix = spec.get("suffix") or ""
    if prefix:
        prefix = f"{prefix}{delimiter}"
    if suffix:
        suffix = f"{delimiter}{suffix}"
    if prefix or suffix:
        names = [f"{prefix}{n}{suffix}" for n in names]
    col_names = spec.get("col_names")
    if col_names is not None:
        if not isinstance(col_names, tuple):
            col_names = (col_names,)
        if len(col_names) < len(names):
            return None, f"[!] col_names too short: {len(col_names)} < {len(names)}"
        names = list(col_names[: len(names)])
    return names, None


def stateful_supported_kinds() -> List[str]:
    """Return sorted list of supported indicator kinds."""
    return sorted(STATEFUL_REGISTRY.keys())
