# -*- coding: utf-8 -*-
"""impulse-macd stateful -- overlap (smoothing) filters.

Each section follows the pattern:
  1. State dataclass  (if beyond what _base already provides)
  2. init / update / output_names helpers
  3. STATEFUL_REGISTRY["<kind>"] = StatefulIndicator(...)
  4. SEED_REGISTRY["<kind>"]     = seed_fn          (output_only / internal_series)
     (replay_only indicators omit step 4)

Seed-method legend used throughout:
  output_only     -- seed_fn takes the last output value and rebuilds the
                     minimal state needed to keep updating.
  internal_series -- seed_fn additionally reads raw input history
                     (e.g. the SMA window) so the numbers stay identical.
  replay_only     -- no seed_fn; the only way to initialise is to replay
                     every bar through update().

Every filter accepts finite real inputs only and raises ``InvalidInput``
otherwise.  The first update of EMA, SMMA and ZLEMA returns its input.
"""
from __future__ import annotations

from collections import deque
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

from ._base import (
    _param,
    _as_length,
    _as_price,
    EMAState,
    ema_make,
    StatefulIndicator,
    STATEFUL_REGISTRY,
    SEED_REGISTRY,
)


def _last_valid(series: Dict[str, Any], col: str) -> Optional[float]:
    s = series.get(col)
    if s is None:
        return None
    lv = s.dropna()
    if len(lv) == 0:
        return None
    return float(lv.iloc[-1])


def _length_params(state: Any) -> Dict[str, Any]:
    return {"length": state.length}


# ===========================================================================
# EMA  (output_only)
# ===========================================================================
# State: reuses EMAState directly.  alpha = 2/(length+1), first output = x[0].
# Default length = 10.

def _ema_init(params: Dict[str, Any]) -> EMAState:
    return ema_make(_as_length(_param(params, "length", 10)))


def _ema_update(
    state: EMAState, bar: Dict[str, Any], params: Dict[str, Any]
) -> Tuple[List[Optional[float]], EMAState]:
    return [state.update(bar["close"])], state


def _ema_output_names(params: Dict[str, Any]) -> List[str]:
    length = _as_length(_param(params, "length", 10))
    return [f"EMA_{length}"]


def _ema_seed(series: Dict[str, Any], params: Dict[str, Any]) -> EMAState:
    """Reconstruct EMAState from the last valid output value."""
    state = _ema_init(params)
    state.last = _last_valid(series, _ema_output_names(params)[0])
    return state


STATEFUL_REGISTRY["ema"] = StatefulIndicator(
    kind="ema",
    inputs=("close",),
    init=_ema_init,
    update=_ema_update,
    output_names=_ema_output_names,
    state_params=_length_params,
)
SEED_REGISTRY["ema"] = _ema_seed


# ===========================================================================
# SMMA  (output_only)  -- SMoothed MA (Wilder)
# ===========================================================================
# Formula: smma[i] = ((length-1)*smma[i-1] + x[i]) / length
# Seed: first input (a length-1 mean), not an SMA of the first `length`
# bars.  Same family as an EMA with alpha = 1/length; kept as its own
# formula so the two smoothing constants never get mixed up.
# Default length = 7.

@dataclass
class SMMAState:
    length: int
    prev: Optional[float] = None

    def __post_init__(self) -> None:
        self.length = _as_length(self.length)

    def update(self, x: float) -> float:
        x = _as_price(x)
        n = self.length
        if self.prev is None:
            self.prev = x
        else:
            self.prev = (self.prev * (n - 1) + x) / n
        return self.prev


def smma_make(length: int) -> SMMAState:
    return SMMAState(length=length)


def _smma_init(params: Dict[str, Any]) -> SMMAState:
    return smma_make(_param(params, "length", 7))


def _smma_update(
    state: SMMAState, bar: Dict[str, Any], params: Dict[str, Any]
) -> Tuple[List[Optional[float]], SMMAState]:
    return [state.update(bar["close"])], state


def _smma_output_names(params: Dict[str, Any]) -> List[str]:
    length = _as_length(_param(params, "length", 7))
    return [f"SMMA_{length}"]


def _smma_seed(series: Dict[str, Any], params: Dict[str, Any]) -> SMMAState:
    state = _smma_init(params)
    state.prev = _last_valid(series, _smma_output_names(params)[0])
    return state


STATEFUL_REGISTRY["smma"] = StatefulIndicator(
    kind="smma",
    inputs=("close",),
    init=_smma_init,
    update=_smma_update,
    output_names=_smma_output_names,
    state_params=_length_params,
)
SEED_REGISTRY["smma"] = _smma_seed


# ===========================================================================
# ZLEMA  (replay_only)  -- Zero-Lag EMA, two chained EMAs
# ===========================================================================
# ema1 = EMA(x, length); ema2 = EMA(ema1, length)
# zlema = ema1 + (ema1 - ema2)
# The output alone cannot separate ema1 from ema2, so there is no seed_fn.
# Default length = 10.

@dataclass
class ZLEMAState:
    length: int
    ema1: Optional[EMAState] = None
    ema2: Optional[EMAState] = None

    def __post_init__(self) -> None:
        self.length = _as_length(self.length)
        if self.ema1 is None:
            self.ema1 = ema_make(self.length)
        if self.ema2 is None:
            self.ema2 = ema_make(self.length)

    def update(self, x: float) -> float:
        e1 = self.ema1.update(x)
        e2 = self.ema2.update(e1)
        return e1 + (e1 - e2)


def zlema_make(length: int) -> ZLEMAState:
    return ZLEMAState(length=length)


def _zlema_init(params: Dict[str, Any]) -> ZLEMAState:
    return zlema_make(_param(params, "length", 10))


def _zlema_update(
    state: ZLEMAState, bar: Dict[str, Any], params: Dict[str, Any]
) -> Tuple[List[Optional[float]], ZLEMAState]:
    return [state.update(bar["close"])], state


def _zlema_output_names(params: Dict[str, Any]) -> List[str]:
    length = _as_length(_param(params, "length", 10))
    return [f"ZLEMA_{length}"]


STATEFUL_REGISTRY["zlema"] = StatefulIndicator(
    kind="zlema",
    inputs=("close",),
    init=_zlema_init,
    update=_zlema_update,
    output_names=_zlema_output_names,
    state_params=_length_params,
)


# ===========================================================================
# SMA  (internal_series)  -- rolling window mean
# ===========================================================================
# Warm-up divides by the number of values held so far (growing window),
# never zero-pads.  deque(maxlen=length) drops the oldest value in O(1).
# Default length = 10.

@dataclass
class SMAWindow:
    """Simple rolling-window SMA for stateful use."""
    length: int
    buf: deque = field(default_factory=deque)
    total: float = field(init=False, default=0.0)

    def __post_init__(self) -> None:
        self.length = _as_length(self.length)
        self.buf = deque((_as_price(x) for x in self.buf), maxlen=self.length)
        self.total = float(sum(self.buf))

    def update(self, x: float) -> float:
        x = _as_price(x)
        if len(self.buf) == self.length:
            self.total -= self.buf[0]
        self.buf.append(x)
        self.total += x
        return self.total / len(self.buf)


def sma_make(length: int) -> SMAWindow:
    return SMAWindow(length=length)


def _sma_init(params: Dict[str, Any]) -> SMAWindow:
    return sma_make(_param(params, "length", 10))


def _sma_update(
    state: SMAWindow, bar: Dict[str, Any], params: Dict[str, Any]
) -> Tuple[List[Optional[float]], SMAWindow]:
    return [state.update(bar["close"])], state


def _sma_output_names(params: Dict[str, Any]) -> List[str]:
    length = _as_length(_param(params, "length", 10))
    return [f"SMA_{length}"]


def _sma_seed(series: Dict[str, Any], params: Dict[str, Any]) -> SMAWindow:
    """internal_series seed: refill the window from the raw close tail."""
    state = _sma_init(params)
    close_s = series.get("close")
    if close_s is not None:
        tail = close_s.dropna().iloc[-state.length:]
        for v in tail.values:
            state.update(float(v))
    return state


STATEFUL_REGISTRY["sma"] = StatefulIndicator(
    kind="sma",
    inputs=("close",),
    init=_sma_init,
    update=_sma_update,
    output_names=_sma_output_names,
    state_params=_length_params,
)
SEED_REGISTRY["sma"] = _sma_seed
