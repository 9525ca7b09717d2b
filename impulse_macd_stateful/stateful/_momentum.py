# -*- coding: utf-8 -*-
"""impulse-macd stateful -- momentum indicators.

Impulse MACD (LazyBear):
  hlc3 = (high + low + close) / 3
  hi   = SMMA(high, length_ma)
  lo   = SMMA(low,  length_ma)
  mi   = ZLEMA(hlc3, length_ma)
  md   = mi - hi  if mi > hi
         mi - lo  if mi < lo
         0        otherwise          (neutral band between the SMMAs)
  sb   = SMA(md, length_signal)
  sh   = md - sb

Colour compares hlc3 (not md) with mi, hi and lo:
  hlc3 >  mi:  lime if hlc3 > hi  else green
  hlc3 <= mi:  red  if hlc3 < lo  else orange

The ``>`` / ``>=`` asymmetry between branches is deliberate; consumers
depend on the exact tie-breaks.
"""
from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Iterable, List, NamedTuple, Optional, Tuple

from ._base import (
    _param,
    _as_length,
    _as_price,
    StatefulIndicator,
    STATEFUL_REGISTRY,
)
from ._overlap import (
    SMAWindow,
    SMMAState,
    ZLEMAState,
    sma_make,
    smma_make,
    zlema_make,
)

DEFAULT_LENGTH_MA = 34
DEFAULT_LENGTH_SIGNAL = 9


class ImpulseColor(str, Enum):
    LIME = "lime"
    GREEN = "green"
    RED = "red"
    ORANGE = "orange"

    def __str__(self) -> str:
        return self.value


class PriceBar(NamedTuple):
    high: float
    low: float
    close: float


@dataclass(frozen=True)
class ImpulseValue:
    """One Impulse MACD result.

    md    -- main difference
    sb    -- signal, SMA of md
    sh    -- histogram, md - sb
    color -- momentum state of the bar
    """
    md: float
    sb: float
    sh: float
    color: ImpulseColor


def impulse_color(hlc3: float, mi: float, hi: float, lo: float) -> ImpulseColor:
    """Classify a bar.  Exactly one colour for every input."""
    if hlc3 > mi:
        return ImpulseColor.LIME if hlc3 > hi else ImpulseColor.GREEN
    return ImpulseColor.RED if hlc3 < lo else ImpulseColor.ORANGE


def _bar_fields(bar: Any) -> Tuple[Any, Any, Any]:
    """(high, low, close) from a PriceBar, a mapping, an object or a 3-sequence."""
    if isinstance(bar, Mapping):
        return bar["high"], bar["low"], bar["close"]
    if hasattr(bar, "high") and hasattr(bar, "low") and hasattr(bar, "close"):
        return bar.high, bar.low, bar.close
    high, low, close = bar
    return high, low, close


# ===========================================================================
# Impulse MACD engine
# ===========================================================================

class ImpulseMACD:
    """Streaming Impulse MACD.

    Owns SMMA(high), SMMA(low), ZLEMA(hlc3) with ``length_ma`` and an SMA
    of md with ``length_signal``, plus the ordered history of results.

    Not thread-safe: one writer, sequential ``update`` calls.  Prices must
    be finite; a rejected bar raises ``InvalidInput`` and leaves every
    sub-filter and the history untouched.
    """

    def __init__(self, length_ma: int = DEFAULT_LENGTH_MA,
                 length_signal: int = DEFAULT_LENGTH_SIGNAL) -> None:
        self._length_ma = _as_length(length_ma, "length_ma")
        self._length_signal = _as_length(length_signal, "length_signal")
        self.reset()

    @classmethod
    def default(cls) -> "ImpulseMACD":
        return cls(DEFAULT_LENGTH_MA, DEFAULT_LENGTH_SIGNAL)

    @property
    def length_ma(self) -> int:
        return self._length_ma

    @property
    def length_signal(self) -> int:
        return self._length_signal

    def reset(self) -> None:
        """Drop all filter state and history; keep the window lengths."""
        self.smma_high: SMMAState = smma_make(self._length_ma)
        self.smma_low: SMMAState = smma_make(self._length_ma)
        self.zlema: ZLEMAState = zlema_make(self._length_ma)
        self.signal_sma: SMAWindow = sma_make(self._length_signal)
        self._values: List[ImpulseValue] = []

    def update(self, high: float, low: float, close: float) -> ImpulseValue:
        high = _as_price(high, "high")
        low = _as_price(low, "low")
        close = _as_price(close, "close")

        hlc3 = (high + low + close) / 3.0

        hi = self.smma_high.update(high)
        lo = self.smma_low.update(low)
        mi = self.zlema.update(hlc3)

        if mi > hi:
            md = mi - hi
        elif mi < lo:
            md = mi - lo
        else:
            md = 0.0

        sb = self.signal_sma.update(md)
        sh = md - sb

        value = ImpulseValue(md=md, sb=sb, sh=sh, color=impulse_color(hlc3, mi, hi, lo))
        self._values.append(value)
        return value

    def batch_update(self, bars: Iterable[Any]) -> List[ImpulseValue]:
        """Apply ``update`` to each bar in order."""
        return [self.update(*_bar_fields(bar)) for bar in bars]

    def get_values(self) -> Tuple[ImpulseValue, ...]:
        """Snapshot of the full history, oldest first."""
        return tuple(self._values)

    def get_latest(self) -> Optional[ImpulseValue]:
        """Most recent value, or None before the first update."""
        if not self._values:
            return None
        return self._values[-1]

    def __len__(self) -> int:
        return len(self._values)

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(length_ma={self._length_ma}, "
            f"length_signal={self._length_signal}, bars={len(self._values)})"
        )


# ===========================================================================
# IMPULSE_MACD  (replay_only)
# ===========================================================================
# Outputs: IMPULSE (md), IMPULSEh (sh), IMPULSEs (sb), IMPULSEc (colour)
# The SMMA bands are not part of the output, so state can only be rebuilt
# by replaying bars.  Defaults: length_ma=34, length_signal=9.

def _impulse_lengths(params: Dict[str, Any]) -> Tuple[int, int]:
    length_ma = _as_length(_param(params, "length_ma", DEFAULT_LENGTH_MA), "length_ma")
    length_signal = _as_length(
        _param(params, "length_signal", DEFAULT_LENGTH_SIGNAL), "length_signal"
    )
    return length_ma, length_signal


def _impulse_macd_init(params: Dict[str, Any]) -> ImpulseMACD:
    return ImpulseMACD(*_impulse_lengths(params))


def _impulse_macd_update(
    state: ImpulseMACD, bar: Dict[str, Any], params: Dict[str, Any]
) -> Tuple[List[Any], ImpulseMACD]:
    v = state.update(bar["high"], bar["low"], bar["close"])
    return [v.md, v.sh, v.sb, v.color.value], state


def _impulse_macd_output_names(params: Dict[str, Any]) -> List[str]:
    length_ma, length_signal = _impulse_lengths(params)
    p = f"_{length_ma}_{length_signal}"
    return [f"IMPULSE{p}", f"IMPULSEh{p}", f"IMPULSEs{p}", f"IMPULSEc{p}"]


def _impulse_macd_state_params(state: ImpulseMACD) -> Dict[str, Any]:
    return {"length_ma": state.length_ma, "length_signal": state.length_signal}


STATEFUL_REGISTRY["impulse_macd"] = StatefulIndicator(
    kind="impulse_macd",
    inputs=("high", "low", "close"),
    init=_impulse_macd_init,
    update=_impulse_macd_update,
    output_names=_impulse_macd_output_names,
    state_params=_impulse_macd_state_params,
)
