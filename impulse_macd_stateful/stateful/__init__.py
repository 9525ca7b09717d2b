# -*- coding: utf-8 -*-
"""impulse-macd.stateful – streaming / stateful indicator package.

Category modules populate STATEFUL_REGISTRY and SEED_REGISTRY at import
time.  This package re-exports them plus the shared base API.
"""
from __future__ import annotations

# Base API (always available)
from ._base import (
    ImpulseMACDError,
    InvalidConfiguration,
    InvalidInput,
    EMAState,
    StatefulIndicator,
    STATEFUL_REGISTRY,
    SEED_REGISTRY,
    ema_make,
    get_indicator,
    replay_seed,
    resolve_output_names,
    stateful_supported_kinds,
    STATEFUL_SPEC_EXCLUDES,
)

# ---------------------------------------------------------------------------
# Category modules – each populates the shared registries on import
# ---------------------------------------------------------------------------
from ._overlap import (      # ema, smma, zlema, sma
    SMMAState,
    ZLEMAState,
    SMAWindow,
    smma_make,
    zlema_make,
    sma_make,
)
from ._momentum import (     # impulse_macd
    DEFAULT_LENGTH_MA,
    DEFAULT_LENGTH_SIGNAL,
    ImpulseColor,
    ImpulseMACD,
    ImpulseValue,
    PriceBar,
    impulse_color,
)
from ._runner import run_stateful

__all__ = [
    # base
    "ImpulseMACDError",
    "InvalidConfiguration",
    "InvalidInput",
    "EMAState",
    "StatefulIndicator",
    "STATEFUL_REGISTRY",
    "SEED_REGISTRY",
    "ema_make",
    "get_indicator",
    "replay_seed",
    "resolve_output_names",
    "stateful_supported_kinds",
    # filters
    "SMMAState",
    "ZLEMAState",
    "SMAWindow",
    "smma_make",
    "zlema_make",
    "sma_make",
    # impulse macd
    "DEFAULT_LENGTH_MA",
    "DEFAULT_LENGTH_SIGNAL",
    "ImpulseColor",
    "ImpulseMACD",
    "ImpulseValue",
    "PriceBar",
    "impulse_color",
    # runner
    "run_stateful",
]
