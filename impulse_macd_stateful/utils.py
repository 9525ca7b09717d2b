# -*- coding: utf-8 -*-
from numpy import isfinite
from pandas import Series

from impulse_macd_stateful.stateful._base import InvalidInput, _as_length

__all__ = ["v_length", "v_offset", "v_series"]


def v_length(x, default: int, name: str = "length") -> int:
    """Window length; None means default.  Raises InvalidConfiguration."""
    return _as_length(default if x is None else x, name)


def v_offset(x) -> int:
    return int(x) if isinstance(x, int) and not isinstance(x, bool) else 0


def v_series(series: Series, name: str = "series") -> Series:
    """float64 Series with finite values only.  Raises InvalidInput."""
    if not isinstance(series, Series):
        raise InvalidInput(f"{name} must be a pandas Series, got {type(series).__name__}")
    try:
        series = series.astype("float64")
    except (TypeError, ValueError) as e:
        raise InvalidInput(f"{name} must hold real numbers") from e
    if not isfinite(series.to_numpy()).all():
        raise InvalidInput(f"{name} contains NaN or infinite values")
    return series
