# -*- coding: utf-8 -*-
from warnings import warn

from numba import njit
from numpy import array, empty, int64
from pandas import DataFrame, Series

from impulse_macd_stateful.utils import v_length, v_offset, v_series

# Colour codes returned by nb_impulse, indexed into _COLORS.
_COLORS = array(["lime", "green", "red", "orange"], dtype=object)


# Two chained EMAs, first output = first input.
@njit(cache=True)
def nb_zlema(x, length):
    m = x.size
    alpha = 2.0 / (length + 1.0)
    result = empty(m)
    if m == 0:
        return result

    e1 = x[0]
    e2 = x[0]
    result[0] = e1 + (e1 - e2)
    for i in range(1, m):
        e1 = x[i] * alpha + e1 * (1.0 - alpha)
        e2 = e1 * alpha + e2 * (1.0 - alpha)
        result[i] = e1 + (e1 - e2)
    return result


# Wilder smoothing seeded with the first value.
@njit(cache=True)
def nb_smma(x, length):
    m = x.size
    result = empty(m)
    if m == 0:
        return result

    result[0] = x[0]
    for i in range(1, m):
        result[i] = (result[i - 1] * (length - 1) + x[i]) / length
    return result


# Running-sum SMA; divisor grows until the window is full.
@njit(cache=True)
def nb_sma(x, length):
    m = x.size
    result = empty(m)
    total = 0.0
    for i in range(m):
        if i >= length:
            total -= x[i - length]
        total += x[i]
        result[i] = total / min(i + 1, length)
    return result


@njit(cache=True)
def nb_impulse(high, low, close, length_ma):
    m = high.size
    hlc3 = (high + low + close) / 3.0
    hi = nb_smma(high, length_ma)
    lo = nb_smma(low, length_ma)
    mi = nb_zlema(hlc3, length_ma)

    md = empty(m)
    color = empty(m, dtype=int64)
    for i in range(m):
        if mi[i] > hi[i]:
            md[i] = mi[i] - hi[i]
        elif mi[i] < lo[i]:
            md[i] = mi[i] - lo[i]
        else:
            md[i] = 0.0

        if hlc3[i] > mi[i]:
            color[i] = 0 if hlc3[i] > hi[i] else 1
        else:
            color[i] = 2 if hlc3[i] < lo[i] else 3
    return md, color


def impulse_macd(
    high: Series, low: Series, close: Series,
    length_ma: int = None, length_signal: int = None,
    offset: int = None, **kwargs
):
    """Impulse MACD (IMPULSE)

    LazyBear's Impulse MACD measures how far a zero-lag EMA of the typical
    price has broken out of a band formed by Wilder-smoothed highs and
    lows. Inside the band momentum is zero.

    Sources:
        * [tradingview](https://www.tradingview.com/script/qt6xLfLi-Impulse-MACD-LazyBear/)

    Calculation:
        Default Inputs:
            length_ma=34, length_signal=9

        HLC3 = (high + low + close) / 3
        HI = SMMA(high, length_ma)
        LO = SMMA(low, length_ma)
        MI = ZLEMA(HLC3, length_ma)
        MD = MI - HI if MI > HI else MI - LO if MI < LO else 0
        SB = SMA(MD, length_signal)
        SH = MD - SB

    Parameters:
        high (Series): ```high``` Series
        low (Series): ```low``` Series
        close (Series): ```close``` Series
        length_ma (int): Band and ZLEMA period. Default: ```34```
        length_signal (int): Signal period. Default: ```9```
        offset (int): Post shift. Default: ```0```

    Other Parameters:
        fillna (value): ```pd.DataFrame.fillna(value)```

    Returns:
        (DataFrame): 4 columns, md, histogram, signal and colour

    Note: Warm-up
        Every filter is seeded with the first bar and the signal SMA
        averages over the bars seen so far, so there are no leading NaNs.
        The numbers match ``ImpulseMACD.update`` bar for bar.
    """
    # Validate
    length_ma = v_length(length_ma, 34, "length_ma")
    length_signal = v_length(length_signal, 9, "length_signal")
    high = v_series(high, "high")
    low = v_series(low, "low")
    close = v_series(close, "close")
    offset = v_offset(offset)

    if not (high.size == low.size == close.size):
        raise ValueError("[X] high, low and close must have the same length")

    if high.size < length_ma:
        warn(
            f"IMPULSE: {high.size} bars < length_ma={length_ma}, values are warm-up only.",
            UserWarning,
            stacklevel=2,
        )

    # Calculation
    md, color = nb_impulse(high.to_numpy(), low.to_numpy(), close.to_numpy(), length_ma)
    sb = nb_sma(md, length_signal)
    sh = md - sb

    # Name and Category
    _props = f"_{length_ma}_{length_signal}"
    df = DataFrame({
        f"IMPULSE{_props}": md,
        f"IMPULSEh{_props}": sh,
        f"IMPULSEs{_props}": sb,
        f"IMPULSEc{_props}": _COLORS[color],
    }, index=high.index)

    # Offset
    if offset != 0:
        df = df.shift(offset)

    # Fill
    if "fillna" in kwargs:
        df = df.fillna(kwargs["fillna"])

    df.name = f"IMPULSE{_props}"
    df.category = "momentum"

    return df
