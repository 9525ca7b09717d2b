# -*- coding: utf-8 -*-
import copy
import itertools
import math
from types import SimpleNamespace

import pytest

from impulse_macd_stateful import (
    DEFAULT_LENGTH_MA,
    DEFAULT_LENGTH_SIGNAL,
    ImpulseColor,
    ImpulseMACD,
    ImpulseValue,
    InvalidConfiguration,
    InvalidInput,
    PriceBar,
    impulse_color,
)


def test_default_lengths():
    engine = ImpulseMACD.default()
    assert (engine.length_ma, engine.length_signal) == (34, 9)
    assert (DEFAULT_LENGTH_MA, DEFAULT_LENGTH_SIGNAL) == (34, 9)
    plain = ImpulseMACD()
    assert (plain.length_ma, plain.length_signal) == (34, 9)


@pytest.mark.parametrize("length_ma,length_signal", [
    (0, 9), (34, 0), (-5, 9), (34, -1), (2.5, 9), ("34", 9), (True, 9), (None, 9),
])
def test_invalid_configuration(length_ma, length_signal):
    with pytest.raises(InvalidConfiguration):
        ImpulseMACD(length_ma, length_signal)


def test_integral_float_lengths_accepted():
    engine = ImpulseMACD(34.0, 9.0)
    assert engine.length_ma == 34
    assert isinstance(engine.length_ma, int)


def test_scenario_identical_bars_stay_neutral():
    engine = ImpulseMACD(3, 2)
    for _ in range(20):
        v = engine.update(10.0, 8.0, 9.0)
        assert v == ImpulseValue(md=0.0, sb=0.0, sh=0.0, color=ImpulseColor.ORANGE)
        assert v.color == "orange"
    assert engine.smma_high.prev == 10.0
    assert engine.smma_low.prev == 8.0


def test_first_update():
    engine = ImpulseMACD(3, 2)
    v = engine.update(10.0, 8.0, 9.0)
    # hi=10, lo=8, mi=9 -> inside the band
    assert v.md == 0.0
    assert v.color is ImpulseColor.ORANGE


def test_breakout_above_band():
    engine = ImpulseMACD(3, 2)
    engine.update(10.0, 8.0, 9.0)
    v = engine.update(20.0, 18.0, 19.0)
    hi = (10.0 * 2 + 20.0) / 3
    e1 = 19.0 * 0.5 + 9.0 * 0.5
    e2 = e1 * 0.5 + 9.0 * 0.5
    mi = e1 + (e1 - e2)
    assert mi > hi
    assert v.md == pytest.approx(mi - hi)
    assert v.sb == pytest.approx((0.0 + (mi - hi)) / 2)
    assert v.sh == pytest.approx(v.md - v.sb)
    assert v.color is ImpulseColor.LIME


def test_breakdown_below_band():
    engine = ImpulseMACD(3, 2)
    engine.update(10.0, 8.0, 9.0)
    v = engine.update(2.0, 0.0, 1.0)
    assert v.md < 0.0
    assert v.color is ImpulseColor.RED


def test_constant_stream_converges_to_zero(bars):
    engine = ImpulseMACD(10, 4)
    engine.batch_update(bars[:50])
    for _ in range(2000):
        v = engine.update(100.0, 100.0, 100.0)
    assert abs(v.md) < 1e-9
    assert abs(v.sb) < 1e-9
    assert abs(v.sh) < 1e-9


@pytest.mark.parametrize("hlc3,mi,hi,lo,expected", [
    (2.0, 1.0, 1.5, 0.0, "lime"),
    (2.0, 1.0, 2.0, 0.0, "green"),    # hlc3 == hi -> not above
    (1.0, 1.0, 2.0, 0.0, "orange"),   # hlc3 == mi -> lower branch
    (0.0, 1.0, 2.0, 0.0, "orange"),   # hlc3 == lo -> not below
    (-1.0, 1.0, 2.0, 0.0, "red"),
])
def test_color_boundaries(hlc3, mi, hi, lo, expected):
    assert impulse_color(hlc3, mi, hi, lo) == expected


def test_color_classification_is_total():
    grid = [-1.0, 0.0, 1.0]
    seen = set()
    for hlc3, mi, hi, lo in itertools.product(grid, repeat=4):
        color = impulse_color(hlc3, mi, hi, lo)
        matches = [
            hlc3 > mi and hlc3 > hi,
            hlc3 > mi and hlc3 <= hi,
            hlc3 <= mi and hlc3 < lo,
            hlc3 <= mi and hlc3 >= lo,
        ]
        assert sum(matches) == 1
        assert color == ["lime", "green", "red", "orange"][matches.index(True)]
        seen.add(color)
    assert seen == set(ImpulseColor)


def test_history_bookkeeping(bars):
    engine = ImpulseMACD(5, 3)
    assert engine.get_latest() is None
    assert engine.get_values() == ()
    assert len(engine) == 0
    for k, bar in enumerate(bars[:25], start=1):
        v = engine.update(*bar)
        values = engine.get_values()
        assert len(engine) == len(values) == k
        assert engine.get_latest() is v is values[-1]


def test_get_values_is_snapshot(bars):
    engine = ImpulseMACD(5, 3)
    engine.batch_update(bars[:10])
    snapshot = engine.get_values()
    assert isinstance(snapshot, tuple)
    engine.batch_update(bars[10:20])
    assert len(snapshot) == 10
    assert engine.get_values()[:10] == snapshot


def test_values_are_immutable(bars):
    engine = ImpulseMACD(5, 3)
    v = engine.update(*bars[0])
    with pytest.raises(AttributeError):
        v.md = 1.0


def test_batch_matches_sequential(bars):
    batch = ImpulseMACD(8, 3).batch_update(bars)
    sequential = ImpulseMACD(8, 3)
    assert batch == [sequential.update(h, l, c) for h, l, c in bars]


def test_batch_accepts_bar_shapes(bars):
    h, l, c = bars[0]
    shapes = [
        PriceBar(h, l, c),
        (h, l, c),
        {"high": h, "low": l, "close": c},
        SimpleNamespace(high=h, low=l, close=c),
    ]
    results = [ImpulseMACD(5, 3).batch_update([bar])[0] for bar in shapes]
    assert all(r == results[0] for r in results)


def test_batch_empty():
    engine = ImpulseMACD(5, 3)
    assert engine.batch_update([]) == []
    assert engine.get_latest() is None


def test_reset_reproduces_fresh_run(bars):
    engine = ImpulseMACD(6, 4)
    first = engine.batch_update(bars)
    engine.reset()
    assert len(engine) == 0
    assert engine.get_latest() is None
    assert (engine.length_ma, engine.length_signal) == (6, 4)
    assert engine.batch_update(bars) == first
    assert ImpulseMACD(6, 4).batch_update(bars) == first


def test_engines_are_independent(bars):
    a, b = ImpulseMACD(5, 3), ImpulseMACD(5, 3)
    a.batch_update(bars[:30])
    assert len(b) == 0
    assert b.update(*bars[0]) == a.get_values()[0]


def test_deepcopy_branches_state(bars):
    engine = ImpulseMACD(5, 3)
    engine.batch_update(bars[:40])
    branch = copy.deepcopy(engine)
    assert branch.update(*bars[40]) == engine.update(*bars[40])
    assert len(branch) == len(engine) == 41


@pytest.mark.parametrize("bad", [
    (math.nan, 1.0, 1.0),
    (1.0, math.inf, 1.0),
    (1.0, 1.0, -math.inf),
    ("1", 1.0, 1.0),
    (1.0, None, 1.0),
])
def test_invalid_input_leaves_state_untouched(bars, bad):
    engine = ImpulseMACD(5, 3)
    engine.batch_update(bars[:10])
    reference = copy.deepcopy(engine)
    with pytest.raises(InvalidInput):
        engine.update(*bad)
    assert len(engine) == 10
    assert engine.update(*bars[10]) == reference.update(*bars[10])


def test_invalid_input_in_batch_keeps_earlier_results(bars):
    engine = ImpulseMACD(5, 3)
    with pytest.raises(InvalidInput):
        engine.batch_update(bars[:5] + [(math.nan, 1.0, 1.0)] + bars[5:10])
    assert len(engine) == 5


def test_repr():
    assert repr(ImpulseMACD(5, 3)) == "ImpulseMACD(length_ma=5, length_signal=3, bars=0)"
