import random

from ewave.data.bars import Bar
from ewave.swing.pivots import PivotKind, alternates, find_pivot_points

from _bars import IMPULSE_PRICES, spaced


def _random_bars(n, seed):
    rng = random.Random(seed)
    px = 100.0
    out = []
    for i in range(n):
        px += rng.uniform(-2.0, 2.0)
        hi = px + rng.uniform(0.0, 1.0)
        lo = px - rng.uniform(0.0, 1.0)
        out.append(Bar(ts=i, open=px, high=round(hi, 1), low=round(lo, 1), close=px))
    return out


def test_pivots_at_zigzag_anchors():
    bars = spaced(IMPULSE_PRICES, first=108, last=150)
    pivots = find_pivot_points(bars)
    assert [p.index for p in pivots] == [10, 20, 30, 40, 50, 60, 70, 80, 90]
    assert [p.price for p in pivots] == IMPULSE_PRICES
    assert [p.kind for p in pivots][:3] == [PivotKind.LOW, PivotKind.HIGH, PivotKind.LOW]
    assert pivots[0].ts == bars[10].ts
    assert alternates(pivots)


def test_short_input_has_no_pivots():
    bars = [Bar(ts=i, open=1, high=float(i % 3), low=-float(i % 3), close=1) for i in range(10)]
    assert find_pivot_points(bars) == []
    assert find_pivot_points([]) == []


def test_ties_disqualify():
    bars = [Bar(ts=i, open=1, high=5.0, low=1.0, close=1) for i in range(11)]
    bars[5] = Bar(ts=5, open=1, high=9.0, low=1.0, close=1)
    bars[8] = Bar(ts=8, open=1, high=9.0, low=1.0, close=1)
    assert find_pivot_points(bars) == []


def test_equal_lows_disqualify():
    bars = [Bar(ts=i, open=5, high=9.0, low=5.0, close=5) for i in range(11)]
    bars[5] = Bar(ts=5, open=5, high=9.0, low=1.0, close=5)
    bars[2] = Bar(ts=2, open=5, high=9.0, low=1.0, close=5)
    assert find_pivot_points(bars) == []

    bars[2] = Bar(ts=2, open=5, high=9.0, low=1.5, close=5)
    pivots = find_pivot_points(bars)
    assert [(p.index, p.kind, p.price) for p in pivots] == [(5, PivotKind.LOW, 1.0)]


def test_high_is_tested_before_low():
    bars = [Bar(ts=i, open=7, high=10.0, low=5.0, close=7) for i in range(11)]
    bars[5] = Bar(ts=5, open=7, high=20.0, low=1.0, close=7)
    pivots = find_pivot_points(bars)
    assert len(pivots) == 1
    assert pivots[0].kind == PivotKind.HIGH
    assert pivots[0].price == 20.0


def test_pivot_property_on_random_walk():
    lookback = 5
    for seed in range(5):
        bars = _random_bars(200, seed)
        pivots = find_pivot_points(bars, lookback=lookback)
        idxs = [p.index for p in pivots]
        assert idxs == sorted(set(idxs))
        for p in pivots:
            assert lookback <= p.index < len(bars) - lookback
            others = [bars[j] for j in range(p.index - lookback, p.index + lookback + 1) if j != p.index]
            if p.kind == PivotKind.HIGH:
                assert all(b.high < bars[p.index].high for b in others)
            else:
                assert all(b.low > bars[p.index].low for b in others)
