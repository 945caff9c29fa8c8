from typing import List, Sequence, Tuple

from ewave.data.bars import Bar, BarSeries

DAY_MS = 86_400_000
T0 = 1_700_000_000_000


def zigzag_bars(anchors: Sequence[Tuple[int, float]]) -> BarSeries:
    """Flat-range bars linearly interpolated between (index, price) anchors.

    Each bar has open == high == low == close, so an interior anchor becomes a
    pivot exactly at its price when both neighbouring legs move away from it
    and anchors are at least lookback bars apart.
    """
    bars: List[Bar] = []
    for (i0, p0), (i1, p1) in zip(anchors, anchors[1:]):
        for i in range(i0, i1):
            px = p0 + (p1 - p0) * (i - i0) / (i1 - i0)
            bars.append(Bar(ts=T0 + i * DAY_MS, open=px, high=px, low=px, close=px, volume=1.0))
    i_last, p_last = anchors[-1]
    bars.append(Bar(ts=T0 + i_last * DAY_MS, open=p_last, high=p_last, low=p_last, close=p_last, volume=1.0))
    return BarSeries.from_bars(bars)


def spaced(prices: Sequence[float], first: float, last: float, step: int = 10) -> BarSeries:
    """Anchors every ``step`` bars: a lead-in price, the pivot prices, a lead-out price."""
    pts = [first, *prices, last]
    return zigzag_bars([(k * step, p) for k, p in enumerate(pts)])


IMPULSE_PRICES = [100, 110, 104, 130, 120, 140, 134, 146, 140]
