"""Pivot (local turning point) detection.

A bar is a pivot HIGH when its high is strictly above every other high within
``lookback`` bars on each side, and a pivot LOW when its low is strictly below
every other low in that window. The HIGH test runs first; the LOW test only
runs for bars that failed it, so a bar is never reported as both.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Sequence

from ewave.logging import get_logger

log = get_logger("ewave.pivots")

PIVOT_LOOKBACK = 5


class PivotKind(str, Enum):
    HIGH = "high"
    LOW = "low"


@dataclass(frozen=True)
class PivotPoint:
    index: int  # position in the bar sequence
    price: float
    ts: int
    kind: PivotKind

    def to_dict(self) -> Dict[str, Any]:
        return {"index": self.index, "price": self.price, "ts": self.ts, "kind": self.kind.value}


def _is_pivot_high(bars: Sequence[Any], i: int, lookback: int) -> bool:
    hi = bars[i].high
    for j in range(i - lookback, i + lookback + 1):
        if j != i and bars[j].high >= hi:
            return False
    return True


def _is_pivot_low(bars: Sequence[Any], i: int, lookback: int) -> bool:
    lo = bars[i].low
    for j in range(i - lookback, i + lookback + 1):
        if j != i and bars[j].low <= lo:
            return False
    return True


def find_pivot_points(bars: Sequence[Any], lookback: int = PIVOT_LOOKBACK) -> List[PivotPoint]:
    """Scan ``bars`` and return pivots in ascending index order.

    ``bars`` is any indexable sequence of objects with ``ts``, ``high`` and
    ``low`` (a BarSeries or a list of Bar). Sequences shorter than
    ``2 * lookback + 1`` yield no pivots.
    """
    n = len(bars)
    out: List[PivotPoint] = []
    for i in range(lookback, n - lookback):
        b = bars[i]
        if _is_pivot_high(bars, i, lookback):
            out.append(PivotPoint(index=i, price=float(b.high), ts=int(b.ts), kind=PivotKind.HIGH))
        elif _is_pivot_low(bars, i, lookback):
            out.append(PivotPoint(index=i, price=float(b.low), ts=int(b.ts), kind=PivotKind.LOW))

    log.debug("pivots found", extra={"bars": n, "pivots": len(out), "lookback": lookback})
    return out


def alternates(pivots: Sequence[PivotPoint]) -> bool:
    """True when no two consecutive pivots share a kind."""
    for a, b in zip(pivots, pivots[1:]):
        if a.kind == b.kind:
            return False
    return True
