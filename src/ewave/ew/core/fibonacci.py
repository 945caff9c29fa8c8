"""Fibonacci retracement / extension levels.

Pure functions of two reference prices. The ratio constants are shared with
the wave matcher's target projection.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence, Tuple

FIB_236 = 0.236
FIB_382 = 0.382
FIB_500 = 0.5
FIB_618 = 0.618
FIB_786 = 0.786
FIB_1618 = 1.618

RETRACEMENT_RATIOS: Tuple[float, ...] = (FIB_236, FIB_382, FIB_500, FIB_618, FIB_786)


@dataclass(frozen=True)
class FibonacciLevels:
    level0: float
    level23_6: float
    level38_2: float
    level50_0: float
    level61_8: float
    level78_6: float
    level100: float
    level161_8: float
    level261_8: float

    def as_dict(self) -> Dict[str, float]:
        return {
            "0%": self.level0,
            "23.6%": self.level23_6,
            "38.2%": self.level38_2,
            "50.0%": self.level50_0,
            "61.8%": self.level61_8,
            "78.6%": self.level78_6,
            "100%": self.level100,
            "161.8%": self.level161_8,
            "261.8%": self.level261_8,
        }

    def retracements(self) -> List[Tuple[str, float]]:
        """The 0%..100% guide lines drawn over a chart."""
        return [(k, v) for k, v in self.as_dict().items() if k not in ("161.8%", "261.8%")]


def calculate_fibonacci_levels(start_px: float, end_px: float) -> FibonacciLevels:
    diff = end_px - start_px
    r236, r382, r500, r618, r786 = (end_px - diff * r for r in RETRACEMENT_RATIOS)
    return FibonacciLevels(
        level0=end_px,
        level23_6=r236,
        level38_2=r382,
        level50_0=r500,
        level61_8=r618,
        level78_6=r786,
        level100=start_px,
        level161_8=start_px - diff * FIB_618,
        level261_8=start_px - diff * FIB_1618,
    )


def levels_from_wave_labels(labels: Sequence[Any]) -> Optional[FibonacciLevels]:
    """Levels from the last two labelled wave points (objects with ``price``)."""
    if len(labels) < 2:
        return None
    return calculate_fibonacci_levels(float(labels[-2].price), float(labels[-1].price))
