"""Elliott rule checks and additive scoring.

Impulse windows are 9 alternating pivots starting on a LOW; the first six
(p0..p5) carry waves 1-5. Corrective windows are 5 alternating pivots in
either direction; the first four carry Start/A/B/C.

Every rule is independent and adds a fixed weight, so impulse scores are sums
of a subset of the weights below and corrective scores are 25..90.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Sequence, Tuple

from ewave.ew.core.fibonacci import FIB_618, FIB_1618
from ewave.swing.pivots import PivotKind, PivotPoint

IMPULSE_WINDOW = 9
CORRECTIVE_WINDOW = 5

_IMPULSE_KINDS = tuple(PivotKind.LOW if k % 2 == 0 else PivotKind.HIGH for k in range(IMPULSE_WINDOW))
_CORRECTIVE_KINDS = (
    tuple(PivotKind.HIGH if k % 2 == 0 else PivotKind.LOW for k in range(CORRECTIVE_WINDOW)),
    tuple(PivotKind.LOW if k % 2 == 0 else PivotKind.HIGH for k in range(CORRECTIVE_WINDOW)),
)


@dataclass(frozen=True)
class ImpulseWeights:
    wave2_shorter: int = 20
    wave3_longest: int = 25
    wave4_shorter: int = 20
    wave2_above_start: int = 15
    wave4_no_overlap: int = 20


@dataclass(frozen=True)
class CorrectiveWeights:
    base: int = 25
    b_retraces: int = 35
    c_fib_ratio: int = 30
    ratio_targets: Tuple[float, ...] = (FIB_618, 1.0, FIB_1618)
    ratio_tolerance: float = 0.2


def _kinds(window: Sequence[PivotPoint]) -> Tuple[PivotKind, ...]:
    return tuple(p.kind for p in window)


def is_impulse_window(window: Sequence[PivotPoint]) -> bool:
    return _kinds(window) == _IMPULSE_KINDS


def is_corrective_window(window: Sequence[PivotPoint]) -> bool:
    return _kinds(window) in _CORRECTIVE_KINDS


def wave_heights(window: Sequence[PivotPoint], n: int) -> List[float]:
    """Absolute price moves between the first n+1 adjacent pivots."""
    return [abs(window[k + 1].price - window[k].price) for k in range(n)]


def score_impulse(window: Sequence[PivotPoint], w: ImpulseWeights = ImpulseWeights()) -> int:
    w1, w2, w3, w4, w5 = wave_heights(window, 5)
    p0, p1, p2, _, p4 = (p.price for p in window[:5])

    score = 0
    if w2 < w1:
        score += w.wave2_shorter
    if w3 > w1 and w3 > w5:
        score += w.wave3_longest
    if w4 < w3:
        score += w.wave4_shorter
    if p2 > p0:
        score += w.wave2_above_start
    if p4 > p1:
        score += w.wave4_no_overlap
    return score


def c_ratio_matches(wave_a: float, wave_c: float, w: CorrectiveWeights = CorrectiveWeights()) -> bool:
    # a flat wave A has no defined ratio
    if wave_a == 0:
        return False
    r = wave_c / wave_a
    return any(abs(r - t) < w.ratio_tolerance for t in w.ratio_targets)


def score_corrective(window: Sequence[PivotPoint], w: CorrectiveWeights = CorrectiveWeights()) -> int:
    wave_a, wave_b, wave_c = wave_heights(window, 3)

    score = w.base
    if wave_b < wave_a:
        score += w.b_retraces
    if c_ratio_matches(wave_a, wave_c, w):
        score += w.c_fib_ratio
    return score
