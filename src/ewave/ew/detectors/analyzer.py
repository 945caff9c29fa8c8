"""EW analyzer: pivots -> best impulse / corrective window -> AnalysisResult.

- Find pivots on the bar sequence (fixed +-lookback window).
- Slide a 9-pivot window for impulses and a 5-pivot window for ABC corrections.
- Score each alternating window by additive rule weights; keep the first
  window with the strictly highest score.
- Report where the latest pivot sits inside the retained structure and, when
  mid-pattern, project a target.

Everything here is a pure function of its inputs; WaveAnalyzer only carries
its frozen config, so one instance can be shared across threads.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, List, Optional, Sequence, Tuple

from ewave.logging import get_logger

log = get_logger("ewave.analyzer")

from ewave.ew.core.fibonacci import FIB_618, FIB_1618, FibonacciLevels, calculate_fibonacci_levels
from ewave.ew.core.model import (
    CORRECTIVE_LABELS,
    IMPULSE_LABELS,
    AnalysisResult,
    PatternKind,
    PredictionTarget,
    WaveLabel,
)
from ewave.ew.core.rules import (
    CORRECTIVE_WINDOW,
    IMPULSE_WINDOW,
    is_corrective_window,
    is_impulse_window,
    score_corrective,
    score_impulse,
    wave_heights,
)
from ewave.swing.pivots import PIVOT_LOOKBACK, PivotPoint, find_pivot_points

INSUFFICIENT_DATA = "Insufficient data"
INSUFFICIENT_PIVOTS = "Insufficient pivot points"
NO_IMPULSE = "No impulse pattern found"
NO_CORRECTIVE = "No corrective pattern found"
DEVELOPING = "Developing new pattern"

IMPULSE_PREDICTION_FACTOR = 0.9
CORRECTIVE_PREDICTION_FACTOR = 0.8

# offset from window start to the last pivot -> structural position
_IMPULSE_POSITIONS = {
    8: "Completed 5-wave sequence",
    6: "In wave 5",
    4: "In wave 4",
    2: "In wave 3",
    0: "In wave 2",
}
_CORRECTIVE_POSITIONS = {
    4: "Completed ABC sequence",
    2: "In wave C",
    0: "In wave B",
}


@dataclass(frozen=True)
class AnalyzerConfig:
    lookback: int = PIVOT_LOOKBACK
    min_bars: int = 30
    min_pivots: int = 5


def _labels(window: Sequence[PivotPoint], names: Sequence[str]) -> Tuple[WaveLabel, ...]:
    return tuple(WaveLabel(index=p.index, price=p.price, label=name) for p, name in zip(window, names))


def _best_window(
    pivots: Sequence[PivotPoint],
    size: int,
    accept,
    score_fn,
) -> Tuple[Optional[int], int]:
    """Return (start offset, score) of the first strictly-best window, or (None, 0)."""
    best_i: Optional[int] = None
    best_score = 0
    for i in range(len(pivots) - size + 1):
        window = pivots[i:i + size]
        if not accept(window):
            continue
        s = score_fn(window)
        if s > best_score:
            best_i, best_score = i, s
    return best_i, best_score


def project_wave5_target(window: Sequence[PivotPoint], score: int) -> PredictionTarget:
    """Wave 5 projected from the wave 4 pivot by 0.618 of the 0->3 advance."""
    w0_to_3 = abs(window[3].price - window[0].price)
    return PredictionTarget(
        target=window[4].price + w0_to_3 * FIB_618,
        confidence=score * IMPULSE_PREDICTION_FACTOR,
    )


def project_wave_c_target(window: Sequence[PivotPoint], score: int) -> PredictionTarget:
    """Wave C projected from the B pivot by 1.618 of wave A."""
    wave_a = wave_heights(window, 1)[0]
    return PredictionTarget(
        target=window[2].price + wave_a * FIB_1618,
        confidence=score * CORRECTIVE_PREDICTION_FACTOR,
    )


def identify_impulse_pattern(pivots: Sequence[PivotPoint], bars: Any = None) -> AnalysisResult:
    """Best 5-wave impulse over 9-pivot windows (needs at least 9 pivots)."""
    if len(pivots) < IMPULSE_WINDOW:
        return AnalysisResult.empty(NO_IMPULSE)

    i, score = _best_window(pivots, IMPULSE_WINDOW, is_impulse_window, score_impulse)
    if i is None:
        return AnalysisResult.empty(NO_IMPULSE)

    window = pivots[i:i + IMPULSE_WINDOW]
    offset = (len(pivots) - 1) - i
    position = _IMPULSE_POSITIONS.get(offset, DEVELOPING)

    predictions = project_wave5_target(window, score) if offset == 6 else None
    log.debug("impulse best", extra={"offset": i, "score": score, "position": position})
    return AnalysisResult(
        pattern_name=f"Impulse - {position}",
        confidence=score,
        kind=PatternKind.IMPULSE,
        wave_labels=_labels(window, IMPULSE_LABELS),
        predictions=predictions,
    )


def identify_corrective_pattern(pivots: Sequence[PivotPoint], bars: Any = None) -> AnalysisResult:
    """Best A-B-C correction over 5-pivot windows (needs at least 5 pivots)."""
    if len(pivots) < CORRECTIVE_WINDOW:
        return AnalysisResult.empty(NO_CORRECTIVE)

    i, score = _best_window(pivots, CORRECTIVE_WINDOW, is_corrective_window, score_corrective)
    if i is None:
        return AnalysisResult.empty(NO_CORRECTIVE)

    window = pivots[i:i + CORRECTIVE_WINDOW]
    offset = (len(pivots) - 1) - i
    position = _CORRECTIVE_POSITIONS.get(offset, DEVELOPING)

    predictions = project_wave_c_target(window, score) if offset == 2 else None
    log.debug("corrective best", extra={"offset": i, "score": score, "position": position})
    return AnalysisResult(
        pattern_name=f"Corrective ABC - {position}",
        confidence=score,
        kind=PatternKind.CORRECTIVE,
        wave_labels=_labels(window, CORRECTIVE_LABELS),
        predictions=predictions,
    )


def select_pattern(impulse: AnalysisResult, corrective: AnalysisResult) -> AnalysisResult:
    """Impulse only when strictly more confident; ties go to the correction."""
    if impulse.confidence > corrective.confidence:
        return impulse
    return corrective


def analyze_waves(bars: Sequence[Any], cfg: AnalyzerConfig = AnalyzerConfig()) -> AnalysisResult:
    """Run the full analysis on an ordered bar sequence."""
    n = len(bars) if bars is not None else 0
    if n < cfg.min_bars:
        log.debug("analyzer early exit", extra={"reason": "bars<min", "bars": n})
        return AnalysisResult.empty(INSUFFICIENT_DATA)

    pivots = find_pivot_points(bars, lookback=cfg.lookback)
    if len(pivots) < cfg.min_pivots:
        log.debug("analyzer early exit", extra={"reason": "pivots<min", "pivots": len(pivots)})
        return AnalysisResult.empty(INSUFFICIENT_PIVOTS, pivots)

    best = select_pattern(
        identify_impulse_pattern(pivots, bars),
        identify_corrective_pattern(pivots, bars),
    )
    log.debug("analyzer done", extra={"pattern": best.pattern_name, "confidence": best.confidence})
    return best.with_pivots(pivots)


@dataclass(frozen=True)
class WaveAnalyzer:
    cfg: AnalyzerConfig = AnalyzerConfig()

    def analyze(self, bars: Sequence[Any]) -> AnalysisResult:
        return analyze_waves(bars, self.cfg)

    def find_pivot_points(self, bars: Sequence[Any]) -> List[PivotPoint]:
        return find_pivot_points(bars, lookback=self.cfg.lookback)

    @staticmethod
    def calculate_fibonacci_levels(start_px: float, end_px: float) -> FibonacciLevels:
        return calculate_fibonacci_levels(start_px, end_px)
