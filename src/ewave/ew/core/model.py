"""Canonical EW result models.

Every analysis run builds one AnalysisResult and hands it to the caller; none
of these types are mutated after construction.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Dict, Optional, Sequence, Tuple

from ewave.ew.core.fibonacci import FibonacciLevels, levels_from_wave_labels
from ewave.swing.pivots import PivotPoint


class PatternKind(str, Enum):
    IMPULSE = "impulse"
    CORRECTIVE = "corrective"
    NONE = "none"


IMPULSE_LABELS = ("0", "1", "2", "3", "4", "5")
CORRECTIVE_LABELS = ("Start", "A", "B", "C")


@dataclass(frozen=True)
class WaveLabel:
    """A labelled wave point anchored at a bar index."""
    index: int
    price: float
    label: str

    def to_dict(self) -> Dict[str, Any]:
        return {"index": self.index, "price": self.price, "label": self.label}


@dataclass(frozen=True)
class PredictionTarget:
    target: float
    confidence: float  # 0..100

    def to_dict(self) -> Dict[str, Any]:
        return {"target": self.target, "confidence": self.confidence}


@dataclass(frozen=True)
class AnalysisResult:
    pattern_name: str
    confidence: int = 0
    kind: PatternKind = PatternKind.NONE
    pivot_points: Tuple[PivotPoint, ...] = field(default_factory=tuple)
    wave_labels: Tuple[WaveLabel, ...] = field(default_factory=tuple)
    predictions: Optional[PredictionTarget] = None

    @staticmethod
    def empty(pattern_name: str, pivot_points: Sequence[PivotPoint] = ()) -> "AnalysisResult":
        """Zero-confidence outcome (insufficient data, no match)."""
        return AnalysisResult(pattern_name=pattern_name, pivot_points=tuple(pivot_points))

    def with_pivots(self, pivot_points: Sequence[PivotPoint]) -> "AnalysisResult":
        return replace(self, pivot_points=tuple(pivot_points))

    def fibonacci_levels(self) -> Optional[FibonacciLevels]:
        """Guide levels between the last two wave labels, recomputed on every call."""
        return levels_from_wave_labels(self.wave_labels)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "pattern_name": self.pattern_name,
            "confidence": self.confidence,
            "kind": self.kind.value,
            "pivot_points": [p.to_dict() for p in self.pivot_points],
            "wave_labels": [w.to_dict() for w in self.wave_labels],
            "predictions": self.predictions.to_dict() if self.predictions is not None else None,
        }
