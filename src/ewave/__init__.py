"""Elliott Wave pivot and pattern analysis."""

from ewave.ew.core.fibonacci import calculate_fibonacci_levels  # noqa: F401
from ewave.ew.detectors.analyzer import WaveAnalyzer, analyze_waves  # noqa: F401
from ewave.swing.pivots import find_pivot_points  # noqa: F401

__version__ = "0.1.0"
