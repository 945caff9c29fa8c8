from ewave.ew.core.model import AnalysisResult, PatternKind, PredictionTarget, WaveLabel
from ewave.reporting.render import NO_CLEAR_PATTERN, format_price, render_analysis


def _result(confidence, predictions=None):
    labels = (WaveLabel(10, 150.0, "Start"), WaveLabel(20, 100.0, "A"), WaveLabel(30, 130.0, "B"), WaveLabel(40, 80.0, "C"))
    return AnalysisResult(
        pattern_name="Corrective ABC - Completed ABC sequence",
        confidence=confidence,
        kind=PatternKind.CORRECTIVE,
        wave_labels=labels,
        predictions=predictions,
    )


def test_format_price_thresholds():
    assert format_price(0.01234567) == "$0.012346"
    assert format_price(1.5) == "$1.5000"
    assert format_price(64000.123) == "$64000.12"


def test_pretty_report_sections():
    text = render_analysis(_result(90, PredictionTarget(target=210.9, confidence=72.0)), "BTCUSDT", "1d", fmt="pretty")
    assert "Pattern: Corrective ABC - Completed ABC sequence" in text
    assert "Confidence: 90%" in text
    assert "Fibonacci levels:" in text
    assert "61.8%" in text
    assert "Prediction: target $210.90 (confidence 72%)" in text


def test_pretty_report_hides_low_confidence():
    text = render_analysis(_result(25), "BTCUSDT", "1d", fmt="pretty")
    assert NO_CLEAR_PATTERN in text
    assert "Fibonacci" not in text


def test_compact_is_one_line():
    text = render_analysis(_result(90), "ETHUSDT", "4h")
    assert "\n" not in text
    assert "confidence=90" in text
    assert "waves=Start@10,A@20,B@30,C@40" in text
