from __future__ import annotations

import datetime
from typing import List, Optional

from ewave.ew.core.model import AnalysisResult
from ewave.exchange.stats import MarketSummary

# below this the chart panel shows no pattern overlay
DISPLAY_MIN_CONFIDENCE = 30
NO_CLEAR_PATTERN = "No clear Elliott Wave pattern detected"


def format_price(price: float) -> str:
    if price < 0.1:
        return f"${price:.6f}"
    if price < 100:
        return f"${price:.4f}"
    return f"${price:.2f}"


def _fmt_ts(ts: int) -> str:
    return datetime.datetime.fromtimestamp(ts / 1000.0, tz=datetime.timezone.utc).strftime("%Y-%m-%d %H:%M")


def _compact_lines(result: AnalysisResult, symbol: str, timeframe: str) -> List[str]:
    parts = [
        f"symbol={symbol} tf={timeframe}",
        f"pattern={result.pattern_name!r}",
        f"confidence={result.confidence}",
        f"pivots={len(result.pivot_points)}",
    ]
    if result.wave_labels:
        parts.append("waves=" + ",".join(f"{w.label}@{w.index}" for w in result.wave_labels))
    if result.predictions is not None:
        p = result.predictions
        parts.append(f"target={format_price(p.target)} target_conf={p.confidence:.0f}")
    return [" ".join(parts)]


def _pretty_lines(result: AnalysisResult, symbol: str, timeframe: str, show_fib: bool) -> List[str]:
    lines: List[str] = []
    lines.append(f"Elliott Wave analysis: {symbol} ({timeframe})")
    if result.pivot_points:
        first, last = result.pivot_points[0], result.pivot_points[-1]
        lines.append(f"pivots: {len(result.pivot_points)} [{_fmt_ts(first.ts)}..{_fmt_ts(last.ts)}]")
    lines.append("")

    if result.confidence <= DISPLAY_MIN_CONFIDENCE:
        lines.append(NO_CLEAR_PATTERN)
        lines.append(f"({result.pattern_name}, confidence {result.confidence}%)")
        return lines

    lines.append(f"Pattern: {result.pattern_name}")
    lines.append(f"Confidence: {result.confidence}%")
    lines.append("")
    lines.append("Waves:")
    for w in result.wave_labels:
        lines.append(f"  {w.label:>5}  bar {w.index:>4}  {format_price(w.price)}")

    fib = result.fibonacci_levels() if show_fib else None
    if fib is not None:
        lines.append("")
        lines.append("Fibonacci levels:")
        for name, px in fib.retracements():
            lines.append(f"  {name:>6}  {format_price(px)}")

    if result.predictions is not None:
        lines.append("")
        lines.append(
            f"Prediction: target {format_price(result.predictions.target)} "
            f"(confidence {round(result.predictions.confidence)}%)"
        )
    return lines


def render_analysis(
    result: AnalysisResult,
    symbol: str = "",
    timeframe: str = "",
    *,
    fmt: str = "compact",
    show_fib: bool = True,
) -> str:
    """Render an analysis result as text.

    fmt:
      - compact: one line (default)
      - pretty : multi-line panel with waves, Fibonacci guides and prediction
    """
    fmt = (fmt or "compact").strip().lower()
    if fmt == "pretty":
        lines = _pretty_lines(result, symbol, timeframe, show_fib=show_fib)
    else:
        lines = _compact_lines(result, symbol, timeframe)
    return "\n".join(lines)


def render_top_symbols(stats: list, limit: Optional[int] = None, title: str = "") -> str:
    rows = stats[:limit] if limit else stats
    lines = [title] if title else []
    lines.append(f"{'symbol':<14}{'last':>16}{'24h %':>9}{'quote vol':>18}")
    for t in rows:
        lines.append(f"{t.symbol:<14}{format_price(t.last_price):>16}{t.price_change_pct:>8.2f}%{t.quote_volume:>18,.0f}")
    return "\n".join(lines)


def render_market_summary(summary: MarketSummary) -> str:
    return (
        f"24h quote volume {summary.total_quote_volume:,.0f} | "
        f"BTC dominance {summary.btc_dominance:.2f}% | "
        f"ETH dominance {summary.eth_dominance:.2f}%"
    )
