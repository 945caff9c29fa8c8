"""Market overview derived from 24h ticker statistics.

- rank_tickers: top by quote volume, top gainers, top losers
- summarize_market: total quote volume and BTC / ETH volume dominance
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Sequence

from ewave.exchange.types import TickerStats

RANKINGS = ("volume", "gainers", "losers")


@dataclass(frozen=True)
class MarketSummary:
    total_quote_volume: float
    btc_dominance: float  # % of total quote volume
    eth_dominance: float
    btc_price: float = 0.0
    eth_price: float = 0.0


def rank_tickers(stats: Sequence[TickerStats], by: str = "volume", limit: Optional[int] = None) -> List[TickerStats]:
    by = (by or "volume").strip().lower()
    if by == "volume":
        out = sorted(stats, key=lambda t: t.quote_volume, reverse=True)
    elif by == "gainers":
        out = sorted(stats, key=lambda t: t.price_change_pct, reverse=True)
    elif by == "losers":
        out = sorted(stats, key=lambda t: t.price_change_pct)
    else:
        raise ValueError(f"unknown ranking {by!r}; expected one of {', '.join(RANKINGS)}")
    if limit is None:
        return out
    return out[: max(0, int(limit))]


def summarize_market(stats: Sequence[TickerStats]) -> MarketSummary:
    total = sum(t.quote_volume for t in stats)
    by_symbol = {t.symbol: t for t in stats}
    btc = by_symbol.get("BTCUSDT")
    eth = by_symbol.get("ETHUSDT")

    def share(t: Optional[TickerStats]) -> float:
        if t is None or total <= 0:
            return 0.0
        return t.quote_volume / total * 100.0

    return MarketSummary(
        total_quote_volume=total,
        btc_dominance=share(btc),
        eth_dominance=share(eth),
        btc_price=btc.last_price if btc else 0.0,
        eth_price=eth.last_price if eth else 0.0,
    )
