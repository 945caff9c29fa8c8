from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict


class MarketType(str, Enum):
    spot = "spot"
    futures = "futures"


@dataclass(frozen=True)
class Instrument:
    """A normalized instrument identifier."""
    symbol: str
    venue: str = "binance"
    market: MarketType = MarketType.spot


@dataclass(frozen=True)
class TickerStats:
    """24h rolling ticker statistics for one symbol."""
    symbol: str
    last_price: float
    price_change_pct: float
    high: float
    low: float
    volume: float
    quote_volume: float

    @staticmethod
    def from_binance(row: Dict[str, Any]) -> "TickerStats":
        return TickerStats(
            symbol=str(row["symbol"]),
            last_price=float(row.get("lastPrice", 0.0)),
            price_change_pct=float(row.get("priceChangePercent", 0.0)),
            high=float(row.get("highPrice", 0.0)),
            low=float(row.get("lowPrice", 0.0)),
            volume=float(row.get("volume", 0.0)),
            quote_volume=float(row.get("quoteVolume", 0.0)),
        )
