from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import List

from ewave.data.bars import BarSeries
from ewave.exchange.types import Instrument, TickerStats


class MarketDataError(RuntimeError):
    """Any failure while retrieving market data (network, HTTP status, payload)."""


@dataclass(frozen=True)
class OHLCVRequest:
    instrument: Instrument
    timeframe: str = "1d"
    limit: int = 100


class MarketDataConnector(ABC):
    """Minimal interface for market data connectors (REST-first)."""

    @abstractmethod
    def fetch_ohlcv(self, req: OHLCVRequest) -> BarSeries:
        raise NotImplementedError

    @abstractmethod
    def fetch_symbols(self) -> List[str]:
        raise NotImplementedError

    @abstractmethod
    def fetch_top_symbols(self, limit: int = 20) -> List[TickerStats]:
        raise NotImplementedError

    @abstractmethod
    def fetch_current_price(self, symbol: str) -> float:
        raise NotImplementedError
