"""Binance public market-data connector (spot + futures).

- klines -> BarSeries
- exchangeInfo -> tradable USDT symbols
- 24h ticker -> top USDT symbols by quote volume
- ticker/price -> last price
- Disk cache (deterministic replay) and retry/backoff for transient issues
  (418 / 429 / 5xx / "Internal error")

No third-party deps (requests); uses urllib. Every failure surfaces as
MarketDataError.
"""

from __future__ import annotations

import hashlib
import http.client
import json
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional
from urllib.error import HTTPError, URLError
from urllib.parse import urlencode
from urllib.request import Request, urlopen

from ewave.logging import get_logger

log = get_logger("ewave.binance")

from ewave.data.bars import BarSeries
from ewave.exchange.base import MarketDataConnector, MarketDataError, OHLCVRequest
from ewave.exchange.meta import FetchMeta
from ewave.exchange.stats import rank_tickers
from ewave.exchange.types import Instrument, MarketType, TickerStats

QUOTE_ASSET = "USDT"

_PATHS = {
    MarketType.spot: {
        "klines": "/api/v3/klines",
        "exchange_info": "/api/v3/exchangeInfo",
        "ticker_24h": "/api/v3/ticker/24hr",
        "price": "/api/v3/ticker/price",
    },
    MarketType.futures: {
        "klines": "/fapi/v1/klines",
        "exchange_info": "/fapi/v1/exchangeInfo",
        "ticker_24h": "/fapi/v1/ticker/24hr",
        "price": "/fapi/v1/ticker/price",
    },
}


@dataclass(frozen=True)
class BinanceConfig:
    market: MarketType = MarketType.spot
    timeout_s: float = 10.0
    user_agent: str = "ewave/0.1"
    retry: int = 3
    retry_sleep_s: float = 0.35

    # cache
    use_cache: bool = False
    cache_dir: str = ".cache/ewave/binance"
    cache_ttl_s: int = 60  # 0 => never expire

    @staticmethod
    def from_mapping(m: Mapping[str, Any]) -> "BinanceConfig":
        """Build from the ``binance`` section of a loaded config."""
        d = BinanceConfig()
        return BinanceConfig(
            market=MarketType(str(m.get("market", d.market.value)).lower()),
            timeout_s=float(m.get("timeout_s", d.timeout_s)),
            user_agent=str(m.get("user_agent", d.user_agent)),
            retry=int(m.get("retry", d.retry)),
            retry_sleep_s=float(m.get("retry_sleep_s", d.retry_sleep_s)),
            use_cache=bool(m.get("use_cache", d.use_cache)),
            cache_dir=str(m.get("cache_dir", d.cache_dir)),
            cache_ttl_s=int(m.get("cache_ttl_s", d.cache_ttl_s)),
        )


def _sha256(s: str) -> str:
    return hashlib.sha256(s.encode("utf-8")).hexdigest()


def _cache_path(cache_dir: str, url: str) -> Path:
    return Path(cache_dir) / f"{_sha256(url)}.json"


def _cache_fresh(p: Path, ttl_s: int) -> bool:
    if not p.exists():
        return False
    if ttl_s <= 0:
        return True
    try:
        age = time.time() - p.stat().st_mtime
    except OSError:
        return False
    return age <= float(ttl_s)


def _is_transient(code: int, body: str) -> bool:
    return code in (418, 429) or 500 <= code <= 599 or "internal error" in body.lower()


class BinanceConnector(MarketDataConnector):
    def __init__(self, cfg: BinanceConfig = BinanceConfig()):
        self.cfg = cfg
        self.last_meta: Optional[FetchMeta] = None

    def _base_url(self, market: MarketType) -> str:
        return "https://api.binance.com" if market == MarketType.spot else "https://fapi.binance.com"

    def _url(self, market: MarketType, kind: str, params: Dict[str, Any]) -> str:
        qs = urlencode({k: v for k, v in params.items() if v is not None})
        path = _PATHS[market][kind]
        base = self._base_url(market)
        return f"{base}{path}?{qs}" if qs else f"{base}{path}"

    def _read_cache(self, url: str) -> Optional[Any]:
        if not (self.cfg.use_cache and self.cfg.cache_dir):
            return None
        p = _cache_path(self.cfg.cache_dir, url)
        if not _cache_fresh(p, int(self.cfg.cache_ttl_s)):
            return None
        try:
            with p.open("r", encoding="utf-8") as f:
                return json.load(f)
        except (OSError, ValueError) as e:
            log.warning("cache read failed for %s: %s", p, e)
            return None

    def _write_cache(self, url: str, data: Any) -> None:
        if not (self.cfg.use_cache and self.cfg.cache_dir):
            return
        p = _cache_path(self.cfg.cache_dir, url)
        try:
            p.parent.mkdir(parents=True, exist_ok=True)
            tmp = p.with_suffix(p.suffix + ".tmp")
            with tmp.open("w", encoding="utf-8") as f:
                json.dump(data, f)
            tmp.replace(p)
        except OSError as e:
            log.warning("cache write failed for %s: %s", p, e)

    def _get_json(self, market: MarketType, kind: str, params: Dict[str, Any]) -> Any:
        url = self._url(market, kind, params)
        meta = FetchMeta(venue="binance", market=market.value, kind=kind, url=url)
        self.last_meta = meta

        cached = self._read_cache(url)
        if cached is not None:
            meta.cached = True
            return cached

        retries = int(self.cfg.retry)
        for attempt in range(retries + 1):
            meta.attempts = attempt + 1
            req = Request(url, headers={"User-Agent": self.cfg.user_agent})
            try:
                with urlopen(req, timeout=float(self.cfg.timeout_s)) as resp:
                    raw = resp.read().decode("utf-8")
                data = json.loads(raw)
                self._write_cache(url, data)
                return data

            except HTTPError as e:
                try:
                    body = e.read().decode("utf-8")
                except (OSError, UnicodeDecodeError):
                    body = ""
                if not _is_transient(int(e.code), body) or attempt >= retries:
                    raise MarketDataError(f"Binance HTTP {e.code} for {url}. Body: {body}") from e

            except URLError as e:
                if attempt >= retries:
                    raise MarketDataError(f"Binance URLError for {url}: {e.reason}") from e

            # raised by getresponse()/read(), outside urlopen's URLError wrapping
            except (OSError, http.client.HTTPException) as e:
                if attempt >= retries:
                    raise MarketDataError(f"Binance connection error for {url}: {e!r}") from e

            except ValueError as e:
                raise MarketDataError(f"Binance returned invalid JSON for {url}") from e

            # Backoff before retry
            sleep_s = min(float(self.cfg.retry_sleep_s) * (2 ** attempt), 3.0)
            log.debug("retrying", extra={"url": url, "attempt": attempt + 1, "sleep_s": sleep_s})
            time.sleep(sleep_s)

        raise MarketDataError(f"Binance request failed for {url}")

    # -------- klines --------
    def fetch_ohlcv(self, req: OHLCVRequest) -> BarSeries:
        params = {"symbol": req.instrument.symbol, "interval": req.timeframe, "limit": int(req.limit)}
        data = self._get_json(req.instrument.market, "klines", params)
        if not isinstance(data, list):
            raise MarketDataError(f"unexpected klines payload for {req.instrument.symbol}: {type(data).__name__}")
        try:
            bars = BarSeries.from_klines(data)
        except (IndexError, TypeError, ValueError) as e:
            raise MarketDataError(f"malformed kline row for {req.instrument.symbol}") from e
        if self.last_meta is not None:
            self.last_meta.records = len(bars)
        log.info("klines fetched", extra={"symbol": req.instrument.symbol, "interval": req.timeframe, "bars": len(bars)})
        return bars

    def fetch_klines(self, symbol: str, interval: str = "1d", limit: int = 100) -> BarSeries:
        inst = Instrument(symbol=symbol, market=self.cfg.market)
        return self.fetch_ohlcv(OHLCVRequest(instrument=inst, timeframe=interval, limit=limit))

    # -------- symbols / tickers --------
    def fetch_symbols(self) -> List[str]:
        """Tradable symbols quoted in USDT."""
        data = self._get_json(self.cfg.market, "exchange_info", {})
        try:
            rows = data["symbols"]
        except (KeyError, TypeError) as e:
            raise MarketDataError("exchangeInfo payload has no 'symbols'") from e
        out = [
            str(s["symbol"])
            for s in rows
            if str(s.get("symbol", "")).endswith(QUOTE_ASSET) and s.get("status") == "TRADING"
        ]
        if self.last_meta is not None:
            self.last_meta.records = len(out)
        return out

    def fetch_ticker_stats(self) -> List[TickerStats]:
        """24h statistics for every USDT pair, in payload order."""
        data = self._get_json(self.cfg.market, "ticker_24h", {})
        if not isinstance(data, list):
            raise MarketDataError(f"unexpected 24h ticker payload: {type(data).__name__}")
        try:
            stats = [TickerStats.from_binance(r) for r in data if str(r.get("symbol", "")).endswith(QUOTE_ASSET)]
        except (AttributeError, KeyError, TypeError, ValueError) as e:
            raise MarketDataError("malformed 24h ticker row") from e
        if self.last_meta is not None:
            self.last_meta.records = len(stats)
        return stats

    def fetch_top_symbols(self, limit: int = 20) -> List[TickerStats]:
        """USDT pairs ranked by 24h quote volume, highest first."""
        return rank_tickers(self.fetch_ticker_stats(), by="volume", limit=limit)

    def fetch_current_price(self, symbol: str) -> float:
        data = self._get_json(self.cfg.market, "price", {"symbol": symbol})
        try:
            return float(data["price"])
        except (KeyError, TypeError, ValueError) as e:
            raise MarketDataError(f"malformed price payload for {symbol}") from e
