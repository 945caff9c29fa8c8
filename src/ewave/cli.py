"""ewave CLI.

- analyze: load bars (Binance klines or a CSV file), run the wave analyzer,
  print a compact/pretty report or JSON.
- symbols: market summary and top USDT pairs by 24h quote volume, gainers or
  losers (or the full tradable list).
- price: last traded price for one symbol.

Market-data failures exit with status 2; unreadable or invalid input with 1.
"""

from __future__ import annotations

import argparse
import json
import os
import sys
from typing import Any, Dict, Optional, Sequence

import pandas as pd

from ewave.config import TIMEFRAMES, get_path, load_config
from ewave.data.bars import BarSeries
from ewave.ew.detectors.analyzer import WaveAnalyzer
from ewave.exchange.base import MarketDataError
from ewave.exchange.binance.connector import BinanceConfig, BinanceConnector
from ewave.exchange.stats import rank_tickers, summarize_market
from ewave.logging import LogConfig, get_logger, setup_logging
from ewave.reporting.render import format_price, render_analysis, render_market_summary, render_top_symbols

log = get_logger("ewave.cli")

EXIT_INPUT = 1
EXIT_MARKET_DATA = 2

_RANK_TITLES = {
    "volume": "Top by 24h quote volume",
    "gainers": "Top gainers (24h)",
    "losers": "Top losers (24h)",
}


def _connector(cfg: Dict[str, Any], market: Optional[str]) -> BinanceConnector:
    section = dict(get_path(cfg, "binance", {}) or {})
    if market:
        section["market"] = market
    return BinanceConnector(BinanceConfig.from_mapping(section))


def _load_csv(path: str) -> BarSeries:
    df = pd.read_csv(path)
    df.columns = [str(c).strip().lower() for c in df.columns]
    bars = BarSeries.from_df(df)
    bars.validate()
    return bars


def _cmd_analyze(args: argparse.Namespace, cfg: Dict[str, Any]) -> int:
    symbol = args.symbol or str(get_path(cfg, "analysis.symbol", "BTCUSDT"))
    timeframe = args.timeframe or str(get_path(cfg, "analysis.timeframe", "1d"))
    limit = int(args.limit or get_path(cfg, "analysis.limit", 100))
    if timeframe not in TIMEFRAMES:
        log.warning("timeframe %s is not one of %s; passing it through", timeframe, ",".join(TIMEFRAMES))

    if args.csv:
        bars = _load_csv(args.csv)
        symbol = args.symbol or os.path.splitext(os.path.basename(args.csv))[0]
    else:
        bars = _connector(cfg, args.market).fetch_klines(symbol, interval=timeframe, limit=limit)

    result = WaveAnalyzer().analyze(bars)
    log.info("analysis done", extra={"symbol": symbol, "bars": len(bars), "pattern": result.pattern_name})

    if args.json:
        print(json.dumps(result.to_dict(), ensure_ascii=False, indent=2))
    else:
        print(render_analysis(result, symbol, timeframe, fmt=args.format, show_fib=not args.no_fib))
    return 0


def _cmd_symbols(args: argparse.Namespace, cfg: Dict[str, Any]) -> int:
    conn = _connector(cfg, args.market)
    if args.all:
        for s in conn.fetch_symbols():
            print(s)
        return 0

    stats = conn.fetch_ticker_stats()
    by = "gainers" if args.gainers else "losers" if args.losers else "volume"
    print(render_market_summary(summarize_market(stats)))
    print(render_top_symbols(rank_tickers(stats, by=by, limit=int(args.top)), title=_RANK_TITLES[by]))
    return 0


def _cmd_price(args: argparse.Namespace, cfg: Dict[str, Any]) -> int:
    px = _connector(cfg, args.market).fetch_current_price(args.symbol)
    print(f"{args.symbol} {format_price(px)}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="ewave")
    p.add_argument("--config", default=os.environ.get("EWAVE_CONFIG", ""))
    p.add_argument("--log_level", default=os.environ.get("EWAVE_LOG_LEVEL", ""))
    p.add_argument("--log_json", action="store_true")

    sub = p.add_subparsers(dest="command", required=True)

    a = sub.add_parser("analyze", help="Detect Elliott Wave patterns for one symbol")
    a.add_argument("--symbol", default="", help="e.g. BTCUSDT")
    a.add_argument("--timeframe", default="", help="1d|4h|1h|15m or any Binance interval")
    a.add_argument("--limit", type=int, default=0, help="number of klines (default from config: 100)")
    a.add_argument("--csv", default="", help="read bars from CSV (ts/time,open,high,low,close[,volume])")
    a.add_argument("--format", default="pretty", help="compact|pretty")
    a.add_argument("--json", action="store_true")
    a.add_argument("--no-fib", dest="no_fib", action="store_true")
    a.set_defaults(func=_cmd_analyze)

    s = sub.add_parser("symbols", help="Market summary and top USDT pairs")
    s.add_argument("--top", type=int, default=20)
    s.add_argument("--all", action="store_true", help="list every tradable USDT pair")
    rank = s.add_mutually_exclusive_group()
    rank.add_argument("--gainers", action="store_true", help="rank by 24h price change, highest first")
    rank.add_argument("--losers", action="store_true", help="rank by 24h price change, lowest first")
    s.set_defaults(func=_cmd_symbols)

    c = sub.add_parser("price", help="Current price for a symbol")
    c.add_argument("symbol")
    c.set_defaults(func=_cmd_price)

    # connector subcommands
    for sp in (a, s, c):
        sp.add_argument("--market", default="", help="spot|futures (overrides config)")

    return p


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    cfg = load_config(file_path=args.config or None)
    log_section = dict(get_path(cfg, "log", {}) or {})
    if args.log_level:
        log_section["level"] = args.log_level
    if args.log_json:
        log_section["json"] = True
    setup_logging(LogConfig.from_mapping(log_section))

    try:
        return int(args.func(args, cfg))
    except MarketDataError as e:
        log.error("market data unavailable: %s", e)
        print(f"error: {e}", file=sys.stderr)
        return EXIT_MARKET_DATA
    except (OSError, TypeError, ValueError) as e:
        log.error("invalid input: %s", e)
        print(f"error: {e}", file=sys.stderr)
        return EXIT_INPUT


if __name__ == "__main__":
    raise SystemExit(main())
