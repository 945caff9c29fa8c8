import http.client
import json
import logging

import pytest

from ewave import cli
from ewave.exchange.base import MarketDataError
from ewave.exchange.binance import connector as connector_mod
from ewave.exchange.types import MarketType, TickerStats

from _bars import IMPULSE_PRICES, spaced


@pytest.fixture(autouse=True)
def _restore_root_logging():
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)


def test_analyze_csv_json(tmp_path, capsys):
    bars = spaced(IMPULSE_PRICES, first=108, last=150)
    path = tmp_path / "sample.csv"
    bars.to_df().to_csv(path, index=False)

    assert cli.main(["analyze", "--csv", str(path), "--json"]) == 0
    out = json.loads(capsys.readouterr().out)
    assert out["pattern_name"] == "Impulse - Completed 5-wave sequence"
    assert out["confidence"] == 100
    assert out["kind"] == "impulse"
    assert len(out["wave_labels"]) == 6


def test_analyze_csv_pretty(tmp_path, capsys):
    path = tmp_path / "abc.csv"
    spaced([150, 100, 130, 80, 120], first=120, last=100).to_df().to_csv(path, index=False)
    assert cli.main(["analyze", "--csv", str(path), "--timeframe", "1h"]) == 0
    out = capsys.readouterr().out
    assert "Elliott Wave analysis: abc (1h)" in out
    assert "Corrective ABC - Completed ABC sequence" in out


def test_market_data_error_exit_code(monkeypatch, capsys):
    def boom(self, symbol, interval="1d", limit=100):
        raise MarketDataError("Binance HTTP 503")

    monkeypatch.setattr(cli.BinanceConnector, "fetch_klines", boom)
    assert cli.main(["analyze", "--symbol", "BTCUSDT"]) == cli.EXIT_MARKET_DATA
    assert "Binance HTTP 503" in capsys.readouterr().err


def test_market_option_after_subcommand(monkeypatch, capsys):
    seen = []

    def fake_klines(self, symbol, interval="1d", limit=100):
        seen.append((self.cfg.market, symbol, interval))
        return spaced(IMPULSE_PRICES, first=108, last=150)

    monkeypatch.setattr(cli.BinanceConnector, "fetch_klines", fake_klines)
    assert cli.main(["analyze", "--symbol", "ETHUSDT", "--market", "futures", "--json"]) == 0
    assert seen == [(MarketType.futures, "ETHUSDT", "1d")]
    assert json.loads(capsys.readouterr().out)["kind"] == "impulse"


def test_unknown_market_exits_with_input_code(capsys):
    assert cli.main(["price", "BTCUSDT", "--market", "margin"]) == cli.EXIT_INPUT
    assert "margin" in capsys.readouterr().err


def test_connection_drop_exits_with_market_data_code(monkeypatch, capsys):
    def fake(req, timeout=None):
        raise http.client.RemoteDisconnected("Remote end closed connection without response")

    monkeypatch.setenv("EWAVE_BINANCE__RETRY", "0")
    monkeypatch.setattr(connector_mod, "urlopen", fake)
    assert cli.main(["price", "BTCUSDT"]) == cli.EXIT_MARKET_DATA
    assert "connection error" in capsys.readouterr().err


def test_missing_csv_exits_with_input_code(tmp_path, capsys):
    assert cli.main(["analyze", "--csv", str(tmp_path / "absent.csv")]) == cli.EXIT_INPUT
    assert "error:" in capsys.readouterr().err


def test_unordered_csv_exits_with_input_code(tmp_path, capsys):
    path = tmp_path / "bad.csv"
    path.write_text("ts,open,high,low,close\n2000,1,2,0.5,1\n1000,1,2,0.5,1\n", encoding="utf-8")
    assert cli.main(["analyze", "--csv", str(path)]) == cli.EXIT_INPUT
    assert "error:" in capsys.readouterr().err


def test_symbols_losers_with_summary(monkeypatch, capsys):
    stats = [
        TickerStats("BTCUSDT", 60000.0, 1.5, 0, 0, 0, 600.0),
        TickerStats("ETHUSDT", 3000.0, -4.0, 0, 0, 0, 300.0),
        TickerStats("SOLUSDT", 150.0, -9.0, 0, 0, 0, 100.0),
    ]
    monkeypatch.setattr(cli.BinanceConnector, "fetch_ticker_stats", lambda self: stats)
    assert cli.main(["symbols", "--losers", "--top", "2"]) == 0
    out = capsys.readouterr().out.splitlines()
    assert out[0] == "24h quote volume 1,000 | BTC dominance 60.00% | ETH dominance 30.00%"
    assert out[1] == "Top losers (24h)"
    assert [line.split()[0] for line in out[3:]] == ["SOLUSDT", "ETHUSDT"]


def test_csv_without_timestamps_exits_with_input_code(tmp_path, capsys):
    path = tmp_path / "nots.csv"
    path.write_text("open,high,low,close\n1,2,0.5,1\n", encoding="utf-8")
    assert cli.main(["analyze", "--csv", str(path)]) == cli.EXIT_INPUT
    assert "'ts'/'time'" in capsys.readouterr().err
