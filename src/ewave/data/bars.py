"""Minimal OHLCV bar models (stable surface).

The analysis core only needs an ordered sequence of objects exposing
``ts``/``high``/``low``; BarSeries adds:
- bars: list[Bar]
- df: pandas DataFrame (DatetimeIndex UTC)
- start_time / end_time properties
- from_bars / from_df / from_klines constructors
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterator, List, Optional, Sequence, Union, overload

import pandas as pd


@dataclass(frozen=True)
class Bar:
    ts: int  # milliseconds since epoch (UTC)
    open: float
    high: float
    low: float
    close: float
    volume: float = 0.0


class BarSeries:
    def __init__(self, bars: List[Bar]):
        self.bars: List[Bar] = list(bars)
        self._df: Optional[pd.DataFrame] = None

    @staticmethod
    def from_bars(bars: Sequence[Bar]) -> "BarSeries":
        return BarSeries(list(bars))

    @staticmethod
    def from_klines(rows: Sequence[Sequence[Any]]) -> "BarSeries":
        """Build from Binance kline arrays: [open_time, open, high, low, close, volume, ...]."""
        bars = [
            Bar(
                ts=int(k[0]),
                open=float(k[1]),
                high=float(k[2]),
                low=float(k[3]),
                close=float(k[4]),
                volume=float(k[5]),
            )
            for k in rows
        ]
        return BarSeries(bars)

    @staticmethod
    def from_df(df: pd.DataFrame) -> "BarSeries":
        """Build from a DataFrame with open/high/low/close[/volume].

        Timestamps come from a ``ts`` (epoch ms) or ``time`` column, or from a
        DatetimeIndex.
        """
        missing = {"open", "high", "low", "close"} - set(df.columns)
        if missing:
            raise ValueError(f"DataFrame missing columns: {sorted(missing)}")

        if "ts" in df.columns:
            ts = [int(x) for x in df["ts"].tolist()]
        elif "time" in df.columns:
            ts = [int(x) for x in df["time"].tolist()]
        elif isinstance(df.index, pd.DatetimeIndex):
            idx = df.index if df.index.tz is not None else df.index.tz_localize("UTC")
            ts = [int(t.value // 1_000_000) for t in idx]
        else:
            raise TypeError("DataFrame needs a 'ts'/'time' column or a DatetimeIndex")

        vol = df["volume"].tolist() if "volume" in df.columns else [0.0] * len(df)
        bars = [
            Bar(ts=t, open=float(o), high=float(h), low=float(lo), close=float(c), volume=float(v))
            for t, o, h, lo, c, v in zip(
                ts, df["open"].tolist(), df["high"].tolist(), df["low"].tolist(), df["close"].tolist(), vol
            )
        ]
        return BarSeries(bars)

    def validate(self) -> None:
        for prev, cur in zip(self.bars, self.bars[1:]):
            if cur.ts <= prev.ts:
                raise ValueError(f"bars must be strictly increasing by ts (got {prev.ts} then {cur.ts})")

    def __len__(self) -> int:
        return len(self.bars)

    def __iter__(self) -> Iterator[Bar]:
        return iter(self.bars)

    @overload
    def __getitem__(self, i: int) -> Bar: ...

    @overload
    def __getitem__(self, i: slice) -> List[Bar]: ...

    def __getitem__(self, i: Union[int, slice]) -> Union[Bar, List[Bar]]:
        return self.bars[i]

    @property
    def df(self) -> pd.DataFrame:
        if self._df is None:
            idx = pd.to_datetime([int(b.ts) for b in self.bars], unit="ms", utc=True)
            self._df = pd.DataFrame(
                {
                    "ts": [int(b.ts) for b in self.bars],
                    "open": [float(b.open) for b in self.bars],
                    "high": [float(b.high) for b in self.bars],
                    "low": [float(b.low) for b in self.bars],
                    "close": [float(b.close) for b in self.bars],
                    "volume": [float(b.volume) for b in self.bars],
                },
                index=idx,
            )
        return self._df

    def to_df(self) -> pd.DataFrame:
        return self.df.copy()

    @property
    def start_time(self):
        if not self.bars:
            return None
        return pd.to_datetime(int(self.bars[0].ts), unit="ms", utc=True)

    @property
    def end_time(self):
        if not self.bars:
            return None
        return pd.to_datetime(int(self.bars[-1].ts), unit="ms", utc=True)
