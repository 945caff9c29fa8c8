"""Fetch metadata.

Connectors expose runtime info about their last request without changing
return types.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass
class FetchMeta:
    venue: str
    market: str
    kind: str  # klines/symbols/ticker/price
    url: str = ""
    records: int = 0
    attempts: int = 0
    cached: bool = False
