from __future__ import annotations

from typing import Any, Dict, Mapping, Optional

from .providers import ConfigManager, DictProvider, EnvProvider, FileProvider

DEFAULTS: Dict[str, Any] = {
    "binance": {
        "market": "spot",
        "timeout_s": 10.0,
        "retry": 3,
        "retry_sleep_s": 0.35,
        "use_cache": False,
        "cache_dir": ".cache/ewave/binance",
        "cache_ttl_s": 60,
    },
    "analysis": {
        "symbol": "BTCUSDT",
        "timeframe": "1d",
        "limit": 100,
    },
    "log": {
        "level": "info",
        "json": False,
        "file": "",
    },
}

TIMEFRAMES = ("1d", "4h", "1h", "15m")


def load_config(
    defaults: Optional[Dict[str, Any]] = None,
    file_path: Optional[str] = None,
    *,
    use_env: bool = True,
    env_prefix: str = "EWAVE_",
) -> Dict[str, Any]:
    """Load layered config: defaults < file < env."""
    providers = [DictProvider(data=dict(DEFAULTS if defaults is None else defaults))]
    if file_path:
        providers.append(FileProvider(path=file_path, optional=False))
    if use_env:
        providers.append(EnvProvider(prefix=env_prefix))
    return ConfigManager(providers).load()


def get_path(cfg: Mapping[str, Any], key: str, default: Any = None) -> Any:
    """Read a dotted key, e.g. ``get_path(cfg, "binance.timeout_s")``."""
    cur: Any = cfg
    for part in key.split("."):
        if not isinstance(cur, Mapping) or part not in cur:
            return default
        cur = cur[part]
    return cur
