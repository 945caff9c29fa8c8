"""Config module.

  - load_config(defaults, file_path) -> dict (defaults < file < env)
  - get_path(cfg, "section.key", default)
  - providers for composing other sources
"""

from __future__ import annotations

from .loader import DEFAULTS, TIMEFRAMES, get_path, load_config  # noqa: F401
from .providers import (  # noqa: F401
    ConfigManager,
    ConfigProvider,
    DictProvider,
    EnvProvider,
    FileProvider,
)

__all__ = [
    "DEFAULTS",
    "TIMEFRAMES",
    "get_path",
    "load_config",
    "ConfigProvider",
    "ConfigManager",
    "DictProvider",
    "EnvProvider",
    "FileProvider",
]
