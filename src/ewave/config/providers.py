"""Config providers.

Layered config (defaults < file < env) built from small providers so the CLI
and library callers compose the same sources.

Design:
  - Provider returns a dict-like config payload.
  - ConfigManager composes multiple providers with precedence order.
"""

from __future__ import annotations

import json
import os
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Protocol, runtime_checkable


@runtime_checkable
class ConfigProvider(Protocol):
    name: str

    def load(self) -> Dict[str, Any]:
        """Return the provider config as a plain dict."""
        ...


def _deep_merge(a: Dict[str, Any], b: Mapping[str, Any]) -> Dict[str, Any]:
    """Merge mapping b into dict a (recursive for dict values)."""
    for k, v in b.items():
        if isinstance(v, Mapping) and isinstance(a.get(k), Mapping):
            a[k] = _deep_merge(dict(a[k]), v)
        else:
            a[k] = v
    return a


def _set_nested(d: Dict[str, Any], keys: List[str], value: Any) -> None:
    cur = d
    for k in keys[:-1]:
        if k not in cur or not isinstance(cur[k], dict):
            cur[k] = {}
        cur = cur[k]
    cur[keys[-1]] = value


def _coerce_value(s: str) -> Any:
    sl = s.strip().lower()
    if sl in {"true", "yes", "y", "on"}:
        return True
    if sl in {"false", "no", "n", "off"}:
        return False
    try:
        if "." in sl:
            return float(sl)
        return int(sl)
    except ValueError:
        pass
    if (sl.startswith("{") and sl.endswith("}")) or (sl.startswith("[") and sl.endswith("]")):
        try:
            return json.loads(s)
        except ValueError:
            return s
    return s.strip()


@dataclass
class DictProvider:
    name: str = "dict"
    data: Dict[str, Any] = field(default_factory=dict)

    def load(self) -> Dict[str, Any]:
        return json.loads(json.dumps(self.data)) if self.data else {}


@dataclass
class EnvProvider:
    """Reads EWAVE_* variables and builds nested dict via '__' separator.

    Example:
      EWAVE_BINANCE__TIMEOUT_S=5
    becomes:
      {"binance": {"timeout_s": 5}}

    The prefix is stripped and keys are lowercased.
    """

    name: str = "env"
    prefix: str = "EWAVE_"
    sep: str = "__"

    def load(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {}
        for k, v in os.environ.items():
            if not k.startswith(self.prefix):
                continue
            key = k[len(self.prefix):]
            parts = [p.strip().lower() for p in key.split(self.sep) if p.strip()]
            if not parts:
                continue
            _set_nested(out, parts, _coerce_value(v))
        return out


@dataclass
class FileProvider:
    """Reads a JSON or TOML config file."""

    name: str = "file"
    path: str = ""
    optional: bool = True

    def load(self) -> Dict[str, Any]:
        if not self.path:
            return {}
        if not os.path.exists(self.path):
            if self.optional:
                return {}
            raise FileNotFoundError(self.path)

        with open(self.path, "rb") as f:
            raw = f.read()

        p = self.path.lower()
        if p.endswith(".toml"):
            import tomllib

            return tomllib.loads(raw.decode("utf-8"))
        try:
            return json.loads(raw.decode("utf-8"))
        except ValueError as e:
            raise RuntimeError(f"Unsupported config format: {self.path} (use .toml or .json)") from e


@dataclass
class ConfigManager:
    """Compose providers in precedence order (later overrides earlier)."""

    providers: List[ConfigProvider]

    def load(self) -> Dict[str, Any]:
        merged: Dict[str, Any] = {}
        for p in self.providers:
            payload = p.load()
            if payload:
                _deep_merge(merged, payload)
        return merged
