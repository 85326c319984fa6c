from __future__ import annotations

import copy
import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping

import yaml

from lattice.model import SILENCE_TOKEN


class ConfigError(RuntimeError):
    pass


DEFAULTS: dict[str, Any] = {
    "run_name": "run",
    "lattice": {"silence_token": SILENCE_TOKEN, "multiword_sep": "_"},
    "decoding": {"lm_scales": [1.0]},
    "eval": {"manifest": None, "count_paths": True, "max_items": None},
    "output": {"dir": "artifacts", "write_dot": False, "write_lattice": False},
}


def load_yaml(path: str | Path) -> dict[str, Any]:
    p = Path(path)
    if not p.exists():
        raise FileNotFoundError(str(p))
    with p.open("r", encoding="utf-8") as f:
        data = yaml.safe_load(f)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"Top-level YAML must be a mapping; got {type(data)}")
    return data


def deep_update(base: dict[str, Any], patch: Mapping[str, Any]) -> dict[str, Any]:
    """Recursively update nested dicts."""
    out = copy.deepcopy(base)
    for k, v in patch.items():
        if isinstance(v, Mapping) and isinstance(out.get(k), dict):
            out[k] = deep_update(out[k], v)
        else:
            out[k] = copy.deepcopy(v)
    return out


@dataclass(frozen=True)
class LatticeConfig:
    """Nested config mapping merged over ``DEFAULTS``."""

    raw: dict[str, Any]
    path: Path | None

    def get(self, key: str, default: Any = None) -> Any:
        return self.raw.get(key, default)

    def require(self, key: str) -> Any:
        if key not in self.raw:
            raise ConfigError(f"Missing required config key: {key}")
        return self.raw[key]

    @property
    def lm_scales(self) -> list[float]:
        return [float(x) for x in self.raw["decoding"]["lm_scales"]]

    @property
    def silence_token(self) -> str:
        return str(self.raw["lattice"]["silence_token"])

    @property
    def multiword_sep(self) -> str:
        return str(self.raw["lattice"]["multiword_sep"])

    def dump(self) -> str:
        return json.dumps(
            {"config_path": str(self.path) if self.path else None, "config": self.raw},
            indent=2,
            sort_keys=True,
            ensure_ascii=True,
        )


def validate(raw: dict[str, Any]) -> None:
    for section in ("lattice", "decoding", "eval", "output"):
        if not isinstance(raw.get(section), dict):
            raise ConfigError(f"Config must define '{section}' mapping")

    scales = raw["decoding"].get("lm_scales")
    if not isinstance(scales, list) or not scales:
        raise ConfigError("decoding.lm_scales must be a non-empty list")
    for s in scales:
        if isinstance(s, bool) or not isinstance(s, (int, float)):
            raise ConfigError(f"decoding.lm_scales entries must be numbers; got {s!r}")

    if not raw["lattice"].get("silence_token"):
        raise ConfigError("lattice.silence_token must be a non-empty string")
    if not raw["lattice"].get("multiword_sep"):
        raise ConfigError("lattice.multiword_sep must be a non-empty string")

    max_items = raw["eval"].get("max_items")
    if max_items is not None and (not isinstance(max_items, int) or max_items < 1):
        raise ConfigError(f"eval.max_items must be a positive integer or null; got {max_items!r}")


def make_config(overrides: Mapping[str, Any] | None = None, *, path: Path | None = None) -> LatticeConfig:
    raw = deep_update(DEFAULTS, overrides or {})
    validate(raw)
    return LatticeConfig(raw=raw, path=path)


def load_config(path: str | Path) -> LatticeConfig:
    p = Path(path)
    return make_config(load_yaml(p), path=p)
