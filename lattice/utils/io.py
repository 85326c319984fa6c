from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from lattice.config import ConfigError


def ensure_dir(path: str | Path) -> Path:
    p = Path(path)
    p.mkdir(parents=True, exist_ok=True)
    return p


def read_manifest(path: str | Path, *, limit: int | None = None) -> list[dict[str, Any]]:
    """Read a JSONL manifest of ``{"lattice": path, "text": reference}`` rows.

    Blank lines are skipped. Each row's ``lattice`` entry comes back as a
    ``Path``, relative paths resolved against the manifest's directory.
    """

    p = Path(path)
    rows: list[dict[str, Any]] = []
    with p.open("r", encoding="utf-8") as f:
        for no, line in enumerate(f, start=1):
            if limit is not None and len(rows) >= limit:
                break
            line = line.strip()
            if not line:
                continue
            try:
                obj = json.loads(line)
            except json.JSONDecodeError as e:
                raise ConfigError(f"{p}:{no}: invalid JSON ({e.msg})") from e
            if not isinstance(obj, dict):
                raise ConfigError(f"{p}:{no}: manifest row must be an object, got {type(obj).__name__}")
            if not obj.get("lattice"):
                raise ConfigError(f"{p}:{no}: manifest row has no 'lattice' field")
            lat = Path(str(obj["lattice"]))
            obj["lattice"] = lat if lat.is_absolute() else p.parent / lat
            rows.append(obj)
    return rows


def write_json(path: str | Path, obj: Any) -> Path:
    p = Path(path)
    p.parent.mkdir(parents=True, exist_ok=True)
    with p.open("w", encoding="utf-8") as f:
        json.dump(obj, f, indent=2, sort_keys=True, ensure_ascii=True)
        f.write("\n")
    return p
