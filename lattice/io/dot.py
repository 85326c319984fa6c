"""Graphviz export (left-to-right layout, edges labelled with their word)."""
from __future__ import annotations

from pathlib import Path

from lattice.errors import LatticeOpenError
from lattice.model import Lattice


def to_dot(lattice: Lattice) -> str:
    lines = ["digraph g {", '   rankdir="LR"']
    for e in lattice.edges:
        label = e.label.replace("\\", "\\\\").replace('"', '\\"')
        lines.append(f'   {e.src} -> {e.dst} [label = "{label}"]')
    lines.append("}")
    return "\n".join(lines) + "\n"


def write_dot(lattice: Lattice, path: str | Path) -> Path:
    p = Path(path)
    try:
        p.parent.mkdir(parents=True, exist_ok=True)
        p.write_text(to_dot(lattice), encoding="utf-8")
    except OSError as e:
        raise LatticeOpenError(f"Unable to open file {p}: {e}") from e
    return p
