from __future__ import annotations

from pathlib import Path

from lattice.errors import LatticeOpenError
from lattice.model import Lattice


def to_text(lattice: Lattice) -> str:
    """Canonical text form, rebuilt from the lattice fields.

    Nodes come out by ascending index and edges by ascending ``(src, dst)``;
    timestamps are written with two decimals.
    """

    lines = [
        f"id {lattice.utterance_id}",
        f"start {lattice.start}",
        f"end {lattice.end}",
        f"numNodes {lattice.num_nodes}",
        f"numEdges {lattice.num_edges}",
    ]
    lines.extend(f"node {i} {t:.2f}" for i, t in enumerate(lattice.times))
    lines.extend(f"edge {e.src} {e.dst} {e.label} {e.am_score} {e.lm_score}" for e in lattice.edges)
    return "\n".join(lines) + "\n"


def save_lattice(lattice: Lattice, path: str | Path) -> Path:
    p = Path(path)
    try:
        p.parent.mkdir(parents=True, exist_ok=True)
        p.write_text(to_text(lattice), encoding="utf-8")
    except OSError as e:
        raise LatticeOpenError(f"Unable to open file {p}: {e}") from e
    return p
