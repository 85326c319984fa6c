from __future__ import annotations

import logging

from lattice.decoding.forward import run_forward, tropical
from lattice.decoding.hypothesis import Hypothesis
from lattice.model import Lattice

logger = logging.getLogger(__name__)


def backtrack(backpointers: list[int], *, start: int, end: int) -> list[int]:
    """Follow predecessor links from ``end`` back to ``start``; return the forward path."""
    path = [end]
    node = end
    while node != start:
        node = backpointers[node]
        if node < 0:
            raise ValueError(f"Node {end} is not reachable from start node {start}")
        path.append(node)
    path.reverse()
    return path


def decode(lattice: Lattice, lm_scale: float, *, order: list[int] | None = None) -> Hypothesis:
    """Minimum-weight start->end path under ``am + lm_scale * lm``.

    Ties between predecessors reaching a node at equal cost go to the one with
    the higher index. The end node must be reachable from start.
    """

    res = run_forward(lattice, tropical(lm_scale), track_backpointers=True, order=order)
    assert res.backpointers is not None
    path = backtrack(res.backpointers, start=lattice.start, end=lattice.end)

    items: list[tuple[str, float]] = []
    for u, v in zip(path, path[1:]):
        e = lattice.edge(u, v)
        if e is not None:
            items.append((e.label, e.weight(lm_scale)))

    total = float(res.values[lattice.end])
    logger.debug(
        "Decoded %s at lm_scale=%g: %d words, cost %.4f", lattice.utterance_id, lm_scale, len(items), total
    )
    return Hypothesis(items=tuple(items), total=total)
