from __future__ import annotations

import logging

from lattice.decoding.forward import COUNTING, run_forward
from lattice.model import Lattice

logger = logging.getLogger(__name__)


def count_all_paths(lattice: Lattice, *, order: list[int] | None = None) -> int:
    """Exact number of distinct start->end paths (sub-paths are not counted)."""
    res = run_forward(lattice, COUNTING, order=order)
    count = res.values[lattice.end]
    logger.debug("%s has %d start->end paths", lattice.utterance_id, count)
    return count
