"""Time-indexed lookups over a lattice and the lattice density statistic."""
from __future__ import annotations

import numpy as np

from lattice.model import SILENCE_TOKEN, Lattice


def unique_words_at_time(lattice: Lattice, time: float) -> set[str]:
    """Labels of zero-duration edges whose two endpoints sit exactly at ``time``."""
    t = lattice.times
    return {e.label for e in lattice.edges if t[e.src] == time and t[e.dst] == time}


def sorted_hits(lattice: Lattice, word: str) -> np.ndarray:
    """Ascending midpoints ``(t[src] + t[dst]) / 2`` of every edge labelled ``word``."""
    t = lattice.times
    mids = [(t[e.src] + t[e.dst]) / 2.0 for e in lattice.edges if e.label == word]
    return np.sort(np.asarray(mids, dtype=np.float64))


def format_hits(hits: np.ndarray) -> str:
    """Two-decimal, space-separated rendering; empty string when there are no hits."""
    return " ".join(f"{h:.2f}" for h in hits)


def density(lattice: Lattice, *, silence_token: str = SILENCE_TOKEN) -> float:
    """Non-silence edges per second between the start and end nodes.

    A multiword token counts as one word.
    """

    duration = lattice.duration
    if duration <= 0:
        raise ValueError(
            f"Density is undefined for {lattice.utterance_id}: start-to-end duration is {duration:.2f}s"
        )
    words = sum(1 for e in lattice.edges if e.label != silence_token)
    return words / duration
