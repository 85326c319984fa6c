"""Shared fixtures: small hand-built lattices."""
from __future__ import annotations

import pytest

from lattice.model import Edge, build_lattice


@pytest.fixture
def make_lattice():
    """Factory: ``make_lattice([(src, dst, label, am, lm), ...], times=..., start=0, end=None)``."""

    def _make(edges, *, times=None, start=0, end=None, utterance_id="test"):
        n = 1 + max([start] + [max(s, d) for s, d, *_ in edges])
        if times is None:
            times = [float(i) for i in range(n)]
        if end is None:
            end = len(times) - 1
        return build_lattice(
            utterance_id=utterance_id,
            start=start,
            end=end,
            times=times,
            edges=[Edge(s, d, label, am, lm) for s, d, label, am, lm in edges],
        )

    return _make


@pytest.fixture
def diamond(make_lattice):
    # 0 -> 1 -> 3 costs 5, 0 -> 2 -> 3 costs 3 (lm scores are zero)
    return make_lattice(
        [
            (0, 1, "a", 2, 0),
            (0, 2, "b", 1, 0),
            (1, 3, "x", 3, 0),
            (2, 3, "y", 2, 0),
        ]
    )


@pytest.fixture
def layered(make_lattice):
    """Factory for a lattice of consecutive layers; layer ``k`` has ``widths[k]`` parallel two-edge paths."""

    def _make(widths):
        edges = []
        junction = 0
        nxt = 1
        for w in widths:
            mids = list(range(nxt, nxt + w))
            out = nxt + w
            for m in mids:
                edges.append((junction, m, f"w{m}", 1, 1))
                edges.append((m, out, f"w{m}", 1, 1))
            junction = out
            nxt = out + 1
        return make_lattice(edges)

    return _make


SAMPLE_TEXT = """\
id utt01
start 0
end 4
numNodes 5
numEdges 6
node 0 0.00
node 1 0.50
node 2 0.50
node 3 1.00
node 4 2.50
edge 0 1 -silence- 5 0
edge 0 2 the 20 3
edge 1 3 the 18 4
edge 2 3 a 19 2
edge 3 4 cat 40 6
edge 2 4 cat_sat 70 8
"""


@pytest.fixture
def sample_text():
    return SAMPLE_TEXT


@pytest.fixture
def sample_file(tmp_path):
    p = tmp_path / "utt01.lattice"
    p.write_text(SAMPLE_TEXT, encoding="utf-8")
    return p
