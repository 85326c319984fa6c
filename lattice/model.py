"""Immutable word lattice: timestamped nodes joined by scored word edges."""
from __future__ import annotations

import math
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Iterable, Mapping

from lattice.errors import LatticeParseError

SILENCE_TOKEN = "-silence-"


@dataclass(frozen=True)
class Edge:
    src: int
    dst: int
    label: str
    am_score: int
    lm_score: int

    def weight(self, lm_scale: float) -> float:
        """Combined weight ``am_score + lm_scale * lm_score``."""
        return self.am_score + lm_scale * self.lm_score


@dataclass(frozen=True)
class Lattice:
    """A weighted DAG compactly encoding the hypotheses for one utterance.

    Use ``build_lattice`` to get a validated instance. Edges are held sorted by
    ``(src, dst)`` so outgoing edges come out in increasing destination order
    and incoming edges in increasing source order.
    """

    utterance_id: str
    start: int
    end: int
    times: tuple[float, ...]
    edges: tuple[Edge, ...]
    _by_pair: Mapping[tuple[int, int], Edge] = field(init=False, repr=False, compare=False)
    _out: tuple[tuple[Edge, ...], ...] = field(init=False, repr=False, compare=False)
    _in: tuple[tuple[Edge, ...], ...] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        edges = tuple(sorted(self.edges, key=lambda e: (e.src, e.dst)))
        out: list[list[Edge]] = [[] for _ in self.times]
        inc: list[list[Edge]] = [[] for _ in self.times]
        for e in edges:
            out[e.src].append(e)
            inc[e.dst].append(e)

        object.__setattr__(self, "times", tuple(float(t) for t in self.times))
        object.__setattr__(self, "edges", edges)
        object.__setattr__(self, "_by_pair", MappingProxyType({(e.src, e.dst): e for e in edges}))
        object.__setattr__(self, "_out", tuple(tuple(x) for x in out))
        object.__setattr__(self, "_in", tuple(tuple(x) for x in inc))

    @property
    def num_nodes(self) -> int:
        return len(self.times)

    @property
    def num_edges(self) -> int:
        return len(self.edges)

    @property
    def duration(self) -> float:
        return self.times[self.end] - self.times[self.start]

    def edge(self, src: int, dst: int) -> Edge | None:
        """Return the edge ``src -> dst`` or None when absent."""
        return self._by_pair.get((src, dst))

    def has_edge(self, src: int, dst: int) -> bool:
        return (src, dst) in self._by_pair

    def outgoing(self, node: int) -> tuple[Edge, ...]:
        return self._out[node]

    def incoming(self, node: int) -> tuple[Edge, ...]:
        return self._in[node]

    def in_degrees(self) -> list[int]:
        return [len(x) for x in self._in]


def build_lattice(
    *,
    utterance_id: str,
    start: int,
    end: int,
    times: Iterable[float],
    edges: Iterable[Edge],
    num_nodes: int | None = None,
    num_edges: int | None = None,
    source: str = "<memory>",
) -> Lattice:
    """Validate raw lattice parts and assemble a ``Lattice``.

    ``num_nodes``/``num_edges`` are the declared counts from a file header; when
    given they must match what was actually supplied.
    """

    times = [float(t) for t in times]
    edges = list(edges)
    n = len(times)

    def fail(msg: str) -> LatticeParseError:
        return LatticeParseError(f"Not able to parse {source}: {msg}")

    if num_nodes is not None and num_nodes != n:
        raise fail(f"numNodes is {num_nodes} but {n} node timestamps were given")
    if num_edges is not None and num_edges != len(edges):
        raise fail(f"numEdges is {num_edges} but {len(edges)} edges were given")
    for name, idx in (("start", start), ("end", end)):
        if not 0 <= idx < n:
            raise fail(f"{name} index {idx} is outside [0, {n})")
    for i, t in enumerate(times):
        if not math.isfinite(t):
            raise fail(f"node {i} has non-finite timestamp {t}")
        if t < 0:
            raise fail(f"node {i} has negative timestamp {t}")

    seen: set[tuple[int, int]] = set()
    for e in edges:
        if not (0 <= e.src < n and 0 <= e.dst < n):
            raise fail(f"edge {e.src} -> {e.dst} references a node outside [0, {n})")
        if (e.src, e.dst) in seen:
            raise fail(f"duplicate edge {e.src} -> {e.dst}")
        seen.add((e.src, e.dst))

    return Lattice(utterance_id=utterance_id, start=start, end=end, times=tuple(times), edges=tuple(edges))
