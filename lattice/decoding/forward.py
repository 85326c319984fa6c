"""Topological-order dynamic program shared by the decoder and the path counter."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Generic, TypeVar

from lattice.graph.topo import topological_sort
from lattice.model import Edge, Lattice

V = TypeVar("V")


@dataclass(frozen=True)
class Semiring(Generic[V]):
    """How values are seeded, carried across an edge, and merged at a node.

    ``combine(acc, cand)`` returns the new accumulator and whether ``cand``
    took over, which is what the predecessor link records.
    """

    name: str
    zero: Callable[[], V]
    one: Callable[[], V]
    extend: Callable[[V, Edge], V]
    combine: Callable[[V, V], tuple[V, bool]]


@dataclass(frozen=True)
class ForwardResult(Generic[V]):
    order: list[int]
    values: list[V]
    backpointers: list[int] | None


def tropical(lm_scale: float) -> Semiring[float]:
    """Min-plus over combined edge weights.

    The comparison is ``<=``, so on an exact tie the predecessor scanned last
    (the higher source index) wins.
    """

    def combine(acc: float, cand: float) -> tuple[float, bool]:
        if cand <= acc:
            return cand, True
        return acc, False

    return Semiring(
        name="tropical",
        zero=lambda: float("inf"),
        one=lambda: 0.0,
        extend=lambda v, e: v + e.weight(lm_scale),
        combine=combine,
    )


# Python ints are arbitrary precision, so path counts never overflow.
COUNTING: Semiring[int] = Semiring(
    name="counting",
    zero=lambda: 0,
    one=lambda: 1,
    extend=lambda v, e: v,
    combine=lambda acc, cand: (acc + cand, False),
)


def run_forward(
    lattice: Lattice,
    semiring: Semiring[Any],
    *,
    track_backpointers: bool = False,
    order: list[int] | None = None,
) -> ForwardResult[Any]:
    """Evaluate ``semiring`` over the lattice in topological order.

    For each node ``n`` in order, every incoming edge ``(i, n)`` is folded in
    with ``i`` ascending. Pass ``order`` to reuse a sort computed earlier.
    """

    if order is None:
        order = topological_sort(lattice)

    values = [semiring.zero() for _ in range(lattice.num_nodes)]
    values[lattice.start] = semiring.one()
    back = [-1] * lattice.num_nodes if track_backpointers else None

    for n in order:
        acc = values[n]
        for e in lattice.incoming(n):
            acc, took = semiring.combine(acc, semiring.extend(values[e.src], e))
            if took and back is not None:
                back[n] = e.src
        values[n] = acc

    return ForwardResult(order=order, values=values, backpointers=back)
