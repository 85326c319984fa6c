from __future__ import annotations

import logging
from collections import deque

from lattice.errors import LatticeCycleError
from lattice.model import Lattice

logger = logging.getLogger(__name__)


def topological_sort(lattice: Lattice) -> list[int]:
    """Kahn's algorithm seeded at the start node.

    Only nodes reachable from ``lattice.start`` are ordered. The FIFO queue and
    the increasing-destination scan of outgoing edges fix the order of nodes
    that become ready at the same time, so the result is reproducible.

    Raises:
      LatticeCycleError: an edge leads back into the start node, or some
        in-degree is left over after the queue drains (a cycle, or an edge
        coming from a node that start cannot reach).
    """

    indeg = lattice.in_degrees()
    queue: deque[int] = deque([lattice.start])
    order: list[int] = []

    while queue:
        n = queue.popleft()
        order.append(n)
        for e in lattice.outgoing(n):
            if e.dst == lattice.start:
                # start is seeded regardless of its in-degree, so re-entering it is a cycle
                raise LatticeCycleError(
                    f"Lattice {lattice.utterance_id} has a cycle through start node {lattice.start}"
                )
            indeg[e.dst] -= 1
            if indeg[e.dst] == 0:
                queue.append(e.dst)

    residual = sum(indeg)
    if residual > 0:
        raise LatticeCycleError(
            f"Lattice {lattice.utterance_id} has a cycle or unreachable edges "
            f"({residual} incoming edges never resolved)"
        )

    logger.debug("Ordered %d of %d nodes in %s", len(order), lattice.num_nodes, lattice.utterance_id)
    return order
