"""Loader for the plain-text lattice format.

Layout::

    id <utterance-id>
    start <int>
    end <int>
    numNodes <int>
    numEdges <int>
    node <index> <timestamp>          # numNodes lines
    edge <src> <dst> <label> <am> <lm>  # until end of input

The five header lines may come in any order.
"""
from __future__ import annotations

import logging
from pathlib import Path

from lattice.errors import LatticeOpenError, LatticeParseError
from lattice.model import Edge, Lattice, build_lattice

logger = logging.getLogger(__name__)

HEADER_KEYS = ("id", "start", "end", "numNodes", "numEdges")


class _Lines:
    def __init__(self, text: str, source: str):
        self.source = source
        self._rows = [(no, line.split()) for no, line in enumerate(text.splitlines(), start=1) if line.strip()]
        self._pos = 0

    def __bool__(self) -> bool:
        return self._pos < len(self._rows)

    def remaining(self) -> int:
        return len(self._rows) - self._pos

    def next(self, what: str) -> tuple[int, list[str]]:
        if not self:
            raise LatticeParseError(f"Not able to parse {self.source}: input ends before {what}")
        row = self._rows[self._pos]
        self._pos += 1
        return row

    def error(self, line_no: int, msg: str) -> LatticeParseError:
        return LatticeParseError(f"Not able to parse {self.source} (line {line_no}): {msg}")


def _to_int(lines: _Lines, line_no: int, tok: str, what: str) -> int:
    try:
        return int(tok)
    except ValueError:
        raise lines.error(line_no, f"{what} must be an integer, got {tok!r}") from None


def _to_float(lines: _Lines, line_no: int, tok: str, what: str) -> float:
    try:
        return float(tok)
    except ValueError:
        raise lines.error(line_no, f"{what} must be a number, got {tok!r}") from None


def parse_lattice(text: str, *, source: str = "<string>") -> Lattice:
    lines = _Lines(text, source)

    header: dict[str, tuple[int, str]] = {}
    for _ in HEADER_KEYS:
        no, parts = lines.next("the header is complete")
        if len(parts) != 2 or parts[0] not in HEADER_KEYS:
            raise lines.error(no, f"expected one of {', '.join(HEADER_KEYS)} followed by a value")
        if parts[0] in header:
            raise lines.error(no, f"duplicate header {parts[0]!r}")
        header[parts[0]] = (no, parts[1])

    # five distinct keys were read, so every header is present
    start = _to_int(lines, *header["start"], "start")
    end = _to_int(lines, *header["end"], "end")
    num_nodes = _to_int(lines, *header["numNodes"], "numNodes")
    num_edges = _to_int(lines, *header["numEdges"], "numEdges")
    if num_nodes < 0 or num_edges < 0:
        raise LatticeParseError(f"Not able to parse {source}: negative node or edge count")
    if num_nodes > lines.remaining():
        raise lines.error(
            header["numNodes"][0], f"numNodes is {num_nodes} but only {lines.remaining()} lines follow the header"
        )

    times: list[float | None] = [None] * num_nodes
    for k in range(num_nodes):
        no, parts = lines.next(f"node line {k + 1} of {num_nodes}")
        if len(parts) != 3 or parts[0] != "node":
            raise lines.error(no, "expected 'node <index> <timestamp>'")
        idx = _to_int(lines, no, parts[1], "node index")
        if not 0 <= idx < num_nodes:
            raise lines.error(no, f"node index {idx} is outside [0, {num_nodes})")
        if times[idx] is not None:
            raise lines.error(no, f"node {idx} is listed twice")
        times[idx] = _to_float(lines, no, parts[2], "timestamp")

    edges: list[Edge] = []
    while lines:
        no, parts = lines.next("an edge")
        if len(parts) != 6 or parts[0] != "edge":
            raise lines.error(no, "expected 'edge <src> <dst> <label> <am> <lm>'")
        edges.append(
            Edge(
                src=_to_int(lines, no, parts[1], "edge source"),
                dst=_to_int(lines, no, parts[2], "edge destination"),
                label=parts[3],
                am_score=_to_int(lines, no, parts[4], "acoustic score"),
                lm_score=_to_int(lines, no, parts[5], "language model score"),
            )
        )

    return build_lattice(
        utterance_id=header["id"][1],
        start=start,
        end=end,
        times=times,  # type: ignore[arg-type]  # every index was filled once
        edges=edges,
        num_nodes=num_nodes,
        num_edges=num_edges,
        source=source,
    )


def load_lattice(path: str | Path) -> Lattice:
    p = Path(path)
    try:
        text = p.read_text(encoding="utf-8")
    except OSError as e:
        raise LatticeOpenError(f"Unable to open file {p}: {e}") from e
    except UnicodeDecodeError as e:
        raise LatticeParseError(f"Not able to parse file {p}: {e}") from e
    lat = parse_lattice(text, source=str(p))
    logger.debug("Loaded %s from %s (%d nodes, %d edges)", lat.utterance_id, p, lat.num_nodes, lat.num_edges)
    return lat
