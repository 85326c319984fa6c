from __future__ import annotations

import argparse
import logging

from lattice.decoding.paths import count_all_paths
from lattice.decoding.viterbi import decode
from lattice.errors import LatticeError
from lattice.graph.topo import topological_sort
from lattice.io.dot import write_dot
from lattice.io.reader import load_lattice
from lattice.io.writer import save_lattice
from lattice.model import SILENCE_TOKEN
from lattice.query import density, format_hits, sorted_hits, unique_words_at_time

logger = logging.getLogger("lattice.decode")

# outside the ErrorKind statuses (1-3) so callers can tell it apart from bad input
UNREACHABLE_STATUS = 4


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(description="Decode and summarize a single lattice file.")
    ap.add_argument("--lattice", required=True)
    ap.add_argument("--lm-scale", type=float, action="append", dest="lm_scales", default=None)
    ap.add_argument("--hits", action="append", default=[], metavar="WORD")
    ap.add_argument("--time", type=float, action="append", dest="times", default=[], metavar="SECONDS")
    ap.add_argument("--silence-token", default=SILENCE_TOKEN)
    ap.add_argument("--dot", default=None, help="Write a Graphviz file here")
    ap.add_argument("--save", default=None, help="Write the canonical lattice text here")
    ap.add_argument("--verbose", "-v", action="store_true")
    return ap


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s")
    else:
        logging.basicConfig(level=logging.INFO, format="%(message)s")

    try:
        lat = load_lattice(args.lattice)
        order = topological_sort(lat)
    except LatticeError as e:
        logger.error("Error: %s", e)
        return e.status

    print(f"id {lat.utterance_id}")
    print(f"nodes {lat.num_nodes} edges {lat.num_edges}")

    for s in args.lm_scales or [1.0]:
        try:
            hyp = decode(lat, s, order=order)
        except ValueError as e:
            logger.error("Error: %s", e)
            return UNREACHABLE_STATUS
        print(f"lm_scale {s:g}: {hyp.format()}")

    print(f"paths {count_all_paths(lat, order=order)}")
    if lat.duration > 0:
        print(f"density {density(lat, silence_token=args.silence_token):.4f}")
    else:
        logger.warning("Skipping density: start and end nodes share a timestamp")

    for word in args.hits:
        print(f"hits {word}: {format_hits(sorted_hits(lat, word))}")
    for t in args.times:
        print(f"words@{t:.2f}: {' '.join(sorted(unique_words_at_time(lat, t)))}")

    try:
        if args.dot:
            logger.info("Wrote %s", write_dot(lat, args.dot))
        if args.save:
            logger.info("Wrote %s", save_lattice(lat, args.save))
    except LatticeError as e:
        logger.error("Error: %s", e)
        return e.status
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
