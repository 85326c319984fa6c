from __future__ import annotations

import argparse
import logging

from lattice.config import ConfigError, load_config
from lattice.errors import LatticeError
from lattice.eval.runner import run_evaluation
from lattice.utils.io import write_json

logger = logging.getLogger("lattice.eval")


def main(argv: list[str] | None = None) -> int:
    ap = argparse.ArgumentParser()
    ap.add_argument("--config", required=True)
    ap.add_argument("--out", default="artifacts/results.json")
    ap.add_argument("--verbose", "-v", action="store_true")
    args = ap.parse_args(argv)

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO, format="%(message)s")

    try:
        cfg = load_config(args.config)
        logger.debug(cfg.dump())
        results = run_evaluation(cfg)
    except ConfigError as e:
        logger.error("Config error: %s", e)
        return 1
    except LatticeError as e:
        logger.error("Error: %s", e)
        return e.status

    logger.info("Wrote %s", write_json(args.out, results))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
