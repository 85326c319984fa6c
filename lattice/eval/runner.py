from __future__ import annotations

import logging
import platform
import time
from pathlib import Path
from typing import Any

import numpy as np

from lattice.config import ConfigError, LatticeConfig
from lattice.decoding.paths import count_all_paths
from lattice.decoding.viterbi import decode
from lattice.eval.metrics import compute_wer
from lattice.graph.topo import topological_sort
from lattice.io.dot import write_dot
from lattice.io.reader import load_lattice
from lattice.io.writer import save_lattice
from lattice.model import Lattice
from lattice.query import density
from lattice.utils.io import ensure_dir, read_manifest
from lattice.utils.text import normalize_text

logger = logging.getLogger(__name__)


def _env_meta() -> dict[str, Any]:
    return {
        "timestamp_unix": int(time.time()),
        "python": platform.python_version(),
        "platform": platform.platform(),
        "numpy": np.__version__,
    }


def _scale_key(lm_scale: float) -> str:
    return f"{lm_scale:g}"


def evaluate_utterance(
    lat: Lattice,
    *,
    lm_scales: list[float],
    silence_token: str,
    multiword_sep: str,
    count_paths: bool,
) -> dict[str, Any]:
    """Decode one lattice at every scale and collect its summary statistics."""
    order = topological_sort(lat)

    hyps: dict[str, Any] = {}
    for s in lm_scales:
        hyp = decode(lat, s, order=order)
        hyps[_scale_key(s)] = {
            "text": hyp.text(silence_token=silence_token, multiword_sep=multiword_sep),
            "words": hyp.words,
            "cost": hyp.total,
        }

    rec: dict[str, Any] = {
        "id": lat.utterance_id,
        "num_nodes": lat.num_nodes,
        "num_edges": lat.num_edges,
        "hypotheses": hyps,
        "density": density(lat, silence_token=silence_token) if lat.duration > 0 else None,
    }
    if count_paths:
        rec["num_paths"] = count_all_paths(lat, order=order)
    return rec


def run_evaluation(cfg: LatticeConfig) -> dict[str, Any]:
    """Decode every lattice in the manifest and score hypotheses against references.

    Manifest rows are ``{"lattice": path, "text": reference}``; ``text`` is
    optional. Relative lattice paths are taken relative to the manifest file.
    """

    ecfg = cfg.require("eval")
    if not ecfg.get("manifest"):
        raise ConfigError("eval.manifest is required for evaluation")
    rows = read_manifest(ecfg["manifest"], limit=ecfg.get("max_items"))

    lm_scales = list(dict.fromkeys(cfg.lm_scales))
    ocfg = cfg.require("output")
    out_dir = Path(ocfg["dir"]) / str(cfg.get("run_name") or "run")

    utts: list[dict[str, Any]] = []
    refs: list[str] = []
    hyps: dict[str, list[str]] = {_scale_key(s): [] for s in lm_scales}

    for i, row in enumerate(rows):
        path = row["lattice"]
        lat = load_lattice(path)
        rec = evaluate_utterance(
            lat,
            lm_scales=lm_scales,
            silence_token=cfg.silence_token,
            multiword_sep=cfg.multiword_sep,
            count_paths=bool(ecfg.get("count_paths", True)),
        )
        rec["lattice"] = str(path)

        ref = normalize_text(str(row.get("text") or ""))
        if ref:
            rec["reference"] = ref
            refs.append(ref)
            for key in hyps:
                hyps[key].append(normalize_text(rec["hypotheses"][key]["text"]))

        if ocfg.get("write_dot"):
            write_dot(lat, ensure_dir(out_dir / "dot") / f"{rec['id']}.dot")
        if ocfg.get("write_lattice"):
            save_lattice(lat, ensure_dir(out_dir / "lattices") / f"{rec['id']}.lattice")

        logger.info("[%d/%d] %s: %d nodes, %d edges", i + 1, len(rows), rec["id"], rec["num_nodes"], rec["num_edges"])
        utts.append(rec)

    wer_by_scale: dict[str, Any] = {}
    best_scale: float | None = None
    if refs:
        best_wer = float("inf")
        for s in lm_scales:
            key = _scale_key(s)
            r = compute_wer(refs, hyps[key])
            wer_by_scale[key] = {"wer": r.wer, "num_utts": r.num_utts}
            if r.wer < best_wer or (r.wer == best_wer and best_scale is not None and s < best_scale):
                best_wer, best_scale = r.wer, s

    densities = [u["density"] for u in utts if u["density"] is not None]
    summary: dict[str, Any] = {
        "num_utts": len(utts),
        "num_scored": len(refs),
        "mean_density": float(np.mean(densities)) if densities else None,
        "best_lm_scale": best_scale,
    }
    if best_scale is not None:
        logger.info("Best lm_scale %g: WER %.4f", best_scale, wer_by_scale[_scale_key(best_scale)]["wer"])

    return {
        "run_name": cfg.get("run_name"),
        "meta": _env_meta(),
        "config": cfg.raw,
        "summary": summary,
        "wer": wer_by_scale,
        "utterances": utts,
    }
