from __future__ import annotations

import json

import pytest

from lattice.config import ConfigError, LatticeConfig, make_config
from lattice.eval.metrics import compute_wer
from lattice.eval.runner import run_evaluation
from lattice.utils.text import normalize_text


def test_compute_wer():
    r = compute_wer(["the cat sat", "a dog"], ["the cat sat", "a dog"])
    assert r.wer == 0.0
    assert r.num_utts == 2
    assert compute_wer(["the cat sat"], ["the bat sat"]).wer == pytest.approx(1 / 3)


def test_compute_wer_rejects_mismatched_lists():
    with pytest.raises(ValueError):
        compute_wer(["a"], [])
    with pytest.raises(ValueError):
        compute_wer([], [])


def test_normalize_text():
    assert normalize_text("  The CAT, sat!\n") == "the cat sat"
    assert normalize_text("don't  stop") == "don't stop"


@pytest.fixture
def manifest(tmp_path, sample_file):
    p = tmp_path / "manifest.jsonl"
    rows = [
        {"lattice": sample_file.name, "text": "The cat."},
        {"lattice": str(sample_file)},
    ]
    p.write_text("\n".join(json.dumps(r) for r in rows) + "\n", encoding="utf-8")
    return p


def test_run_evaluation(manifest, tmp_path):
    cfg = make_config(
        {
            "run_name": "t",
            "decoding": {"lm_scales": [1.0, 20.0, 1.0]},
            "eval": {"manifest": str(manifest)},
            "output": {"dir": str(tmp_path / "art"), "write_dot": True, "write_lattice": True},
        }
    )

    res = run_evaluation(cfg)

    assert res["run_name"] == "t"
    assert res["summary"]["num_utts"] == 2
    assert res["summary"]["num_scored"] == 1
    assert res["summary"]["mean_density"] == pytest.approx(2.0)
    assert set(res["wer"]) == {"1", "20"}
    assert res["wer"]["1"]["wer"] == 0.0
    assert res["summary"]["best_lm_scale"] == 1.0

    u = res["utterances"][0]
    assert u["id"] == "utt01"
    assert u["num_paths"] == 3
    assert u["reference"] == "the cat"
    assert u["hypotheses"]["1"]["text"] == "the cat"
    assert u["hypotheses"]["1"]["cost"] == pytest.approx(73.0)
    assert "reference" not in res["utterances"][1]

    assert (tmp_path / "art" / "t" / "dot" / "utt01.dot").exists()
    assert (tmp_path / "art" / "t" / "lattices" / "utt01.lattice").exists()
    json.dumps(res)


def test_run_evaluation_without_manifest():
    with pytest.raises(ConfigError, match="manifest"):
        run_evaluation(make_config())


def test_max_items_and_skipping_path_counts(manifest):
    cfg = make_config({"eval": {"manifest": str(manifest), "max_items": 1, "count_paths": False}})
    res = run_evaluation(cfg)
    assert res["summary"]["num_utts"] == 1
    assert "num_paths" not in res["utterances"][0]


def test_run_evaluation_requires_sections():
    with pytest.raises(ConfigError, match="eval"):
        run_evaluation(LatticeConfig(raw={}, path=None))
