from __future__ import annotations

import json

import pytest

from lattice.config import ConfigError
from lattice.utils.io import read_manifest, write_json


def test_manifest_resolves_relative_lattice_paths(tmp_path):
    p = tmp_path / "sets" / "dev.jsonl"
    p.parent.mkdir()
    elsewhere = tmp_path / "elsewhere" / "b.lattice"
    p.write_text(
        json.dumps({"lattice": "a.lattice", "text": "hi"}) + "\n\n" + json.dumps({"lattice": str(elsewhere)}) + "\n",
        encoding="utf-8",
    )

    rows = read_manifest(p)

    assert [r["lattice"] for r in rows] == [tmp_path / "sets" / "a.lattice", elsewhere]
    assert rows[0]["text"] == "hi"


def test_manifest_limit(tmp_path):
    p = tmp_path / "m.jsonl"
    p.write_text("".join(json.dumps({"lattice": f"{i}.lattice"}) + "\n" for i in range(5)), encoding="utf-8")
    assert len(read_manifest(p, limit=2)) == 2
    assert len(read_manifest(p)) == 5


@pytest.mark.parametrize(
    "line, match",
    [
        ("{not json", "invalid JSON"),
        ("[1, 2]", "must be an object"),
        ('{"text": "no lattice"}', "no 'lattice' field"),
    ],
)
def test_bad_manifest_rows(tmp_path, line, match):
    p = tmp_path / "m.jsonl"
    p.write_text(json.dumps({"lattice": "ok.lattice"}) + "\n" + line + "\n", encoding="utf-8")
    with pytest.raises(ConfigError, match=match) as ei:
        read_manifest(p)
    assert f"{p}:2" in str(ei.value)


def test_write_json_creates_parents(tmp_path):
    out = write_json(tmp_path / "a" / "b.json", {"n": 2**70})
    assert json.loads(out.read_text(encoding="utf-8")) == {"n": 2**70}
