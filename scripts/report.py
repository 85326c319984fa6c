from __future__ import annotations

import argparse
import json
from pathlib import Path
from typing import Any


def _md_table(headers: list[str], rows: list[list[str]]) -> str:
    out = []
    out.append("| " + " | ".join(headers) + " |")
    out.append("| " + " | ".join(["---"] * len(headers)) + " |")
    for r in rows:
        out.append("| " + " | ".join(r) + " |")
    return "\n".join(out)


def fmt(x: Any) -> str:
    if x is None:
        return "-"
    if isinstance(x, float):
        return f"{x:.4f}"
    return str(x)


def render_report(res: dict[str, Any]) -> str:
    run_name = res.get("run_name", "run")
    meta = res.get("meta", {})
    summary = res.get("summary", {})
    wer = res.get("wer", {})
    utts = res.get("utterances", [])

    lines: list[str] = []
    lines.append(f"# Lattice report: {run_name}")
    lines.append("")
    lines.append("## Environment")
    lines.append("")
    lines.append("```json")
    lines.append(json.dumps(meta, indent=2, sort_keys=True))
    lines.append("```")
    lines.append("")

    lines.append("## Summary")
    lines.append("")
    lines.append(f"- Utterances: {fmt(summary.get('num_utts'))} ({fmt(summary.get('num_scored'))} with references)")
    lines.append(f"- Mean density (words/s): {fmt(summary.get('mean_density'))}")
    lines.append(f"- Best lm_scale: {fmt(summary.get('best_lm_scale'))}")
    lines.append("")

    if wer:
        lines.append("## WER by lm_scale")
        lines.append("")
        rows = [[scale, fmt(m.get("wer")), str(m.get("num_utts"))] for scale, m in wer.items()]
        lines.append(_md_table(["lm_scale", "WER", "N"], rows))
        lines.append("")

    if utts:
        lines.append("## Utterances")
        lines.append("")
        rows = []
        for u in utts:
            for scale, h in u.get("hypotheses", {}).items():
                rows.append(
                    [
                        str(u.get("id")),
                        str(u.get("num_nodes")),
                        str(u.get("num_edges")),
                        fmt(u.get("num_paths")),
                        fmt(u.get("density")),
                        scale,
                        fmt(h.get("cost")),
                        h.get("text") or "",
                    ]
                )
        lines.append(_md_table(["id", "nodes", "edges", "paths", "density", "lm_scale", "cost", "hypothesis"], rows))
        lines.append("")

    return "\n".join(lines) + "\n"


def main(argv: list[str] | None = None) -> None:
    ap = argparse.ArgumentParser()
    ap.add_argument("--results", required=True)
    ap.add_argument("--out", required=True)
    args = ap.parse_args(argv)

    res = json.loads(Path(args.results).read_text(encoding="utf-8"))

    Path(args.out).parent.mkdir(parents=True, exist_ok=True)
    Path(args.out).write_text(render_report(res), encoding="utf-8")


if __name__ == "__main__":
    main()
