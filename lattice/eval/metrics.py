from __future__ import annotations

from dataclasses import dataclass

from jiwer import wer


@dataclass(frozen=True)
class WERResult:
    wer: float
    num_utts: int


def compute_wer(refs: list[str], hyps: list[str]) -> WERResult:
    if len(refs) != len(hyps):
        raise ValueError("refs and hyps must have same length")
    if not refs:
        raise ValueError("need at least one reference to compute WER")
    return WERResult(wer=float(wer(refs, hyps)), num_utts=len(refs))
