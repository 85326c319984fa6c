from __future__ import annotations

import re

_WS_RE = re.compile(r"\s+")
_DROP_RE = re.compile(r"[^a-z0-9' ]+")


def normalize_text(text: str) -> str:
    """Lowercase and strip punctuation so references compare with lattice words."""
    t = _DROP_RE.sub(" ", text.strip().lower())
    return _WS_RE.sub(" ", t).strip()
