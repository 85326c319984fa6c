from __future__ import annotations

from dataclasses import dataclass

from lattice.model import SILENCE_TOKEN


@dataclass(frozen=True)
class Hypothesis:
    """Best word sequence through a lattice.

    ``items`` holds ``(word, combined edge weight)`` in path order and
    ``total`` the path cost.
    """

    items: tuple[tuple[str, float], ...]
    total: float

    def __len__(self) -> int:
        return len(self.items)

    @property
    def words(self) -> list[str]:
        return [w for w, _ in self.items]

    @property
    def weights(self) -> list[float]:
        return [x for _, x in self.items]

    def text(self, *, silence_token: str = SILENCE_TOKEN, multiword_sep: str = "_") -> str:
        """Transcript with silence dropped and multiword tokens split apart."""
        out: list[str] = []
        for w in self.words:
            if w == silence_token:
                continue
            out.extend(p for p in w.split(multiword_sep) if p)
        return " ".join(out)

    def format(self) -> str:
        parts = [f"{w}({x:.2f})" for w, x in self.items]
        return f"{' '.join(parts)} [total {self.total:.2f}]"
