"""
data_model/matching.py — relacja wpis manifestu ↔ payload.

MatchResult powstaje podczas rozwiązywania dopasowań i jest jedynym
encją mutowalną do momentu finalize():
  - add_candidate() akumuluje kandydatów (grupa konfliktu),
  - finalize() wybiera jednego (lub żadnego) i zamraża wynik.

Kandydaci są zachowywani po finalizacji — na potrzeby raportu.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum

from .documents import RawPayload
from .manifest import ManifestEntry


class MatchConfidence(StrEnum):
    """Poziom pewności dopasowania (kolejność tierów ma znaczenie)."""

    EXACT      = "exact"
    NORMALIZED = "normalized"
    FUZZY      = "fuzzy"
    NONE       = "none"

    @property
    def rank(self) -> int:
        """Niższy rank = silniejsze dopasowanie."""
        return _RANK[self]


_RANK: dict[MatchConfidence, int] = {
    MatchConfidence.EXACT:      0,
    MatchConfidence.NORMALIZED: 1,
    MatchConfidence.FUZZY:      2,
    MatchConfidence.NONE:       3,
}


@dataclass(frozen=True, slots=True)
class Candidate:
    payload: RawPayload
    confidence: MatchConfidence


@dataclass(slots=True)
class MatchResult:
    manifest_entry: ManifestEntry
    payload: RawPayload | None = None
    match_confidence: MatchConfidence = MatchConfidence.NONE
    candidates: list[Candidate] = field(default_factory=list)
    finalized: bool = False

    def add_candidate(self, payload: RawPayload, confidence: MatchConfidence) -> None:
        if self.finalized:
            raise RuntimeError(
                f"MatchResult dla '{self.manifest_entry.target_path}' jest już sfinalizowany."
            )
        self.candidates.append(Candidate(payload, confidence))

    def finalize(
        self,
        payload: RawPayload | None,
        confidence: MatchConfidence = MatchConfidence.NONE,
    ) -> None:
        if self.finalized:
            raise RuntimeError(
                f"MatchResult dla '{self.manifest_entry.target_path}' jest już sfinalizowany."
            )
        self.payload = payload
        self.match_confidence = confidence if payload is not None else MatchConfidence.NONE
        self.finalized = True

    @property
    def conflict_group(self) -> tuple[RawPayload, ...]:
        """Wszystkie payloady, które tekstowo pasowały do tego wpisu."""
        return tuple(c.payload for c in self.candidates)

    @property
    def losers(self) -> tuple[RawPayload, ...]:
        """Kandydaci, którzy przegrali z wybranym payloadem."""
        return tuple(
            c.payload for c in self.candidates
            if self.payload is None or c.payload.sequence_index != self.payload.sequence_index
        )

    @property
    def is_gap(self) -> bool:
        return self.finalized and self.payload is None
