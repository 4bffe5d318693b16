"""
assembler/context.py — jawny, mutowalny kontekst jednego przebiegu.

Zastępuje globalny stan "już dopasowanych" payloadów: tworzony na starcie
CorpusAssembler.assemble(), przekazywany przez wszystkie etapy i porzucany
po zbudowaniu wyniku. Nic nie przeżywa między przebiegami.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from data_model.documents import RawPayload
from data_model.issues import ErrorCode, Issue
from data_model.manifest import ManifestEntry
from data_model.matching import MatchConfidence, MatchResult
from manifest.types import ManifestIntegrityError

from .types import AmbiguityRecord


@dataclass(slots=True)
class ResolutionContext:
    entries: list[ManifestEntry]
    payloads: list[RawPayload]
    # target_path -> MatchResult (kolejność manifestu)
    results: dict[str, MatchResult] = field(default_factory=dict)
    # sequence_index -> [(pozycja wpisu, pewność)] dla tierów 1–2
    textual: dict[int, list[tuple[int, MatchConfidence]]] = field(default_factory=dict)
    # sequence_index -> target_path, do którego payload trafił (pula lub fallback)
    claimed: dict[int, str] = field(default_factory=dict)
    ambiguities: list[AmbiguityRecord] = field(default_factory=list)

    @classmethod
    def start(
        cls,
        entries: list[ManifestEntry],
        payloads: list[RawPayload],
    ) -> "ResolutionContext":
        # claimed jest kluczowane po sequence_index, więc indeks musi być unikalny
        seen: set[int] = set()
        clashes: set[int] = set()
        for p in payloads:
            if p.sequence_index in seen:
                clashes.add(p.sequence_index)
            seen.add(p.sequence_index)
        if clashes:
            raise ValueError(f"Powtórzone sequence_index payloadów: {sorted(clashes)}.")

        ctx = cls(entries=entries, payloads=payloads)
        duplicates: list[Issue] = []
        for e in entries:
            if e.target_path in ctx.results:
                duplicates.append(Issue(
                    code=ErrorCode.DUPLICATE_TARGET,
                    location=f"manifest:{e.line_no}",
                    message=f"target_path '{e.target_path}' występuje wielokrotnie.",
                    details={"target_path": e.target_path},
                ))
                continue
            ctx.results[e.target_path] = MatchResult(manifest_entry=e)
        if duplicates:
            raise ManifestIntegrityError(duplicates)
        return ctx

    def result_for(self, entry_pos: int) -> MatchResult:
        return self.results[self.entries[entry_pos].target_path]

    def claim(self, payload: RawPayload, target_path: str) -> None:
        self.claimed[payload.sequence_index] = target_path

    def unclaimed_payloads(self) -> list[RawPayload]:
        return [p for p in self.payloads if p.sequence_index not in self.claimed]

    def open_results(self) -> list[MatchResult]:
        return [r for r in self.results.values() if not r.finalized]
