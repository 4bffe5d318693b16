"""
assembler/types.py — konfiguracja asemblera i struktury raportu.

AssemblerConfig — progi i polityki (stałe konfigurowalne, nie założenia)
AssemblyReport  — raport: chosen, gaps, orphans, conflicts, ambiguities,
                  parse_errors, structural
AssemblyResult  — outputs (target_path, raw_text) + results + report
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from enum import StrEnum
from typing import Any

from data_model.issues import Issue
from data_model.matching import MatchResult

DEFAULT_SIMILARITY_THRESHOLD = 0.6


class ConflictPolicy(StrEnum):
    """Który kandydat wygrywa w grupie konfliktu (w obrębie najlepszego tieru)."""

    LONGEST  = "longest"    # najdłuższy raw_text, remis → najwcześniejszy sequence_index
    EARLIEST = "earliest"   # najwcześniejszy sequence_index


@dataclass(frozen=True, slots=True)
class AssemblerConfig:
    similarity_threshold: float = DEFAULT_SIMILARITY_THRESHOLD
    conflict_policy: ConflictPolicy = ConflictPolicy.LONGEST
    positional_fallback: bool = True

    def __post_init__(self) -> None:
        if not 0.0 < self.similarity_threshold <= 1.0:
            raise ValueError(
                f"similarity_threshold musi być w (0, 1], podano {self.similarity_threshold}."
            )
        if not isinstance(self.conflict_policy, ConflictPolicy):
            object.__setattr__(self, "conflict_policy", ConflictPolicy(self.conflict_policy))


# ---------------------------------------------------------------------------
# Rekordy raportu
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class ChosenRecord:
    target_path: str
    title: str
    category: str
    order: int
    sequence_index: int
    payload_title: str | None
    confidence: str
    length: int
    source: str


@dataclass(frozen=True, slots=True)
class GapRecord:
    target_path: str
    title: str
    category: str
    order: int
    line_no: int


@dataclass(frozen=True, slots=True)
class OrphanRecord:
    sequence_index: int
    payload_title: str | None
    length: int
    source: str


@dataclass(frozen=True, slots=True)
class LoserRecord:
    sequence_index: int
    payload_title: str | None
    confidence: str
    length: int
    source: str


@dataclass(frozen=True, slots=True)
class ConflictRecord:
    """Grupa konfliktu: kilka payloadów pasowało do jednego wpisu."""

    target_path: str
    chosen_sequence_index: int
    policy: str
    losers: tuple[LoserRecord, ...]


@dataclass(frozen=True, slots=True)
class AmbiguityRecord:
    """Jeden payload pasował tekstowo do kilku wpisów (dane, nie błąd)."""

    sequence_index: int
    payload_title: str | None
    assigned_to: str
    confidence: str
    also_matched: tuple[str, ...]


# ---------------------------------------------------------------------------
# Raport i wynik
# ---------------------------------------------------------------------------

@dataclass(slots=True)
class AssemblyReport:
    """
    Pełny ślad audytowy przebiegu.

    - chosen:       wpisy z wybranym payloadem (kolejność manifestu)
    - gaps:         wpisy bez payloadu
    - orphans:      payloady bez wpisu
    - conflicts:    grupy konfliktu (przegrani nie są zapisywani na wyjście)
    - ambiguities:  payloady pasujące do kilku wpisów
    - parse_errors: linie manifestu, których nie sparsowano (MALFORMED_LINE)
    - structural:   odrzucone puste wycinki korpusu (EMPTY_SLICE)
    """

    chosen: list[ChosenRecord] = field(default_factory=list)
    gaps: list[GapRecord] = field(default_factory=list)
    orphans: list[OrphanRecord] = field(default_factory=list)
    conflicts: list[ConflictRecord] = field(default_factory=list)
    ambiguities: list[AmbiguityRecord] = field(default_factory=list)
    parse_errors: list[Issue] = field(default_factory=list)
    structural: list[Issue] = field(default_factory=list)

    @property
    def is_clean(self) -> bool:
        """Brak luk i sierot (konflikty i niejednoznaczności nie wpływają)."""
        return not self.gaps and not self.orphans

    def to_dict(self) -> dict[str, Any]:
        return {
            "chosen": [asdict(r) for r in self.chosen],
            "gaps": [asdict(r) for r in self.gaps],
            "orphans": [asdict(r) for r in self.orphans],
            "conflicts": [asdict(r) for r in self.conflicts],
            "ambiguities": [asdict(r) for r in self.ambiguities],
            "parse_errors": [i.to_dict() for i in self.parse_errors],
            "structural": [i.to_dict() for i in self.structural],
            "summary": {
                "chosen": len(self.chosen),
                "gaps": len(self.gaps),
                "orphans": len(self.orphans),
                "conflicts": len(self.conflicts),
                "ambiguities": len(self.ambiguities),
                "parse_errors": len(self.parse_errors),
                "structural": len(self.structural),
            },
        }


@dataclass(slots=True)
class AssemblyResult:
    outputs: list[tuple[str, str]]
    results: list[MatchResult]
    report: AssemblyReport

    def as_mapping(self) -> dict[str, str]:
        return dict(self.outputs)
