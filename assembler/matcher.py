"""
assembler/matcher.py — dopasowanie payloadów do wpisów manifestu.

CorpusAssembler.assemble(entries, payloads, ...) -> AssemblyResult

Etapy (kolejność tierów jest wiążąca — jej zmiana zmienia zwycięzców):
  A — tier 1/2 tekstowo   (Exact: równość / fraza / declared_id,
                           Normalized: overlap tokenów >= próg)
  B — przydział           (payload pasujący do kilku wpisów zostaje przy
                           wpisie z najlepszym tierem, remis → wcześniejszy
                           wpis; reszta → AmbiguityRecord)
  C — konflikty           (najlepszy tier w puli, potem ConflictPolicy)
  D — tier 3 pozycyjnie   (gdy liczba wolnych payloadów == liczba wolnych
                           wpisów → parowanie po kolejności, Fuzzy)
  E — raport              (chosen / gaps / orphans / conflicts / ambiguities)

Każdy payload kończy dokładnie w jednym z: wybrany, przegrany w konflikcie,
sierota. Każdy wpis dokładnie w jednym z: chosen, gaps.
"""

from __future__ import annotations

from typing import Iterable

from data_model.documents import HeadingFound, RawPayload
from data_model.issues import Issue
from data_model.manifest import ManifestEntry
from data_model.matching import Candidate, MatchConfidence, MatchResult

from .context import ResolutionContext
from .normalizer import (
    normalize_title,
    phrase_contains,
    slugify,
    target_stem,
    title_tokens,
    token_overlap_ratio,
)
from .types import (
    AmbiguityRecord,
    AssemblerConfig,
    AssemblyReport,
    AssemblyResult,
    ChosenRecord,
    ConflictPolicy,
    ConflictRecord,
    GapRecord,
    LoserRecord,
    OrphanRecord,
)


class _EntryKey:
    """Prekomputowane formy tytułu wpisu."""

    __slots__ = ("norm", "tokens", "ids")

    def __init__(self, entry: ManifestEntry) -> None:
        self.norm   = normalize_title(entry.title)
        self.tokens = title_tokens(entry.title)
        self.ids    = {
            i.casefold()
            for i in (entry.target_path, target_stem(entry.target_path), slugify(entry.title))
            if i
        }


class CorpusAssembler:
    """
    Asembler korpusu: payloady + wpisy manifestu → mapa target_path → treść.

    Użycie:
        assembler = CorpusAssembler(AssemblerConfig(similarity_threshold=0.6))
        result    = assembler.assemble(catalog.entries, payloads)
        for target, text in result.outputs:
            ...
    """

    def __init__(self, config: AssemblerConfig | None = None) -> None:
        self._config = config or AssemblerConfig()

    @property
    def config(self) -> AssemblerConfig:
        return self._config

    # ------------------------------------------------------------------
    # Publiczny interfejs
    # ------------------------------------------------------------------

    def assemble(
        self,
        entries: Iterable[ManifestEntry],
        payloads: Iterable[RawPayload],
        *,
        parse_errors: Iterable[Issue] = (),
        structural: Iterable[Issue] = (),
    ) -> AssemblyResult:
        """
        Dopasowuje payloady do wpisów i zwraca AssemblyResult.

        Args:
            entries:      wpisy manifestu w kolejności TOC
            payloads:     payloady w kolejności sequence_index
            parse_errors: linie manifestu pominięte przez parser (do raportu)
            structural:   odrzucone puste wycinki (do raportu)

        Raises:
            ManifestIntegrityError — gdy target_path nie jest unikalny.
            ValueError             — gdy dwa payloady mają ten sam sequence_index.
        """
        ctx = ResolutionContext.start(list(entries), list(payloads))

        self._stage_textual(ctx)
        self._stage_claims(ctx)
        self._stage_conflicts(ctx)
        self._stage_positional(ctx)

        return self._build_result(ctx, list(parse_errors), list(structural))

    def score(self, entry: ManifestEntry, payload: RawPayload) -> MatchConfidence:
        """Tier 1/2 dla pojedynczej pary (bez kontekstu przebiegu)."""
        return self._score(_EntryKey(entry), payload)

    # ------------------------------------------------------------------
    # Stage A: tier 1/2
    # ------------------------------------------------------------------

    def _stage_textual(self, ctx: ResolutionContext) -> None:
        keys = [_EntryKey(e) for e in ctx.entries]
        for payload in ctx.payloads:
            hits: list[tuple[int, MatchConfidence]] = []
            for pos, key in enumerate(keys):
                conf = self._score(key, payload)
                if conf is not MatchConfidence.NONE:
                    hits.append((pos, conf))
            if hits:
                ctx.textual[payload.sequence_index] = hits

    def _score(self, key: _EntryKey, payload: RawPayload) -> MatchConfidence:
        if payload.declared_id and payload.declared_id.casefold() in key.ids:
            return MatchConfidence.EXACT

        match payload.heading:
            case HeadingFound(text=text):
                norm = normalize_title(text)
                tokens = title_tokens(text)
            case _:
                return MatchConfidence.NONE

        if norm == key.norm or phrase_contains(tokens, key.tokens):
            return MatchConfidence.EXACT
        if token_overlap_ratio(tokens, key.tokens) >= self._config.similarity_threshold:
            return MatchConfidence.NORMALIZED
        return MatchConfidence.NONE

    # ------------------------------------------------------------------
    # Stage B: przydział payloadów (niejednoznaczności)
    # ------------------------------------------------------------------

    def _stage_claims(self, ctx: ResolutionContext) -> None:
        for payload in ctx.payloads:
            hits = ctx.textual.get(payload.sequence_index)
            if not hits:
                continue
            best_pos, best_conf = min(hits, key=lambda h: (h[1].rank, h[0]))
            result = ctx.result_for(best_pos)
            result.add_candidate(payload, best_conf)
            ctx.claim(payload, result.manifest_entry.target_path)

            if len(hits) > 1:
                ctx.ambiguities.append(AmbiguityRecord(
                    sequence_index=payload.sequence_index,
                    payload_title=payload.extracted_title,
                    assigned_to=result.manifest_entry.target_path,
                    confidence=str(best_conf),
                    also_matched=tuple(
                        ctx.entries[pos].target_path for pos, _ in hits if pos != best_pos
                    ),
                ))

    # ------------------------------------------------------------------
    # Stage C: rozstrzyganie grup konfliktu
    # ------------------------------------------------------------------

    def _stage_conflicts(self, ctx: ResolutionContext) -> None:
        for result in ctx.results.values():
            if not result.candidates:
                continue
            best_rank = min(c.confidence.rank for c in result.candidates)
            pool = [c for c in result.candidates if c.confidence.rank == best_rank]
            winner = min(pool, key=self._policy_key)
            result.finalize(winner.payload, winner.confidence)

    def _policy_key(self, candidate: Candidate) -> tuple[int, ...]:
        p = candidate.payload
        if self._config.conflict_policy is ConflictPolicy.EARLIEST:
            return (p.sequence_index,)
        return (-p.length, p.sequence_index)

    # ------------------------------------------------------------------
    # Stage D: tier 3: fallback pozycyjny
    # ------------------------------------------------------------------

    def _stage_positional(self, ctx: ResolutionContext) -> None:
        open_results = ctx.open_results()
        free = ctx.unclaimed_payloads()

        if (
            self._config.positional_fallback
            and open_results
            and len(open_results) == len(free)
        ):
            for result, payload in zip(open_results, free):
                result.finalize(payload, MatchConfidence.FUZZY)
                ctx.claim(payload, result.manifest_entry.target_path)
            return

        for result in open_results:
            result.finalize(None)

    # ------------------------------------------------------------------
    # Stage E: wynik i raport
    # ------------------------------------------------------------------

    def _build_result(
        self,
        ctx: ResolutionContext,
        parse_errors: list[Issue],
        structural: list[Issue],
    ) -> AssemblyResult:
        report = AssemblyReport(
            ambiguities=ctx.ambiguities,
            parse_errors=parse_errors,
            structural=structural,
        )
        outputs: list[tuple[str, str]] = []
        results: list[MatchResult] = list(ctx.results.values())

        for result in results:
            entry = result.manifest_entry
            payload = result.payload
            if payload is None:
                report.gaps.append(GapRecord(
                    target_path=entry.target_path,
                    title=entry.title,
                    category=entry.category,
                    order=entry.order,
                    line_no=entry.line_no,
                ))
                continue

            outputs.append((entry.target_path, payload.raw_text))
            report.chosen.append(ChosenRecord(
                target_path=entry.target_path,
                title=entry.title,
                category=entry.category,
                order=entry.order,
                sequence_index=payload.sequence_index,
                payload_title=payload.extracted_title,
                confidence=str(result.match_confidence),
                length=payload.length,
                source=payload.source,
            ))

            if len(result.candidates) > 1:
                report.conflicts.append(ConflictRecord(
                    target_path=entry.target_path,
                    chosen_sequence_index=payload.sequence_index,
                    policy=str(self._config.conflict_policy),
                    losers=tuple(
                        LoserRecord(
                            sequence_index=c.payload.sequence_index,
                            payload_title=c.payload.extracted_title,
                            confidence=str(c.confidence),
                            length=c.payload.length,
                            source=c.payload.source,
                        )
                        for c in result.candidates
                        if c.payload.sequence_index != payload.sequence_index
                    ),
                ))

        for payload in ctx.unclaimed_payloads():
            report.orphans.append(OrphanRecord(
                sequence_index=payload.sequence_index,
                payload_title=payload.extracted_title,
                length=payload.length,
                source=payload.source,
            ))

        return AssemblyResult(outputs=outputs, results=results, report=report)
