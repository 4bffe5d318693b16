"""
assembler/pipeline.py — pełny przebieg: splitter + manifest → asembler.

Splitter i parser manifestu nie współdzielą stanu; asembler jest punktem
złączenia i startuje dopiero po obu. Cały przebieg jest deterministyczny —
te same wejścia dają identyczne outputs i identyczny raport.
"""

from __future__ import annotations

from typing import Iterable

from manifest.resolver import parse_manifest
from splitter.headings import DEFAULT_LOOKAHEAD
from splitter.sentinel import DEFAULT_SENTINEL, CorpusSplitter

from .matcher import CorpusAssembler
from .types import AssemblerConfig, AssemblyResult


def run_pipeline(
    sources: Iterable[tuple[str, str]],
    manifest_text: str,
    *,
    sentinel: str = DEFAULT_SENTINEL,
    lookahead: int = DEFAULT_LOOKAHEAD,
    config: AssemblerConfig | None = None,
    manifest_source: str = "manifest",
) -> AssemblyResult:
    """
    Tnie korpus, parsuje manifest i składa wynik.

    Args:
        sources:         pary (nazwa_pliku, tekst) w kolejności korpusu
        manifest_text:   treść TOC (markdown)
        sentinel:        literał oddzielający dokumenty
        lookahead:       okno szukania nagłówka (linie)
        config:          progi i polityki asemblera
        manifest_source: nazwa manifestu w lokalizacjach Issue

    Raises:
        ManifestIntegrityError — duplikat target_path; przebieg przerwany
                                 przed asemblacją.
    """
    catalog = parse_manifest(manifest_text, manifest_source)

    splitter = CorpusSplitter(sources, sentinel, lookahead=lookahead)
    payloads = list(splitter)

    return CorpusAssembler(config).assemble(
        catalog.entries,
        payloads,
        parse_errors=catalog.malformed,
        structural=splitter.structural_issues(),
    )
