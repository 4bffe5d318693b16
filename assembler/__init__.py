"""
assembler — dopasowanie payloadów korpusu do wpisów manifestu.

Interfejs publiczny:
    CorpusAssembler    — dopasowanie trzystopniowe + rozstrzyganie konfliktów
    run_pipeline       — splitter + manifest + asembler w jednym wywołaniu
    AssemblerConfig, ConflictPolicy — progi i polityki
    AssemblyResult, AssemblyReport  — wynik i ślad audytowy

Typowe użycie:
    from assembler import run_pipeline

    result = run_pipeline([("qa.md", corpus_text)], manifest_text)
    for target, text in result.outputs:
        write(target, text)
    if not result.report.is_clean:
        print(result.report.gaps, result.report.orphans)
"""

from .types import (
    DEFAULT_SIMILARITY_THRESHOLD,
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
from .context import ResolutionContext
from .matcher import CorpusAssembler
from .pipeline import run_pipeline

__all__ = [
    "DEFAULT_SIMILARITY_THRESHOLD",
    "AmbiguityRecord",
    "AssemblerConfig",
    "AssemblyReport",
    "AssemblyResult",
    "ChosenRecord",
    "ConflictPolicy",
    "ConflictRecord",
    "GapRecord",
    "LoserRecord",
    "OrphanRecord",
    "ResolutionContext",
    "CorpusAssembler",
    "run_pipeline",
]
