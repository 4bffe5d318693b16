"""
splitter — cięcie korpusu Q&A na payloady po sentinelu.

Interfejs publiczny:
    SentinelSplitter  — jeden tekst → leniwa sekwencja RawPayload
    CorpusSplitter    — wiele plików → jeden strumień z ciągłą numeracją
    split_payloads    — generator (skrót dla SentinelSplitter)
    split_sources     — generator (skrót dla CorpusSplitter)
    scan_header       — (Heading, declared_id) z początku payloadu

Typowe użycie:
    from splitter import CorpusSplitter

    splitter = CorpusSplitter([("qa-1.md", text)], sentinel="<!-- qa:split -->")
    payloads = list(splitter)
    for issue in splitter.structural_issues():
        print(issue.code, issue.location)
"""

from .headings import DEFAULT_LOOKAHEAD, extract_heading, match_heading, scan_header
from .sentinel import (
    DEFAULT_SENTINEL,
    CorpusSplitter,
    SentinelSplitter,
    split_payloads,
    split_sources,
)

__all__ = [
    "DEFAULT_LOOKAHEAD",
    "DEFAULT_SENTINEL",
    "CorpusSplitter",
    "SentinelSplitter",
    "split_payloads",
    "split_sources",
    "scan_header",
    "extract_heading",
    "match_heading",
]
