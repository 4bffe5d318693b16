"""
data_model — struktury danych asemblera korpusu Q&A.

Użycie:
  from data_model import RawPayload, ManifestEntry, MatchResult, ...

Moduły:
  documents — RawPayload, HeadingFound, NoHeadingFound, Heading, PayloadStream
  manifest  — ManifestEntry
  matching  — MatchConfidence, Candidate, MatchResult
  issues    — ErrorCode, Issue

Cykl życia:
  RawPayload i ManifestEntry powstają raz na przebieg i nie są mutowane;
  MatchResult akumuluje kandydatów aż do finalize().
"""

from .documents import (
    HeadingFound,
    NoHeadingFound,
    Heading,
    RawPayload,
    PayloadStream,
)
from .manifest import ManifestEntry
from .issues import ErrorCode, Issue
from .matching import (
    MatchConfidence,
    Candidate,
    MatchResult,
)

__all__ = [
    # documents
    "HeadingFound",
    "NoHeadingFound",
    "Heading",
    "RawPayload",
    "PayloadStream",
    # manifest
    "ManifestEntry",
    # matching
    "MatchConfidence",
    "Candidate",
    "MatchResult",
    # issues
    "ErrorCode",
    "Issue",
]
