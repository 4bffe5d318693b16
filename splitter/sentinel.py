"""
splitter/sentinel.py — cięcie surowego korpusu na payloady po sentinelu.

Architektura:
  text → _iter_slices() (leniwie, str.find) → wycinki między sentinelami
  → _trim_blank_lines() → odrzucenie pustych / białych wycinków
  → scan_header() → RawPayload (sequence_index, raw_text, heading, declared_id)

Kluczowe API publiczne:
  SentinelSplitter(text, sentinel, ...)  iterowalny, restartowalny
  CorpusSplitter(sources, sentinel, ...) wiele plików, ciągła numeracja
  split_payloads(text, sentinel, ...)    generator (skrót)
  split_sources(sources, sentinel, ...)  generator dla wielu plików

Sentinel nigdy nie trafia do treści payloadu. Pusty wycinek (sentinel na
początku/końcu tekstu albo dwa sentinele obok siebie) jest pomijany i
raportowany przez structural_issues() — nigdy nie podnosi wyjątku.
"""

from __future__ import annotations

import re
from typing import Iterable, Iterator, Literal

from data_model.documents import RawPayload
from data_model.issues import ErrorCode, Issue

from .headings import DEFAULT_LOOKAHEAD, scan_header

DEFAULT_SENTINEL = "<!-- qa:split -->"

_SlicePosition = Literal["leading", "trailing", "inner"]

# Całe puste linie na brzegach wycinka (sentinel zwykle stoi w osobnej linii).
_LEADING_BLANK_RE = re.compile(r"\A(?:[ \t]*\r?\n)+")
_TRAILING_BLANK_RE = re.compile(r"(?:\r?\n[ \t]*)+\Z")


# ---------------------------------------------------------------------------
# Pojedynczy tekst
# ---------------------------------------------------------------------------

class SentinelSplitter:
    """
    Leniwa, skończona i restartowalna sekwencja RawPayload dla jednego tekstu.

    Każde wywołanie iter() skanuje tekst od nowa — wynik jest zawsze ten sam.

    Użycie:
        splitter = SentinelSplitter(text, "<!-- qa:split -->", source="qa-1.md")
        for payload in splitter:
            print(payload.sequence_index, payload.extracted_title)
        issues = splitter.structural_issues()
    """

    def __init__(
        self,
        text: str,
        sentinel: str = DEFAULT_SENTINEL,
        *,
        source: str = "",
        start_index: int = 0,
        lookahead: int = DEFAULT_LOOKAHEAD,
    ) -> None:
        if not sentinel:
            raise ValueError("Sentinel nie może być pusty.")
        if lookahead < 1:
            raise ValueError(f"Look-ahead musi być >= 1, podano {lookahead}.")
        self._text        = text
        self._sentinel    = sentinel
        self._source      = source
        self._start_index = start_index
        self._lookahead   = lookahead

    def __iter__(self) -> Iterator[RawPayload]:
        index = self._start_index
        for chunk in _iter_slices(self._text, self._sentinel):
            body = _trim_blank_lines(chunk)
            if not body.strip():
                continue
            heading, declared_id = scan_header(body, self._lookahead)
            yield RawPayload(
                sequence_index=index,
                raw_text=body,
                heading=heading,
                source=self._source,
                declared_id=declared_id,
            )
            index += 1

    def structural_issues(self) -> list[Issue]:
        """Lista odrzuconych (pustych) wycinków; pusta gdy w tekście brak sentinela."""
        chunks = list(_iter_slices(self._text, self._sentinel))
        if len(chunks) < 2:
            return []

        issues: list[Issue] = []
        last = len(chunks) - 1
        for slice_no, chunk in enumerate(chunks):
            if chunk.strip():
                continue
            position: _SlicePosition = (
                "leading" if slice_no == 0
                else "trailing" if slice_no == last
                else "inner"
            )
            issues.append(Issue(
                code=ErrorCode.EMPTY_SLICE,
                location=f"{self._source or '<corpus>'}#slice{slice_no}",
                message=f"Pusty wycinek ({position}) pominięty.",
                details={"source": self._source, "slice": slice_no, "position": position},
            ))
        return issues


# ---------------------------------------------------------------------------
# Wiele plików źródłowych
# ---------------------------------------------------------------------------

class CorpusSplitter:
    """
    Łączy kilka źródeł (nazwa, tekst) w jeden strumień payloadów.

    sequence_index jest ciągły między plikami, w kolejności podania źródeł.
    """

    def __init__(
        self,
        sources: Iterable[tuple[str, str]],
        sentinel: str = DEFAULT_SENTINEL,
        *,
        lookahead: int = DEFAULT_LOOKAHEAD,
    ) -> None:
        if not sentinel:
            raise ValueError("Sentinel nie może być pusty.")
        self._sources   = list(sources)
        self._sentinel  = sentinel
        self._lookahead = lookahead

    def __iter__(self) -> Iterator[RawPayload]:
        index = 0
        for name, text in self._sources:
            splitter = SentinelSplitter(
                text, self._sentinel,
                source=name, start_index=index, lookahead=self._lookahead,
            )
            for payload in splitter:
                yield payload
                index = payload.sequence_index + 1

    def structural_issues(self) -> list[Issue]:
        issues: list[Issue] = []
        for name, text in self._sources:
            splitter = SentinelSplitter(
                text, self._sentinel, source=name, lookahead=self._lookahead,
            )
            issues.extend(splitter.structural_issues())
        return issues


def split_payloads(
    text: str,
    sentinel: str = DEFAULT_SENTINEL,
    *,
    source: str = "",
    lookahead: int = DEFAULT_LOOKAHEAD,
) -> Iterator[RawPayload]:
    return iter(SentinelSplitter(text, sentinel, source=source, lookahead=lookahead))


def split_sources(
    sources: Iterable[tuple[str, str]],
    sentinel: str = DEFAULT_SENTINEL,
    *,
    lookahead: int = DEFAULT_LOOKAHEAD,
) -> Iterator[RawPayload]:
    return iter(CorpusSplitter(sources, sentinel, lookahead=lookahead))


# ---------------------------------------------------------------------------
# Pomocnicze
# ---------------------------------------------------------------------------

def _iter_slices(text: str, sentinel: str) -> Iterator[str]:
    """Wycinki tekstu pomiędzy kolejnymi wystąpieniami sentinela."""
    start = 0
    step = len(sentinel)
    while True:
        pos = text.find(sentinel, start)
        if pos == -1:
            yield text[start:]
            return
        yield text[start:pos]
        start = pos + step


def _trim_blank_lines(chunk: str) -> str:
    """Usuwa całe puste linie z początku i końca wycinka (wcięcia zostają)."""
    chunk = _LEADING_BLANK_RE.sub("", chunk)
    return _TRAILING_BLANK_RE.sub("", chunk)
