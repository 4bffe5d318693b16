"""
splitter/headings.py — rozpoznawanie nagłówka i identyfikatora payloadu.

Skanujemy tylko początek payloadu (look-ahead liczony od pierwszej niepustej
linii). Wynik:
  - Heading     : HeadingFound(text, level, line_no) | NoHeadingFound()
  - declared_id : identyfikator z linii <!-- id: ... --> lub None

Linie wewnątrz bloków kodu (``` / ~~~) nie są ani nagłówkami, ani znacznikami
— komentarz "# ..." w bloku bash nie jest tytułem.
"""

from __future__ import annotations

import re

from data_model.documents import Heading, HeadingFound, NoHeadingFound

DEFAULT_LOOKAHEAD = 20

# Nagłówek ATX: 1–6 znaków '#', spacja, niepusty tekst; opcjonalny ciąg
# zamykających '#' poprzedzony spacją jest odcinany.
_ATX_RE = re.compile(r"^ {0,3}(#{1,6})[ \t]+(.*?)(?:[ \t]+#+)?[ \t]*$")

# Otwarcie/zamknięcie bloku kodu.
_FENCE_RE = re.compile(r"^ {0,3}(`{3,}|~{3,})")

# Znacznik identyfikatora: <!-- id: change-detection --> lub <!-- target: ... -->
_DECLARED_ID_RE = re.compile(
    r"^\s*<!--\s*(?:id|target)\s*:\s*(\S+?)\s*-->\s*$",
    re.IGNORECASE,
)


def scan_header(text: str, lookahead: int = DEFAULT_LOOKAHEAD) -> tuple[Heading, str | None]:
    """
    Zwraca (nagłówek, declared_id) dla początku payloadu.

    Pierwszy pasujący nagłówek wygrywa; szukanie znacznika id trwa do końca
    okna look-ahead nawet po znalezieniu nagłówka.
    """
    heading: Heading = NoHeadingFound()
    declared: str | None = None
    fence: str | None = None
    seen = 0

    for line_no, line in enumerate(text.splitlines(), start=1):
        if seen == 0 and not line.strip():
            continue  # wiodące puste linie nie liczą się do okna
        seen += 1
        if seen > lookahead:
            break

        m = _FENCE_RE.match(line)
        if m:
            marker = m.group(1)
            if fence is None:
                fence = marker[0] * 3
            elif marker.startswith(fence):
                fence = None
            continue
        if fence is not None:
            continue

        if isinstance(heading, NoHeadingFound):
            found = match_heading(line)
            if found is not None:
                level, title = found
                heading = HeadingFound(text=title, level=level, line_no=line_no)
                continue

        if declared is None:
            m = _DECLARED_ID_RE.match(line)
            if m:
                declared = m.group(1)

    return heading, declared


def match_heading(line: str) -> tuple[int, str] | None:
    """Zwraca (level, tekst) gdy linia jest nagłówkiem ATX z niepustym tekstem."""
    m = _ATX_RE.match(line)
    if not m:
        return None
    title = m.group(2).strip()
    if not title:
        return None
    return len(m.group(1)), title


def extract_heading(text: str, lookahead: int = DEFAULT_LOOKAHEAD) -> Heading:
    return scan_header(text, lookahead)[0]
