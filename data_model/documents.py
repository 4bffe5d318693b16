"""
data_model/documents.py — model payloadów korpusu (dokumentów Q&A).

RawPayload odpowiada jednemu wycinkowi surowego tekstu pomiędzy dwoma
sentinelami (lub początkiem/końcem tekstu). Kolekcja payloadów w kolejności
źródła tworzy PayloadStream.

Nagłówek payloadu jest wariantem:
  HeadingFound(text, level, line_no) — pierwszy nagłówek markdown w look-ahead
  NoHeadingFound()                   — brak nagłówka w look-ahead
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TypeAlias


@dataclass(frozen=True, slots=True)
class HeadingFound:
    text: str       # tekst nagłówka bez znaczników '#'
    level: int      # 1..6 (liczba '#')
    line_no: int    # 1-based numer linii w payloadzie


@dataclass(frozen=True, slots=True)
class NoHeadingFound:
    pass


Heading: TypeAlias = HeadingFound | NoHeadingFound


@dataclass(frozen=True, slots=True)
class RawPayload:
    sequence_index: int          # 0-based, kolejność wstawienia (stabilna)
    raw_text: str                # pełny tekst wycinka (bez sentinela)
    heading: Heading             # wynik ekstrakcji tytułu
    source: str = ""             # nazwa pliku źródłowego (diagnostyka)
    declared_id: str | None = None  # znacznik <!-- id: ... --> jeśli obecny

    @property
    def extracted_title(self) -> str | None:
        """Tekst pierwszego nagłówka albo None (tylko do raportów)."""
        match self.heading:
            case HeadingFound(text=text):
                return text
            case _:
                return None

    @property
    def length(self) -> int:
        return len(self.raw_text)


# Payloady w kolejności źródła.
PayloadStream: TypeAlias = list[RawPayload]
