"""
data_model/manifest.py — wpisy spisu treści (TOC manifestu).

ManifestEntry to jedna linia TOC z linkiem. Niezmienniki:
  - target_path jest unikalny w całym manifeście,
  - (category, order) jest unikalne.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class ManifestEntry:
    category: str       # tekst ostatniego nagłówka sekcji ("" przed pierwszym)
    order: int          # 1-based pozycja w kategorii
    title: str          # tekst linku
    target_path: str    # cel linku (ścieżka względna lub kotwica)
    depth: int          # 1 = top-level, 2+ = zagnieżdżone
    line_no: int = 0    # 1-based numer linii w manifeście

    @property
    def key(self) -> tuple[str, int]:
        return self.category, self.order
