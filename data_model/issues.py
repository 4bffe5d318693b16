"""
data_model/issues.py — kody problemów i rekord pojedynczego problemu.

Problemy nie są wyjątkami: są zbierane do raportu i zwracane razem z wynikiem.
Jedynym wyjątkiem krytycznym jest naruszenie integralności manifestu
(duplikat target_path) — patrz manifest.ManifestIntegrityError.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import Any


class ErrorCode(StrEnum):
    """Stałe kody problemów (splitter / manifest)."""

    # Splitter: pusty wycinek między sentinelami (odzyskiwalny)
    EMPTY_SLICE       = "W_EMPTY_SLICE"

    # Manifest: linia bez (tytuł, link) (odzyskiwalny)
    MALFORMED_LINE    = "E_MALFORMED_LINE"

    # Manifest: powtórzony target_path (krytyczny)
    DUPLICATE_TARGET  = "E_DUPLICATE_TARGET"


@dataclass(frozen=True, slots=True)
class Issue:
    """
    Pojedynczy problem wykryty podczas przebiegu.

    - code:     stały identyfikator klasy problemu (ErrorCode)
    - location: miejsce, np. "manifest:12" albo "corpus.md#slice3"
    - message:  czytelny opis
    - details:  opcjonalny słownik z dodatkowymi danymi (serializowalny do JSON)
    """

    code: ErrorCode
    location: str
    message: str
    details: dict[str, Any] | None = None

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {
            "code": str(self.code),
            "location": self.location,
            "message": self.message,
        }
        if self.details:
            out["details"] = self.details
        return out
