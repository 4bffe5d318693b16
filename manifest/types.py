"""
manifest/types.py — błędy manifestu.

ManifestError            — baza błędów manifestu
ManifestIntegrityError   — duplikat target_path (krytyczny: przerywa przebieg
                           przed asemblacją, bo mapa wyjściowa miałaby
                           nadpisane klucze)

Linie niesparsowane (MalformedLine) NIE są wyjątkami — trafiają jako Issue
do ManifestCatalog.malformed.
"""

from __future__ import annotations

from data_model.issues import Issue


class ManifestError(Exception):
    """Błąd manifestu."""


class ManifestIntegrityError(ManifestError):
    """
    Manifest narusza unikalność target_path.

    Atrybuty:
      issues — lista Issue(code=DUPLICATE_TARGET), po jednym na każde
               powtórne wystąpienie
    """

    def __init__(self, issues: list[Issue]) -> None:
        self.issues = issues
        targets = sorted({str((i.details or {}).get("target_path", "?")) for i in issues})
        super().__init__(
            f"Zduplikowane target_path w manifeście ({len(issues)}): {', '.join(targets)}"
        )
