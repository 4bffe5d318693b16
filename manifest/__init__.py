"""
manifest — parser spisu treści (TOC) korpusu Q&A.

Interfejs publiczny:
    parse_manifest          — tekst markdown → ManifestCatalog
    ManifestCatalog         — uporządkowane wpisy + lista linii błędnych
    ManifestError           — baza błędów manifestu
    ManifestIntegrityError  — duplikat target_path (krytyczny)

Typowe użycie:
    from manifest import ManifestCatalog, ManifestIntegrityError

    try:
        catalog = ManifestCatalog.from_file("README.md")
    except ManifestIntegrityError as exc:
        for issue in exc.issues:
            print(issue.location, issue.message)
    else:
        for issue in catalog.malformed:
            print(issue.code, issue.location)
"""

from .types import ManifestError, ManifestIntegrityError
from .resolver import ManifestCatalog, parse_manifest

__all__ = [
    "ManifestError",
    "ManifestIntegrityError",
    "ManifestCatalog",
    "parse_manifest",
]
