"""
manifest/resolver.py — parsowanie spisu treści (TOC) do katalogu wpisów.

ManifestCatalog przechowuje wpisy w kolejności źródła oraz indeks:
  _by_target: target_path -> ManifestEntry

Rozpoznawane linie:
  wpis        — element listy (-, *, +, 1., 1), 1.2.) lub wiersz tabeli
                zawierający link [tytuł](cel)
  strukturalne — puste, komentarze HTML, bloki kodu, nagłówki (nowa
                kategoria), linie poziome, nagłówek i separator tabeli
  błędne      — wszystko inne → Issue(MALFORMED_LINE), parsowanie trwa dalej

Duplikat target_path → ManifestIntegrityError (po przejściu całego pliku,
ze wszystkimi duplikatami naraz).
"""

from __future__ import annotations

import pathlib
import re
from typing import Iterator

from data_model.issues import ErrorCode, Issue
from data_model.manifest import ManifestEntry
from splitter.headings import match_heading

from .types import ManifestIntegrityError

# Link markdown; tytuł może zawierać zagnieżdżone [..], cel bez spacji albo <...>.
_LINK_RE = re.compile(
    r"\[(?P<title>(?:[^\[\]]|\[[^\]]*\])+)\]"
    r"\(\s*(?P<target><[^>]+>|[^)\s]+)(?:\s+[\"'(][^)]*)?\s*\)"
)

# Element listy: punktor albo numer (1.  1)  1.2  1.2.)
_LIST_RE = re.compile(
    r"^(?P<indent>[ \t]*)"
    r"(?:[-*+]|(?P<num>\d+(?:\.\d+)+\.?|\d+[.)]))"
    r"[ \t]+(?P<rest>.*)$"
)

_TABLE_ROW_RE = re.compile(r"^\s*\|.*\|\s*$")
_TABLE_SEP_RE = re.compile(r"^\s*\|?\s*:?-{3,}:?\s*(?:\|\s*:?-{3,}:?\s*)*\|?\s*$")
_HR_RE        = re.compile(r"^ {0,3}([-*_])(?:[ \t]*\1){2,}[ \t]*$")
_FENCE_RE     = re.compile(r"^ {0,3}(`{3,}|~{3,})")
_BARE_LINK_RE = re.compile(r"^\s*" + _LINK_RE.pattern + r"\s*$")

_INDENT_WIDTH = 2


# ---------------------------------------------------------------------------
# ManifestCatalog
# ---------------------------------------------------------------------------

class ManifestCatalog:
    """
    Uporządkowany katalog oczekiwanych tematów.

    Atrybuty publiczne:
      entries   — list[ManifestEntry] w kolejności manifestu
      malformed — list[Issue]: linie, których nie udało się sparsować
    """

    def __init__(self, entries: list[ManifestEntry], malformed: list[Issue]) -> None:
        self.entries   = entries
        self.malformed = malformed
        self._by_target: dict[str, ManifestEntry] = {e.target_path: e for e in entries}

    def __iter__(self) -> Iterator[ManifestEntry]:
        return iter(self.entries)

    def __len__(self) -> int:
        return len(self.entries)

    def lookup(self, target_path: str) -> ManifestEntry | None:
        """Szuka wpisu po target_path."""
        return self._by_target.get(target_path)

    def categories(self) -> list[str]:
        """Kategorie w kolejności pierwszego wystąpienia (tylko z wpisami)."""
        seen: dict[str, None] = {}
        for e in self.entries:
            seen.setdefault(e.category, None)
        return list(seen)

    # ------------------------------------------------------------------
    # Konstruktory fabryczne
    # ------------------------------------------------------------------

    @classmethod
    def from_text(cls, text: str, source: str = "manifest") -> "ManifestCatalog":
        return parse_manifest(text, source)

    @classmethod
    def from_file(cls, path: str | pathlib.Path) -> "ManifestCatalog":
        """Ładuje manifest z pliku markdown (UTF-8)."""
        p = pathlib.Path(path)
        return parse_manifest(p.read_text(encoding="utf-8"), p.name)


# ---------------------------------------------------------------------------
# Parsowanie
# ---------------------------------------------------------------------------

def parse_manifest(text: str, source: str = "manifest") -> ManifestCatalog:
    """
    Parsuje TOC w markdown i zwraca ManifestCatalog.

    Raises:
        ManifestIntegrityError — gdy dwa wpisy mają ten sam target_path.
    """
    lines = text.splitlines()
    entries: list[ManifestEntry] = []
    malformed: list[Issue] = []
    duplicates: list[Issue] = []
    first_seen: dict[str, int] = {}

    category = ""
    # licznik per kategoria: powracający nagłówek kontynuuje numerację
    counters: dict[str, int] = {}
    in_comment = False
    fence: str | None = None

    for idx, line in enumerate(lines):
        line_no = idx + 1
        stripped = line.strip()
        location = f"{source}:{line_no}"

        # --- komentarze HTML (także wieloliniowe) --------------------------
        if in_comment:
            if "-->" in line:
                in_comment = False
            continue
        if stripped.startswith("<!--"):
            in_comment = "-->" not in stripped[4:]
            continue

        # --- bloki kodu ---------------------------------------------------
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

        if not stripped or _HR_RE.match(line) or _TABLE_SEP_RE.match(line):
            continue

        # --- nagłówek = nowa kategoria ------------------------------------
        heading = match_heading(line)
        if heading is not None:
            category = heading[1]
            continue

        parsed = _parse_entry_line(line, lines, idx)
        if parsed is None:
            continue  # nagłówek tabeli
        if isinstance(parsed, str):
            malformed.append(Issue(
                code=ErrorCode.MALFORMED_LINE,
                location=location,
                message=parsed,
                details={"line": line},
            ))
            continue

        title, target, depth = parsed
        if target in first_seen:
            duplicates.append(Issue(
                code=ErrorCode.DUPLICATE_TARGET,
                location=location,
                message=(
                    f"target_path '{target}' już zadeklarowany w linii "
                    f"{first_seen[target]}."
                ),
                details={"target_path": target, "first_line": first_seen[target]},
            ))
            continue
        first_seen[target] = line_no

        order = counters[category] = counters.get(category, 0) + 1
        entries.append(ManifestEntry(
            category=category,
            order=order,
            title=title,
            target_path=target,
            depth=depth,
            line_no=line_no,
        ))

    if duplicates:
        raise ManifestIntegrityError(duplicates)

    return ManifestCatalog(entries, malformed)


def _parse_entry_line(
    line: str,
    lines: list[str],
    idx: int,
) -> tuple[str, str, int] | str | None:
    """
    Zwraca:
      (title, target, depth) — poprawny wpis
      str                    — opis błędu (linia nieparsowalna)
      None                   — nagłówek tabeli (linia strukturalna)
    """
    if _TABLE_ROW_RE.match(line):
        link = _LINK_RE.search(line)
        if link is not None:
            return _clean_title(link.group("title")), _clean_target(link.group("target")), 1
        if _is_table_header(lines, idx):
            return None
        return "Wiersz tabeli bez linku [tytuł](cel)."

    m = _LIST_RE.match(line)
    if m:
        link = _LINK_RE.search(m.group("rest"))
        if link is None:
            return "Element listy bez linku [tytuł](cel)."
        num = m.group("num")
        if num and "." in num.rstrip("."):
            depth = len(num.rstrip(".").split("."))
        else:
            depth = _indent_level(m.group("indent")) + 1
        return _clean_title(link.group("title")), _clean_target(link.group("target")), depth

    m = _BARE_LINK_RE.match(line)
    if m:
        return _clean_title(m.group("title")), _clean_target(m.group("target")), 1

    return "Linia nie zawiera wpisu (tytuł, link)."


def _is_table_header(lines: list[str], idx: int) -> bool:
    """Wiersz tabeli, po którym (pomijając puste linie) stoi separator."""
    for nxt in lines[idx + 1:]:
        if not nxt.strip():
            continue
        return bool(_TABLE_SEP_RE.match(nxt))
    return False


def _indent_level(indent: str) -> int:
    level = 0
    spaces = 0
    for ch in indent:
        if ch == "\t":
            level += 1
        else:
            spaces += 1
    return level + spaces // _INDENT_WIDTH


def _clean_title(title: str) -> str:
    """Usuwa otaczające wyróżnienia (**, __, *) i nadmiarowe spacje."""
    title = title.strip().strip("*_").strip()
    return " ".join(title.split())


def _clean_target(target: str) -> str:
    if target.startswith("<") and target.endswith(">"):
        target = target[1:-1]
    return target.strip()
