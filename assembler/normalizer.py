"""
assembler/normalizer.py — normalizacja tytułów przed dopasowaniem.

normalize_title():
  - trim, zwinięcie białych znaków, casefold
  - nie usuwa interpunkcji (porównanie dokładne ma być dokładne)

title_tokens():
  - ciągi \\w+ znormalizowanego tytułu (interpunkcja znika)

token_overlap_ratio():
  - 2·LCS(a, b) / (|a| + |b|) — uporządkowana część wspólna sekwencji tokenów
"""

from __future__ import annotations

import re
import unicodedata
from pathlib import PurePosixPath

_TOKEN_RE = re.compile(r"\w+", re.UNICODE)


def normalize_title(title: str) -> str:
    return " ".join(title.split()).casefold()


def title_tokens(title: str) -> tuple[str, ...]:
    return tuple(_TOKEN_RE.findall(normalize_title(title)))


def phrase_contains(haystack: tuple[str, ...], needle: tuple[str, ...]) -> bool:
    """Czy needle występuje w haystack jako ciągły fragment całych tokenów."""
    n = len(needle)
    if n == 0 or n > len(haystack):
        return False
    return any(haystack[i:i + n] == needle for i in range(len(haystack) - n + 1))


def token_overlap_ratio(a: tuple[str, ...], b: tuple[str, ...]) -> float:
    if not a or not b:
        return 0.0
    return 2.0 * _lcs_length(a, b) / (len(a) + len(b))


def slugify(text: str, max_len: int = 60) -> str:
    """Zamień tytuł na bezpieczny identyfikator ASCII."""
    text = unicodedata.normalize("NFKD", text)
    text = text.encode("ascii", "ignore").decode("ascii")
    text = re.sub(r"[^\w\s-]", "", text).strip().lower()
    text = re.sub(r"[\s_]+", "-", text)
    text = re.sub(r"-{2,}", "-", text)
    return text[:max_len].rstrip("-")


def target_stem(target_path: str) -> str:
    """'docs/01-change-detection.md' → '01-change-detection', '#hooks' → 'hooks'."""
    path = target_path.split("?", 1)[0].lstrip("#")
    if "#" in path:
        path = path.split("#", 1)[0] or path.split("#", 1)[1]
    return PurePosixPath(path).stem if path else ""


# ---------------------------------------------------------------------------
# Pomocnicze
# ---------------------------------------------------------------------------

def _lcs_length(a: tuple[str, ...], b: tuple[str, ...]) -> int:
    """Długość najdłuższego wspólnego podciągu (programowanie dynamiczne)."""
    prev = [0] * (len(b) + 1)
    for x in a:
        cur = [0]
        for j, y in enumerate(b, start=1):
            cur.append(prev[j - 1] + 1 if x == y else max(prev[j], cur[j - 1]))
        prev = cur
    return prev[-1]
