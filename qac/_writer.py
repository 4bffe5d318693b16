"""Zapis wyniku asemblacji na dysk — pliki tematów i raport JSON."""

from __future__ import annotations

import json
import pathlib
from posixpath import normpath
from typing import Any

from assembler.types import AssemblyResult


def target_to_relpath(target_path: str) -> pathlib.PurePosixPath | None:
    """
    Zamienia target_path z manifestu na bezpieczną ścieżkę względną.

      "docs/01-intro.md"        → docs/01-intro.md
      "#what-is-angular"        → what-is-angular.md
      "hooks.md#ngoninit"       → hooks.md
      "/etc/passwd", "../x.md"  → None (poza katalogiem wyjściowym)
      "docs/"                   → None (katalog, nie plik)
    """
    target = target_path.strip()
    if target.startswith("#"):
        anchor = target[1:].strip()
        return pathlib.PurePosixPath(f"{anchor}.md") if anchor and "/" not in anchor else None

    target = target.split("#", 1)[0].split("?", 1)[0].replace("\\", "/")
    if not target or target.startswith("/") or target.endswith("/") or "://" in target:
        return None

    norm = normpath(target)
    if norm == "." or norm == ".." or norm.startswith("../"):
        return None
    return pathlib.PurePosixPath(norm)


def write_outputs(result: AssemblyResult, out_dir: pathlib.Path) -> tuple[list[pathlib.Path], list[str]]:
    """
    Zapisuje treści payloadów pod ścieżkami z manifestu.

    Zwraca (zapisane_pliki, odrzucone_target_path). Odrzucony jest cel
    niebezpieczny, powtórzony albo taki, którego nie da się zapisać (OSError).
    Treść kończy się dokładnie jednym znakiem nowej linii — ponowny zapis tych
    samych danych daje identyczne bajty.
    """
    written: list[pathlib.Path] = []
    refused: list[str] = []
    seen: set[pathlib.PurePosixPath] = set()

    for target, text in result.outputs:
        rel = target_to_relpath(target)
        # dwa cele wskazujące ten sam plik (np. a.md#x i a.md#y): zapisuje pierwszy
        if rel is None or rel in seen:
            refused.append(target)
            continue
        seen.add(rel)
        path = out_dir.joinpath(*rel.parts)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(text.rstrip("\n") + "\n", encoding="utf-8", newline="")
        except OSError:
            # np. plik "docs" blokuje katalog "docs/" albo cel jest istniejącym katalogiem
            refused.append(target)
            continue
        written.append(path)

    return written, refused


def report_json(result: AssemblyResult) -> str:
    data: dict[str, Any] = result.report.to_dict()
    return json.dumps(data, ensure_ascii=False, indent=2) + "\n"


def write_report(result: AssemblyResult, path: pathlib.Path) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(report_json(result), encoding="utf-8", newline="")
