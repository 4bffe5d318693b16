"""Wspólne dla komend: wczytywanie plików wejściowych i ustawień."""

from __future__ import annotations

import argparse
import pathlib

from rich.console import Console

from qac._config import Settings

console = Console()


def read_text(path: str | pathlib.Path, label: str) -> str:
    """Czyta plik UTF-8; brak pliku lub błąd dekodowania → SystemExit(1)."""
    p = pathlib.Path(path)
    if not p.is_file():
        console.print(f"[red]Brak pliku ({label}):[/red] {p}")
        raise SystemExit(1)
    try:
        return p.read_text(encoding="utf-8")
    except UnicodeDecodeError as exc:
        console.print(f"[red]Plik nie jest poprawnym UTF-8 ({label}):[/red] {p} — {exc}")
        raise SystemExit(1)


def read_sources(paths: list[str]) -> list[tuple[str, str]]:
    return [(pathlib.Path(p).name, read_text(p, "korpus")) for p in paths]


def load_settings(args: argparse.Namespace) -> Settings:
    """Ustawienia ze środowiska/.env, nadpisane flagami CLI."""
    try:
        settings = Settings.from_env(getattr(args, "env_file", None))
        return settings.override(
            sentinel             = getattr(args, "sentinel", None),
            lookahead            = getattr(args, "lookahead", None),
            similarity_threshold = getattr(args, "threshold", None),
            conflict_policy      = getattr(args, "policy", None),
            positional_fallback  = False if getattr(args, "no_positional", False) else None,
        )
    except ValueError as exc:
        console.print(f"[red]Błędna konfiguracja:[/red] {exc}")
        raise SystemExit(1)


def add_common_options(p: argparse.ArgumentParser) -> None:
    p.add_argument(
        "--sentinel",
        default=None,
        metavar="TEKST",
        help="Literał oddzielający dokumenty (domyślnie: QAC_SENTINEL lub wbudowany).",
    )
    p.add_argument(
        "--lookahead",
        type=int,
        default=None,
        metavar="N",
        help="Liczba linii, w których szukany jest nagłówek (domyślnie: 20).",
    )
    p.add_argument(
        "--env-file",
        default=None,
        metavar="PLIK",
        help="Plik .env z ustawieniami (domyślnie: .env w katalogu roboczym).",
    )
