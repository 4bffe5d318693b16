"""Komenda: qac toc — parsowanie manifestu (TOC) i raport linii błędnych."""

from __future__ import annotations

import argparse
import dataclasses
import json
import pathlib

from rich import box
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from data_model.issues import Issue
from manifest import ManifestCatalog, ManifestIntegrityError, parse_manifest
from qac._inputs import read_text

console = Console()


def _show_catalog(catalog: ManifestCatalog) -> None:
    if not len(catalog):
        console.print("[yellow]Manifest nie zawiera wpisów.[/yellow]")
        return

    table = Table(
        box=box.SIMPLE_HEAD,
        show_header=True,
        header_style="bold white",
        row_styles=["", "dim"],
        expand=False,
    )
    table.add_column("KATEGORIA", no_wrap=True, style="bold")
    table.add_column("#",         justify="right", no_wrap=True)
    table.add_column("GŁ",        justify="right", no_wrap=True, style="dim")
    table.add_column("TYTUŁ",     no_wrap=False, max_width=50)
    table.add_column("CEL",       no_wrap=True, style="cyan")

    for e in catalog:
        indent = "  " * (e.depth - 1)
        table.add_row(
            escape(e.category or "-"), str(e.order), str(e.depth),
            indent + escape(e.title), escape(e.target_path),
        )

    console.print()
    console.print(table)
    console.print(
        f"  [dim]{len(catalog)} wpisów w {len(catalog.categories())} kategoriach[/dim]\n"
    )


def show_issues(issues: list[Issue], title: str, style: str = "yellow") -> None:
    table = Table(box=box.SIMPLE, show_header=True, header_style="bold", title=title)
    table.add_column("Kod",      style=style, no_wrap=True)
    table.add_column("Miejsce",  style="cyan", no_wrap=True)
    table.add_column("Komunikat")
    for i in issues:
        table.add_row(str(i.code), escape(i.location), escape(i.message))
    console.print(table)


def run(args: argparse.Namespace) -> None:
    path = pathlib.Path(args.manifest)
    text = read_text(path, "manifest")

    try:
        catalog = parse_manifest(text, path.name)
    except ManifestIntegrityError as exc:
        console.print(f"[red]BŁĄD[/red]  {exc}")
        show_issues(exc.issues, "Duplikaty target_path", style="red")
        raise SystemExit(1)

    if args.json_output:
        out = {
            "entries": [dataclasses.asdict(e) for e in catalog],
            "malformed": [i.to_dict() for i in catalog.malformed],
        }
        print(json.dumps(out, ensure_ascii=False, indent=2))
        return

    _show_catalog(catalog)

    if catalog.malformed:
        console.print(
            f"[yellow]Pominięto {len(catalog.malformed)} linii, "
            f"których nie udało się sparsować.[/yellow]"
        )
        show_issues(catalog.malformed, "Linie błędne")
    else:
        console.print("[green]OK[/green]  Wszystkie linie manifestu sparsowane.")


def add_parser(subparsers: argparse._SubParsersAction) -> None:  # type: ignore[type-arg]
    p = subparsers.add_parser(
        "toc",
        help="Parsuje manifest (TOC) i wyświetla wpisy oraz linie błędne.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        description="""
Parsuje spis treści w markdown: nagłówki wyznaczają kategorie, elementy
list i wiersze tabel z linkiem [tytuł](cel) są wpisami.

Linie bez linku są raportowane, ale nie przerywają parsowania.
Duplikat celu (target_path) kończy komendę kodem 1.

Przykłady:
  qac toc README.md
  qac toc README.md --json-output
        """,
    )
    p.add_argument(
        "manifest",
        metavar="MANIFEST.md",
        help="Plik ze spisem treści.",
    )
    p.add_argument(
        "--json-output",
        action="store_true",
        help="Wypisz wpisy i linie błędne jako JSON na stdout.",
    )
    p.set_defaults(func=run)
