"""Komenda: qac split — cięcie korpusu na payloady po sentinelu."""

from __future__ import annotations

import argparse
import json

from rich import box
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from data_model.documents import HeadingFound, PayloadStream
from qac._inputs import add_common_options, load_settings, read_sources
from splitter.sentinel import CorpusSplitter

console = Console()


# ---------------------------------------------------------------------------
# Wyświetlanie w terminalu
# ---------------------------------------------------------------------------

def _show_table(payloads: PayloadStream) -> None:
    if not payloads:
        console.print("[yellow]Brak payloadów.[/yellow]")
        return

    table = Table(
        box=box.SIMPLE_HEAD,
        show_header=True,
        header_style="bold white",
        row_styles=["", "dim"],
        expand=False,
    )
    table.add_column("IDX",    justify="right", no_wrap=True, style="bold cyan")
    table.add_column("ŹRÓDŁO", no_wrap=True, style="dim")
    table.add_column("LEN",    justify="right", no_wrap=True)
    table.add_column("H",      justify="center", no_wrap=True)
    table.add_column("ID",     no_wrap=True, style="magenta")
    table.add_column("TYTUŁ",  no_wrap=False, max_width=60)

    for p in payloads:
        match p.heading:
            case HeadingFound(text=text, level=level):
                title, lvl = escape(text[:80]), str(level)
            case _:
                title, lvl = "[yellow](brak nagłówka)[/yellow]", "-"
        table.add_row(
            str(p.sequence_index),
            p.source or "-",
            str(p.length),
            lvl,
            p.declared_id or "-",
            title,
        )

    console.print()
    console.print(table)
    console.print(f"  [dim]{len(payloads)} payloadów[/dim]\n")


# ---------------------------------------------------------------------------
# Główna logika komendy
# ---------------------------------------------------------------------------

def run(args: argparse.Namespace) -> None:
    settings = load_settings(args)
    sources  = read_sources(args.corpus)

    splitter = CorpusSplitter(sources, settings.sentinel, lookahead=settings.lookahead)
    payloads = list(splitter)
    issues   = splitter.structural_issues()

    if args.json_output:
        out = {
            "payloads": [
                {
                    "sequence_index": p.sequence_index,
                    "source": p.source,
                    "length": p.length,
                    "title": p.extracted_title,
                    "declared_id": p.declared_id,
                }
                for p in payloads
            ],
            "structural": [i.to_dict() for i in issues],
        }
        print(json.dumps(out, ensure_ascii=False, indent=2))
        return

    console.print(
        f"Znaleziono [bold]{len(payloads)}[/bold] payloadów "
        f"w {len(sources)} plik(ach)."
    )
    _show_table(payloads)

    if issues:
        console.print("[yellow]Pominięte puste wycinki:[/yellow]")
        for i in issues:
            console.print(f"  [yellow]·[/yellow] {i.location}  [dim]{i.message}[/dim]")


# ---------------------------------------------------------------------------
# Rejestracja parsera
# ---------------------------------------------------------------------------

def add_parser(subparsers: argparse._SubParsersAction) -> None:  # type: ignore[type-arg]
    p = subparsers.add_parser(
        "split",
        help="Tnie korpus na payloady po sentinelu i pokazuje ich tytuły.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        description="""
Tnie jeden lub więcej plików korpusu na payloady (dokumenty Q&A)
w miejscach wystąpienia sentinela i wyświetla tabelę z tytułami.

Przykłady:
  qac split qa-part1.md qa-part2.md
  qac split korpus.md --sentinel "<!-- NEXT -->"
  qac split korpus.md --json-output
        """,
    )
    p.add_argument(
        "corpus",
        nargs="+",
        metavar="KORPUS.md",
        help="Pliki korpusu (kolejność = kolejność payloadów).",
    )
    add_common_options(p)
    p.add_argument(
        "--json-output",
        action="store_true",
        help="Wypisz listę payloadów jako JSON na stdout.",
    )
    p.set_defaults(func=run)
