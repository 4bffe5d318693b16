"""Komenda: qac assemble — pełny przebieg: korpus + manifest → pliki tematów."""

from __future__ import annotations

import argparse
import pathlib

from rich import box
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from assembler import AssemblyReport, AssemblyResult, ConflictPolicy, run_pipeline
from manifest import ManifestIntegrityError
from qac._inputs import add_common_options, load_settings, read_sources, read_text
from qac._writer import report_json, write_outputs, write_report
from qac.commands.toc import show_issues

console = Console()
# komunikaty statusu przy --json-output idą na stderr
err_console = Console(stderr=True)

CONFIDENCE_STYLE: dict[str, str] = {
    "exact":      "green",
    "normalized": "cyan",
    "fuzzy":      "yellow",
}


# ---------------------------------------------------------------------------
# Wyświetlanie raportu
# ---------------------------------------------------------------------------

def _show_chosen(report: AssemblyReport) -> None:
    table = Table(
        box=box.SIMPLE_HEAD,
        show_header=True,
        header_style="bold white",
        row_styles=["", "dim"],
        expand=False,
    )
    table.add_column("CEL",     no_wrap=True, style="bold cyan")
    table.add_column("IDX",     justify="right", no_wrap=True)
    table.add_column("PEWNOŚĆ", no_wrap=True)
    table.add_column("LEN",     justify="right", no_wrap=True)
    table.add_column("TYTUŁ PAYLOADU", no_wrap=False, max_width=50)

    for r in report.chosen:
        style = CONFIDENCE_STYLE.get(r.confidence, "white")
        table.add_row(
            escape(r.target_path),
            str(r.sequence_index),
            f"[{style}]{r.confidence}[/{style}]",
            str(r.length),
            escape((r.payload_title or "-")[:80]),
        )
    console.print(table)


def _show_problems(report: AssemblyReport) -> None:
    if report.gaps:
        console.print(f"[yellow]Luki ({len(report.gaps)}):[/yellow] wpisy bez payloadu")
        for g in report.gaps:
            console.print(f"  [yellow]·[/yellow] {escape(g.target_path)}  [dim]{escape(g.title)}[/dim]")

    if report.orphans:
        console.print(f"[yellow]Sieroty ({len(report.orphans)}):[/yellow] payloady bez wpisu")
        for o in report.orphans:
            console.print(
                f"  [yellow]·[/yellow] #{o.sequence_index}  "
                f"{escape(o.payload_title or '(brak nagłówka)')}  [dim]{o.source}, {o.length} zn.[/dim]"
            )

    if report.conflicts:
        console.print(f"[magenta]Konflikty ({len(report.conflicts)}):[/magenta]")
        for c in report.conflicts:
            losers = ", ".join(f"#{l.sequence_index} ({l.length} zn.)" for l in c.losers)
            console.print(
                f"  [magenta]·[/magenta] {c.target_path}: wybrano #{c.chosen_sequence_index}, "
                f"odrzucono {losers}"
            )

    if report.ambiguities:
        console.print(f"[magenta]Niejednoznaczności ({len(report.ambiguities)}):[/magenta]")
        for a in report.ambiguities:
            console.print(
                f"  [magenta]·[/magenta] #{a.sequence_index} → {a.assigned_to} "
                f"[dim](pasował też: {', '.join(a.also_matched)})[/dim]"
            )

    if report.parse_errors:
        show_issues(report.parse_errors, "Linie manifestu pominięte")

    if report.structural:
        console.print(f"[dim]Pominięte puste wycinki: {len(report.structural)}[/dim]")


# ---------------------------------------------------------------------------
# Główna logika komendy
# ---------------------------------------------------------------------------

def _write_files(args: argparse.Namespace, result: AssemblyResult, log: Console) -> None:
    if args.out_dir:
        out_dir = pathlib.Path(args.out_dir)
        written, refused = write_outputs(result, out_dir)
        log.print(f"[green]Zapisano:[/green] {len(written)} plików w {out_dir}")
        for target in refused:
            log.print(f"  [red]·[/red] pominięto cel (ścieżka niebezpieczna lub niezapisywalna): {escape(target)}")

    if args.report:
        report_path = pathlib.Path(args.report)
        write_report(result, report_path)
        log.print(f"[green]Raport:[/green] {report_path}")


def run(args: argparse.Namespace) -> None:
    settings = load_settings(args)

    manifest_path = pathlib.Path(args.manifest)
    manifest_text = read_text(manifest_path, "manifest")
    sources       = read_sources(args.corpus)

    try:
        result = run_pipeline(
            sources,
            manifest_text,
            sentinel=settings.sentinel,
            lookahead=settings.lookahead,
            config=settings.assembler_config(),
            manifest_source=manifest_path.name,
        )
    except ManifestIntegrityError as exc:
        console.print(f"[red]BŁĄD integralności manifestu:[/red] {exc}")
        show_issues(exc.issues, "Duplikaty target_path", style="red")
        raise SystemExit(1)

    report = result.report

    if args.json_output:
        print(report_json(result), end="")
    else:
        console.print(
            f"Dopasowano [bold]{len(report.chosen)}[/bold] z "
            f"{len(result.results)} wpisów manifestu."
        )
        if args.show:
            _show_chosen(report)
        _show_problems(report)

    log = err_console if args.json_output else console
    _write_files(args, result, log)

    if report.is_clean:
        log.print("[green]OK[/green]  Brak luk i sierot.")
    else:
        log.print(
            f"[yellow]UWAGA[/yellow]  luki: {len(report.gaps)}, "
            f"sieroty: {len(report.orphans)}; sprawdź raport."
        )
        if args.strict:
            raise SystemExit(2)


# ---------------------------------------------------------------------------
# Rejestracja parsera
# ---------------------------------------------------------------------------

def add_parser(subparsers: argparse._SubParsersAction) -> None:  # type: ignore[type-arg]
    p = subparsers.add_parser(
        "assemble",
        help="Dopasowuje payloady korpusu do wpisów manifestu i zapisuje pliki.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        description="""
Tnie korpus po sentinelu, parsuje manifest i dopasowuje payloady do wpisów:

  1  Exact       równy tytuł / tytuł wpisu jako fraza / <!-- id: ... -->
  2  Normalized  overlap tokenów >= próg (domyślnie 0.6)
  3  Fuzzy       parowanie po kolejności, gdy zostało tyle samo wolnych
                 payloadów co wolnych wpisów

Przy kilku kandydatach wygrywa najdłuższy payload (--policy longest)
albo najwcześniejszy (--policy earliest).

Kody wyjścia: 0 — sukces (także z lukami/sierotami), 1 — błąd wejścia
lub duplikat celu w manifeście, 2 — luki/sieroty przy --strict.

Przykłady:
  qac assemble README.md qa-part1.md qa-part2.md --out-dir docs/
  qac assemble README.md korpus.md --report raport.json --show
  qac assemble README.md korpus.md --json-output --threshold 0.75
        """,
    )
    p.add_argument(
        "manifest",
        metavar="MANIFEST.md",
        help="Plik ze spisem treści.",
    )
    p.add_argument(
        "corpus",
        nargs="+",
        metavar="KORPUS.md",
        help="Pliki korpusu (kolejność = kolejność payloadów).",
    )
    add_common_options(p)
    p.add_argument(
        "--threshold",
        type=float,
        default=None,
        metavar="X",
        help="Próg overlapu tokenów dla tieru 2, w (0, 1] (domyślnie: 0.6).",
    )
    p.add_argument(
        "--policy",
        choices=[c.value for c in ConflictPolicy],
        default=None,
        help="Polityka rozstrzygania konfliktów (domyślnie: longest).",
    )
    p.add_argument(
        "--no-positional",
        action="store_true",
        help="Wyłącz fallback pozycyjny (tier 3).",
    )
    p.add_argument(
        "--out-dir", "-o",
        default=None,
        metavar="KATALOG",
        help="Katalog, do którego zapisać pliki tematów.",
    )
    p.add_argument(
        "--report", "-r",
        default=None,
        metavar="PLIK",
        help="Zapisz raport (chosen/gaps/orphans/conflicts) jako JSON.",
    )
    p.add_argument(
        "--json-output",
        action="store_true",
        help="Wypisz raport jako JSON na stdout.",
    )
    p.add_argument(
        "--show",
        action="store_true",
        help="Wyświetl tabelę dopasowań.",
    )
    p.add_argument(
        "--strict",
        action="store_true",
        help="Zakończ kodem 2, gdy są luki lub sieroty.",
    )
    p.set_defaults(func=run)
