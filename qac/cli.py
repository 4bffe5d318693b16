"""
qac — składanie korpusu Q&A według manifestu (spisu treści).

Użycie:
  qac <komenda> [opcje]

Komendy:
  split      Tnie korpus po sentinelu i pokazuje payloady z tytułami.
  toc        Parsuje manifest (TOC) i raportuje linie błędne.
  assemble   Dopasowuje payloady do wpisów manifestu, zapisuje pliki i raport.
"""

from __future__ import annotations

import argparse
import sys

# Windows: terminal może używać cp1252, więc wymuszamy UTF-8, żeby polskie znaki
# w tekstach pomocy argparse były wypisywane poprawnie.
if hasattr(sys.stdout, "reconfigure"):
    sys.stdout.reconfigure(encoding="utf-8", errors="replace")
if hasattr(sys.stderr, "reconfigure"):
    sys.stderr.reconfigure(encoding="utf-8", errors="replace")

from qac.commands import assemble as cmd_assemble
from qac.commands import split as cmd_split
from qac.commands import toc as cmd_toc

__version__ = "0.1.0"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="qac",
        description="qac — składanie korpusu Q&A według manifestu.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--version", action="version", version=f"qac {__version__}"
    )

    subparsers = parser.add_subparsers(
        title="komendy",
        metavar="<komenda>",
        dest="command",
    )
    subparsers.required = True

    cmd_split.add_parser(subparsers)
    cmd_toc.add_parser(subparsers)
    cmd_assemble.add_parser(subparsers)

    return parser


def main(argv: list[str] | None = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)
    args.func(args)


if __name__ == "__main__":
    main()
