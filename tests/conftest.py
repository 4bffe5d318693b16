"""Wspólne fixture'y: budowanie payloadów, wpisów manifestu i korpusów."""

from __future__ import annotations

import pytest

from data_model import ManifestEntry, RawPayload
from splitter import DEFAULT_SENTINEL, scan_header


@pytest.fixture
def sentinel() -> str:
    return DEFAULT_SENTINEL


@pytest.fixture
def make_payload():
    """Fabryka RawPayload; nagłówek i declared_id wyliczane z treści."""

    def _make(index: int, text: str, source: str = "qa.md") -> RawPayload:
        heading, declared_id = scan_header(text)
        return RawPayload(
            sequence_index=index,
            raw_text=text,
            heading=heading,
            source=source,
            declared_id=declared_id,
        )

    return _make


@pytest.fixture
def make_entries():
    """Fabryka listy ManifestEntry z samych tytułów (jedna kategoria)."""

    def _make(titles: list[str], category: str = "Podstawy") -> list[ManifestEntry]:
        return [
            ManifestEntry(
                category=category,
                order=n,
                title=title,
                target_path=f"{n:02d}-{title.lower().replace(' ', '-')}.md",
                depth=1,
                line_no=n + 1,
            )
            for n, title in enumerate(titles, start=1)
        ]

    return _make


@pytest.fixture
def join_corpus(sentinel):
    """Skleja bloki sentinelem w osobnych liniach, jak w plikach korpusu."""

    def _join(blocks: list[str]) -> str:
        return f"\n{sentinel}\n".join(blocks)

    return _join


@pytest.fixture
def angular_manifest() -> str:
    return """# Angular Q&A

## Podstawy

1. [Change Detection](docs/01-change-detection.md)
2. [Decorators](docs/02-decorators.md)
3. [Lifecycle Hooks](docs/03-lifecycle-hooks.md)
"""


@pytest.fixture
def angular_corpus(join_corpus) -> str:
    return join_corpus([
        "# Angular Change Detection Mechanism\n\nQ: Jak działa?\nA: Zone.js.",
        "# Angular Decorators\n\nQ: Co to @Component?\nA: Dekorator klasy.",
        "# Angular Lifecycle Hooks\n\nQ: Kiedy ngOnInit?\nA: Po konstruktorze.",
    ])


QAC_VARS = (
    "QAC_SENTINEL",
    "QAC_TITLE_LOOKAHEAD",
    "QAC_SIMILARITY_THRESHOLD",
    "QAC_CONFLICT_POLICY",
    "QAC_POSITIONAL_FALLBACK",
)


@pytest.fixture
def qac_env(monkeypatch):
    """Czyści zmienne QAC_*; po teście przywraca stan sprzed testu."""
    # setenv zapamiętuje stan początkowy, także dla wpisów dodanych przez load_dotenv
    for name in QAC_VARS:
        monkeypatch.setenv(name, "")
        monkeypatch.delenv(name)
    return monkeypatch
