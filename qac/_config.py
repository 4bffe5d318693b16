"""
Konfiguracja qac — zmienne środowiskowe, opcjonalnie z pliku .env.

Zmienne:
  QAC_SENTINEL              literał oddzielający dokumenty w korpusie
  QAC_TITLE_LOOKAHEAD       okno szukania nagłówka (liczba linii)
  QAC_SIMILARITY_THRESHOLD  próg overlapu tokenów dla tieru 2 (0, 1]
  QAC_CONFLICT_POLICY       longest | earliest
  QAC_POSITIONAL_FALLBACK   1/0, true/false — tier 3 włączony/wyłączony

Plik .env w katalogu roboczym (lub wskazany jawnie) jest wczytywany bez
nadpisywania zmiennych już ustawionych w środowisku.
"""

from __future__ import annotations

import os
import pathlib
from dataclasses import dataclass, replace

from dotenv import load_dotenv

from assembler.types import DEFAULT_SIMILARITY_THRESHOLD, AssemblerConfig, ConflictPolicy
from splitter.headings import DEFAULT_LOOKAHEAD
from splitter.sentinel import DEFAULT_SENTINEL

_TRUE  = {"1", "true", "yes", "on", "tak"}
_FALSE = {"0", "false", "no", "off", "nie"}


@dataclass(frozen=True, slots=True)
class Settings:
    sentinel: str = DEFAULT_SENTINEL
    lookahead: int = DEFAULT_LOOKAHEAD
    similarity_threshold: float = DEFAULT_SIMILARITY_THRESHOLD
    conflict_policy: ConflictPolicy = ConflictPolicy.LONGEST
    positional_fallback: bool = True

    def __post_init__(self) -> None:
        if not self.sentinel:
            raise ValueError("Sentinel nie może być pusty.")
        if self.lookahead < 1:
            raise ValueError(f"Look-ahead musi być >= 1, podano {self.lookahead}.")
        if not 0.0 < self.similarity_threshold <= 1.0:
            raise ValueError(
                f"Próg podobieństwa musi być w (0, 1], podano {self.similarity_threshold}."
            )
        if not isinstance(self.conflict_policy, ConflictPolicy):
            object.__setattr__(self, "conflict_policy", ConflictPolicy(self.conflict_policy))

    @classmethod
    def from_env(cls, env_file: str | pathlib.Path | None = None) -> "Settings":
        """Buduje ustawienia ze środowiska; błędne wartości → ValueError."""
        load_dotenv(env_file or pathlib.Path.cwd() / ".env", override=False)

        return cls(
            sentinel             = os.getenv("QAC_SENTINEL", DEFAULT_SENTINEL),
            lookahead            = _int_env("QAC_TITLE_LOOKAHEAD", DEFAULT_LOOKAHEAD),
            similarity_threshold = _float_env("QAC_SIMILARITY_THRESHOLD", DEFAULT_SIMILARITY_THRESHOLD),
            conflict_policy      = _policy_env("QAC_CONFLICT_POLICY", ConflictPolicy.LONGEST),
            positional_fallback  = _bool_env("QAC_POSITIONAL_FALLBACK", True),
        )

    def override(self, **changes) -> "Settings":
        """Nadpisuje pola wartościami różnymi od None (flagi CLI)."""
        return replace(self, **{k: v for k, v in changes.items() if v is not None})

    def assembler_config(self) -> AssemblerConfig:
        return AssemblerConfig(
            similarity_threshold=self.similarity_threshold,
            conflict_policy=self.conflict_policy,
            positional_fallback=self.positional_fallback,
        )


# ---------------------------------------------------------------------------
# Parsowanie wartości
# ---------------------------------------------------------------------------

def _int_env(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        value = int(raw)
    except ValueError:
        raise ValueError(f"{name}: oczekiwano liczby całkowitej, podano '{raw}'.") from None
    if value < 1:
        raise ValueError(f"{name}: wartość musi być >= 1, podano {value}.")
    return value


def _float_env(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        value = float(raw)
    except ValueError:
        raise ValueError(f"{name}: oczekiwano liczby, podano '{raw}'.") from None
    if not 0.0 < value <= 1.0:
        raise ValueError(f"{name}: wartość musi być w (0, 1], podano {value}.")
    return value


def _policy_env(name: str, default: ConflictPolicy) -> ConflictPolicy:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return ConflictPolicy(raw.strip().lower())
    except ValueError:
        allowed = ", ".join(p.value for p in ConflictPolicy)
        raise ValueError(f"{name}: dozwolone wartości: {allowed}; podano '{raw}'.") from None


def _bool_env(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    value = raw.strip().lower()
    if value in _TRUE:
        return True
    if value in _FALSE:
        return False
    raise ValueError(f"{name}: oczekiwano wartości logicznej, podano '{raw}'.")
