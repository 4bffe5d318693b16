import pytest

from assembler.normalizer import (
    normalize_title,
    phrase_contains,
    slugify,
    target_stem,
    title_tokens,
    token_overlap_ratio,
)


def test_normalize_title_trims_collapses_and_casefolds():
    assert normalize_title("  Angular   Change\tDetection ") == "angular change detection"
    assert normalize_title("STRASSE") == normalize_title("straße")


def test_normalize_title_keeps_punctuation():
    assert normalize_title("What is @Input()?") == "what is @input()?"


def test_title_tokens_drop_punctuation():
    assert title_tokens("What is @Input()?") == ("what", "is", "input")
    assert title_tokens("  ") == ()


@pytest.mark.parametrize(
    "haystack, needle, expected",
    [
        ("Angular Change Detection Mechanism", "Change Detection", True),
        ("Angular Decorators", "Decorators", True),
        ("Angular Testing", "Test", False),
        ("Detection of Change", "Change Detection", False),
        ("Hooks", "Lifecycle Hooks", False),
        ("Anything", "", False),
    ],
)
def test_phrase_contains(haystack, needle, expected):
    assert phrase_contains(title_tokens(haystack), title_tokens(needle)) is expected


def test_token_overlap_ratio():
    a = title_tokens("Component Communication Patterns")
    b = title_tokens("Communication between Components")

    assert token_overlap_ratio(a, a) == 1.0
    assert token_overlap_ratio(a, ()) == 0.0
    # wspólny podciąg: "communication" → 2·1 / (3 + 3)
    assert token_overlap_ratio(a, b) == pytest.approx(1 / 3)


def test_token_overlap_respects_order():
    forward = title_tokens("route guards and resolvers")
    shuffled = title_tokens("resolvers and route guards")

    # LCS = "route guards" → 2·2 / 8
    assert token_overlap_ratio(forward, shuffled) == pytest.approx(0.5)


def test_slugify():
    assert slugify("Change Detection") == "change-detection"
    assert slugify("Zależności (DI): wstęp") == "zaleznosci-di-wstep"
    assert slugify("x" * 80) == "x" * 60


@pytest.mark.parametrize(
    "target, stem",
    [
        ("docs/01-change-detection.md", "01-change-detection"),
        ("#hooks", "hooks"),
        ("hooks.md#ngoninit", "hooks"),
        ("guide.md?tab=1", "guide"),
        ("", ""),
    ],
)
def test_target_stem(target, stem):
    assert target_stem(target) == stem
