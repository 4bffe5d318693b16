import json
from pathlib import PurePosixPath

import pytest

from assembler import run_pipeline
from qac._writer import report_json, target_to_relpath, write_outputs, write_report


@pytest.mark.parametrize(
    "target, expected",
    [
        ("docs/01-intro.md", "docs/01-intro.md"),
        ("#what-is-angular", "what-is-angular.md"),
        ("hooks.md#ngoninit", "hooks.md"),
        ("guide.md?tab=2", "guide.md"),
        ("docs/./a.md", "docs/a.md"),
        ("docs\\win.md", "docs/win.md"),
        ("/etc/passwd", None),
        ("../outside.md", None),
        ("docs/../../outside.md", None),
        ("https://angular.dev/guide", None),
        (".", None),
        ("docs/", None),
        ("docs/#intro", None),
        ("#a/b", None),
    ],
)
def test_target_to_relpath(target, expected):
    rel = target_to_relpath(target)

    assert rel == (PurePosixPath(expected) if expected else None)


def test_write_outputs(tmp_path, angular_manifest, angular_corpus):
    result = run_pipeline([("qa.md", angular_corpus)], angular_manifest)
    out_dir = tmp_path / "out"

    written, refused = write_outputs(result, out_dir)

    assert refused == []
    assert [p.relative_to(out_dir).as_posix() for p in written] == [
        "docs/01-change-detection.md",
        "docs/02-decorators.md",
        "docs/03-lifecycle-hooks.md",
    ]
    content = (out_dir / "docs" / "02-decorators.md").read_text(encoding="utf-8")
    assert content.startswith("# Angular Decorators\n")
    assert content.endswith("Dekorator klasy.\n")


def test_rewrite_is_byte_identical(tmp_path, angular_manifest, angular_corpus):
    out_dir = tmp_path / "out"
    write_outputs(run_pipeline([("qa.md", angular_corpus)], angular_manifest), out_dir)
    before = {p: p.read_bytes() for p in out_dir.rglob("*.md")}

    write_outputs(run_pipeline([("qa.md", angular_corpus)], angular_manifest), out_dir)
    after = {p: p.read_bytes() for p in out_dir.rglob("*.md")}

    assert before == after


def test_unsafe_and_colliding_targets_are_refused(tmp_path, join_corpus):
    manifest = """\
- [Alpha](a.md#alpha)
- [Beta](a.md#beta)
- [Gamma](../gamma.md)
"""
    corpus = join_corpus(["# Alpha\n1", "# Beta\n2", "# Gamma\n3"])
    result = run_pipeline([("qa.md", corpus)], manifest)

    written, refused = write_outputs(result, tmp_path / "out")

    assert [p.name for p in written] == ["a.md"]
    assert refused == ["a.md#beta", "../gamma.md"]
    assert not (tmp_path / "gamma.md").exists()


def test_report_json(tmp_path, angular_manifest, angular_corpus):
    result = run_pipeline([("qa.md", angular_corpus)], angular_manifest)
    path = tmp_path / "reports" / "report.json"

    write_report(result, path)
    data = json.loads(path.read_text(encoding="utf-8"))

    assert path.read_text(encoding="utf-8") == report_json(result)
    assert data["summary"]["chosen"] == 3
    assert data["chosen"][0]["confidence"] == "exact"
    assert data["gaps"] == [] and data["orphans"] == []


def test_directory_target_is_refused(tmp_path, join_corpus):
    manifest = "- [Docs](docs/)\n- [Alpha](docs/alpha.md)\n"
    corpus = join_corpus(["# Docs\nspis", "# Alpha\ntreść"])
    result = run_pipeline([("qa.md", corpus)], manifest)

    written, refused = write_outputs(result, tmp_path)

    assert [p.relative_to(tmp_path).as_posix() for p in written] == ["docs/alpha.md"]
    assert refused == ["docs/"]


def test_file_blocking_directory_is_refused(tmp_path, join_corpus):
    manifest = "- [Docs](docs)\n- [Alpha](docs/alpha.md)\n- [Beta](beta.md)\n"
    corpus = join_corpus(["# Docs\nspis", "# Alpha\ntreść", "# Beta\ntreść"])
    result = run_pipeline([("qa.md", corpus)], manifest)

    written, refused = write_outputs(result, tmp_path)

    assert [p.name for p in written] == ["docs", "beta.md"]
    assert refused == ["docs/alpha.md"]
    assert (tmp_path / "docs").is_file()


def test_existing_directory_at_target_is_refused(tmp_path, join_corpus):
    (tmp_path / "alpha.md").mkdir()
    manifest = "- [Alpha](alpha.md)\n- [Beta](beta.md)\n"
    corpus = join_corpus(["# Alpha\ntreść", "# Beta\ntreść"])
    result = run_pipeline([("qa.md", corpus)], manifest)

    written, refused = write_outputs(result, tmp_path)

    assert [p.name for p in written] == ["beta.md"]
    assert refused == ["alpha.md"]
