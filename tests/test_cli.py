import json

import pytest

from qac.cli import build_parser, main


@pytest.fixture
def workspace(qac_env, tmp_path, angular_manifest, angular_corpus):
    qac_env.chdir(tmp_path)
    (tmp_path / "README.md").write_text(angular_manifest, encoding="utf-8")
    (tmp_path / "qa.md").write_text(angular_corpus, encoding="utf-8")
    return tmp_path


def _exit_code(argv: list[str]) -> int:
    with pytest.raises(SystemExit) as exc_info:
        main(argv)
    return exc_info.value.code


def test_version(capsys):
    assert _exit_code(["--version"]) == 0
    assert "qac 0.1.0" in capsys.readouterr().out


def test_command_is_required():
    assert _exit_code([]) == 2


def test_parser_knows_all_commands():
    parser = build_parser()

    for command in ("split", "toc", "assemble"):
        args = parser.parse_args([command, "x.md"] + (["y.md"] if command == "assemble" else []))
        assert args.command == command
        assert callable(args.func)


# ---------------------------------------------------------------------------
# split
# ---------------------------------------------------------------------------

def test_split_json(workspace, capsys):
    main(["split", "qa.md", "--json-output"])
    data = json.loads(capsys.readouterr().out)

    assert [p["title"] for p in data["payloads"]] == [
        "Angular Change Detection Mechanism",
        "Angular Decorators",
        "Angular Lifecycle Hooks",
    ]
    assert data["structural"] == []


def test_split_table(workspace, capsys):
    main(["split", "qa.md"])
    out = capsys.readouterr().out

    assert "3" in out
    assert "Angular Decorators" in out


def test_split_sentinel_from_dotenv(workspace, capsys):
    (workspace / "alt.md").write_text("# A\n@@@\n# B\n@@@\n# C", encoding="utf-8")
    (workspace / ".env").write_text("QAC_SENTINEL=@@@\n", encoding="utf-8")

    main(["split", "alt.md", "--json-output"])

    assert len(json.loads(capsys.readouterr().out)["payloads"]) == 3


def test_split_sentinel_flag_overrides_env(workspace, capsys):
    (workspace / "alt.md").write_text("# A\n%%\n# B", encoding="utf-8")
    (workspace / ".env").write_text("QAC_SENTINEL=@@@\n", encoding="utf-8")

    main(["split", "alt.md", "--sentinel", "%%", "--json-output"])

    assert len(json.loads(capsys.readouterr().out)["payloads"]) == 2


def test_split_missing_file(workspace, capsys):
    assert _exit_code(["split", "missing.md"]) == 1
    assert "missing.md" in capsys.readouterr().out


# ---------------------------------------------------------------------------
# toc
# ---------------------------------------------------------------------------

def test_toc_json(workspace, capsys):
    main(["toc", "README.md", "--json-output"])
    data = json.loads(capsys.readouterr().out)

    assert [e["target_path"] for e in data["entries"]] == [
        "docs/01-change-detection.md",
        "docs/02-decorators.md",
        "docs/03-lifecycle-hooks.md",
    ]
    assert data["entries"][0]["category"] == "Podstawy"
    assert data["malformed"] == []


def test_toc_reports_malformed_lines(workspace, capsys):
    (workspace / "bad.md").write_text("- [A](a.md)\n- brak linku\n", encoding="utf-8")

    main(["toc", "bad.md"])

    assert "E_MALFORMED_LINE" in capsys.readouterr().out


def test_toc_duplicate_target_exits_1(workspace):
    (workspace / "dup.md").write_text("- [A](a.md)\n- [B](a.md)\n", encoding="utf-8")

    assert _exit_code(["toc", "dup.md"]) == 1


# ---------------------------------------------------------------------------
# assemble
# ---------------------------------------------------------------------------

def test_assemble_writes_files_and_report(workspace, capsys):
    main(["assemble", "README.md", "qa.md", "--out-dir", "out", "--report", "report.json", "--show"])

    out_dir = workspace / "out" / "docs"
    assert sorted(p.name for p in out_dir.iterdir()) == [
        "01-change-detection.md",
        "02-decorators.md",
        "03-lifecycle-hooks.md",
    ]
    report = json.loads((workspace / "report.json").read_text(encoding="utf-8"))
    assert report["summary"]["chosen"] == 3
    assert "OK" in capsys.readouterr().out


def test_assemble_json_output_is_pure_json(workspace, capsys):
    main(["assemble", "README.md", "qa.md", "--json-output", "--out-dir", "out"])
    captured = capsys.readouterr()

    data = json.loads(captured.out)
    assert data["summary"]["gaps"] == 0
    assert "Zapisano" in captured.err


def test_assemble_gaps_are_warning_by_default(workspace, capsys):
    (workspace / "more.md").write_text(
        (workspace / "README.md").read_text(encoding="utf-8")
        + "4. [Signals](docs/04-signals.md)\n5. [Routing](docs/05-routing.md)\n",
        encoding="utf-8",
    )

    main(["assemble", "more.md", "qa.md", "--report", "report.json"])

    report = json.loads((workspace / "report.json").read_text(encoding="utf-8"))
    assert [g["target_path"] for g in report["gaps"]] == [
        "docs/04-signals.md",
        "docs/05-routing.md",
    ]
    assert "UWAGA" in capsys.readouterr().out


def test_assemble_strict_exits_2_on_gaps(workspace):
    (workspace / "more.md").write_text(
        (workspace / "README.md").read_text(encoding="utf-8")
        + "4. [Signals](docs/04-signals.md)\n5. [Routing](docs/05-routing.md)\n",
        encoding="utf-8",
    )

    assert _exit_code(["assemble", "more.md", "qa.md", "--strict"]) == 2


def test_assemble_strict_passes_when_clean(workspace):
    main(["assemble", "README.md", "qa.md", "--strict"])


def test_assemble_duplicate_target_exits_1(workspace):
    (workspace / "dup.md").write_text("- [A](a.md)\n- [B](a.md)\n", encoding="utf-8")

    assert _exit_code(["assemble", "dup.md", "qa.md", "--out-dir", "out"]) == 1
    assert not (workspace / "out").exists()


def test_assemble_policy_flag(workspace, capsys):
    (workspace / "toc.md").write_text("- [Testing](testing.md)\n", encoding="utf-8")
    (workspace / "dup-qa.md").write_text(
        "# Angular Testing\nkrótki\n<!-- qa:split -->\n# Angular Testing\n" + "długi " * 40,
        encoding="utf-8",
    )

    main(["assemble", "toc.md", "dup-qa.md", "--policy", "earliest", "--json-output"])
    data = json.loads(capsys.readouterr().out)

    assert data["chosen"][0]["sequence_index"] == 0
    assert data["conflicts"][0]["policy"] == "earliest"


def test_assemble_bad_threshold_exits_1(workspace, capsys):
    assert _exit_code(["assemble", "README.md", "qa.md", "--threshold", "1.5"]) == 1
    assert "konfiguracja" in capsys.readouterr().out


def test_assemble_reports_unwritable_targets(workspace, capsys):
    (workspace / "dirs.md").write_text("- [Docs](docs/)\n- [Alpha](docs/alpha.md)\n", encoding="utf-8")
    (workspace / "dirs-qa.md").write_text(
        "# Docs\nspis\n<!-- qa:split -->\n# Alpha\ntreść\n", encoding="utf-8"
    )

    main(["assemble", "dirs.md", "dirs-qa.md", "--out-dir", "out"])

    assert (workspace / "out" / "docs" / "alpha.md").is_file()
    assert "docs/" in capsys.readouterr().out
