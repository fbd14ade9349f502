from __future__ import annotations

from pathlib import Path

import pytest

from pmv.cli import EXIT_INSTANTIATION_ERROR, EXIT_NAME_ERROR, EXIT_OK, build_parser, main


def test_parser_requires_a_command():
    with pytest.raises(SystemExit):
        build_parser().parse_args([])


def test_cli_new_creates_project(tmp_path: Path, capsys: pytest.CaptureFixture[str]):
    project_dir = tmp_path / "output"
    exit_code = main(["new", "hello-world", "--directory", str(project_dir)])

    assert exit_code == EXIT_OK
    assert (project_dir / "Cargo.toml").is_file()
    assert f"Project created at {project_dir}" in capsys.readouterr().out


def test_cli_new_defaults_to_cwd(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    monkeypatch.chdir(tmp_path)
    assert main(["new", "demo"]) == EXIT_OK
    assert (tmp_path / "demo" / "src" / "main.rs").is_file()


def test_cli_new_rejects_invalid_name(tmp_path: Path, monkeypatch: pytest.MonkeyPatch, capsys):
    monkeypatch.chdir(tmp_path)
    exit_code = main(["new", "123abc"])

    assert exit_code == EXIT_NAME_ERROR
    err = capsys.readouterr().err
    assert "InvalidCharacters" in err
    assert "hint: try 'abc'" in err
    assert list(tmp_path.iterdir()) == []


def test_cli_new_reports_conflict(tmp_path: Path, capsys):
    project_dir = tmp_path / "taken"
    project_dir.mkdir()
    (project_dir / "keep.txt").write_text("keep", encoding="utf-8")

    exit_code = main(["new", "demo", "-d", str(project_dir)])

    assert exit_code == EXIT_INSTANTIATION_ERROR
    err = capsys.readouterr().err
    assert "DestinationConflict" in err
    assert str(project_dir) in err
    assert sorted(p.name for p in project_dir.iterdir()) == ["keep.txt"]


def test_cli_new_reports_unreadable_template(tmp_path: Path, capsys):
    exit_code = main(["new", "demo", "-d", str(tmp_path / "out"), "--template", str(tmp_path / "nope")])

    assert exit_code == EXIT_INSTANTIATION_ERROR
    assert "TemplateUnreadable" in capsys.readouterr().err
    assert not (tmp_path / "out").exists()


def test_cli_check(capsys):
    assert main(["check", "  my-tool "]) == EXIT_OK
    assert capsys.readouterr().out.strip() == "my-tool"

    assert main(["check", "fn"]) == EXIT_NAME_ERROR
    err = capsys.readouterr().err
    assert "ReservedWord" in err
    assert "hint: try 'fn-rs'" in err


def test_cli_check_empty_name_has_no_hint(capsys):
    assert main(["check", "   "]) == EXIT_NAME_ERROR
    err = capsys.readouterr().err
    assert "EmptyName" in err
    assert "hint" not in err
