from __future__ import annotations

from pathlib import Path

import pytest

from pmv.config import ScaffoldConfig
from pmv.errors import DestinationConflict, ProjectNameError
from pmv.scaffold import ProjectScaffolder, create_project


@pytest.fixture()
def scaffolder() -> ProjectScaffolder:
    return ProjectScaffolder()


def test_scaffolder_creates_expected_structure(tmp_path: Path, scaffolder: ProjectScaffolder):
    config = ScaffoldConfig.from_name("sample-app", cwd=tmp_path)
    result = scaffolder.create(config)

    project_dir = tmp_path / "sample-app"
    assert result.destination == project_dir
    expected_files = [
        project_dir / "Cargo.toml",
        project_dir / "README.md",
        project_dir / "default.nix",
        project_dir / "src" / "main.rs",
    ]
    for path in expected_files:
        assert path.is_file(), f"expected {path} to exist"

    manifest = (project_dir / "Cargo.toml").read_text(encoding="utf-8")
    assert 'name = "sample-app"' in manifest
    main_rs = (project_dir / "src" / "main.rs").read_text(encoding="utf-8")
    assert "sample_app: running" in main_rs
    assert 'pname = "sample-app"' in (project_dir / "default.nix").read_text(encoding="utf-8")
    assert (project_dir / "README.md").read_text(encoding="utf-8").startswith("# sample-app\n")


def test_scaffolder_refuses_existing_project(tmp_path: Path, scaffolder: ProjectScaffolder):
    config = ScaffoldConfig.from_name("demo", cwd=tmp_path)
    scaffolder.create(config)
    (tmp_path / "demo" / "README.md").write_text("custom", encoding="utf-8")

    with pytest.raises(DestinationConflict):
        scaffolder.create(config)

    assert (tmp_path / "demo" / "README.md").read_text(encoding="utf-8") == "custom"


def test_create_project_with_custom_template(tmp_path: Path):
    template = tmp_path / "template"
    (template / "bin").mkdir(parents=True)
    (template / "bin" / "__PROJECT_NAME__").write_text("run __PROJECT_NAME__\n", encoding="utf-8")

    result = create_project("tool", tmp_path / "out", template_dir=template)

    assert result.files == ("bin/tool",)
    assert (tmp_path / "out" / "bin" / "tool").read_text(encoding="utf-8") == "run tool\n"


def test_create_project_invalid_name_writes_nothing(tmp_path: Path):
    with pytest.raises(ProjectNameError):
        create_project("Bad Name", tmp_path / "out")
    assert list(tmp_path.iterdir()) == []
