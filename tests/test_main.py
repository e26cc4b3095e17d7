"""Tests for the main.py command line."""

from unittest.mock import patch

import pytest

import main
from config.providers import load_provider_config
from core.state import FileOperation, PipelineResult
from utils.folder_naming import extract_project_name, new_workspace_id, slugify


@pytest.fixture(autouse=True)
def offline():
    """No logging reconfiguration and no provider keys picked up from the environment."""
    with patch("main.configure_logging"), \
         patch("core.orchestrator.load_provider_config",
               return_value=load_provider_config(environ={})):
        yield


def test_no_command_prints_help(capsys):
    assert main.main([]) == 1
    assert "usage" in capsys.readouterr().out.lower()


def test_validate_missing_dir(tmp_path, capsys):
    assert main.main(["validate", str(tmp_path / "nope")]) == 2


def test_validate_clean_project(tmp_path, capsys):
    project = tmp_path / "site"
    (project / "src").mkdir(parents=True)
    (project / "src" / "a.ts").write_text("export const a = 1;")
    assert main.main(["validate", str(project)]) == 0
    out = capsys.readouterr().out
    assert "Valid:    yes" in out


def test_validate_broken_project(tmp_path, capsys):
    project = tmp_path / "site"
    (project / "src").mkdir(parents=True)
    (project / "src" / "A.tsx").write_text("function A(){ return (<div>")
    assert main.main(["validate", str(project)]) == 1
    out = capsys.readouterr().out
    assert "[ERROR] src/A.tsx [SYNTAX]" in out


def test_providers(capsys):
    config = load_provider_config(environ={"GEMINI_API_KEY": "k"})
    with patch("main.load_provider_config", return_value=config):
        assert main.main(["providers"]) == 0
    out = capsys.readouterr().out
    assert "missing GROK_API_KEY" in out
    assert "gemini" in out


def test_build_dry_run(tmp_path, capsys):
    code = main.main(["build", "--prompt", "build me a bakery website",
                      "--output-dir", str(tmp_path), "--dry-run"])
    assert code == 0
    out = capsys.readouterr().out
    assert "src/pages/Index.tsx" in out
    assert not list(tmp_path.iterdir())


def test_build_writes_files(tmp_path, capsys):
    result = PipelineResult(
        success=True,
        files=[FileOperation("src/components/Hero.tsx", "export default 1;")],
        models_used=[],
        validation_passed=True,
        repair_attempts=0,
        ai_message="Done!",
        routes=["/"],
        suggestions=[],
    )
    with patch("main.Orchestrator.run", return_value=result):
        code = main.main(["build", "--prompt", "build me a bakery website",
                          "--output-dir", str(tmp_path)])
    assert code == 0
    assert (tmp_path / "bakery" / "src" / "components" / "Hero.tsx").read_text() == "export default 1;"
    assert "Done!" in capsys.readouterr().out


def test_bad_threshold_env(monkeypatch, capsys):
    monkeypatch.setenv("PIPELINE_THRESHOLD_CODING", "high")
    assert main.main(["providers"]) == 2
    assert "must be a number" in capsys.readouterr().err


# ---------------------------------------------------------------------------
# Workspace naming
# ---------------------------------------------------------------------------

def test_slugify():
    assert slugify("  Sweet Crumbs_Bakery! ") == "sweet-crumbs-bakery"


def test_extract_project_name():
    assert extract_project_name("Build me a bakery website please") == "bakery"
    assert extract_project_name("build a website") == "project"


def test_new_workspace_id_dedups(tmp_path):
    assert new_workspace_id("build a bakery site", str(tmp_path)) == "bakery"
    (tmp_path / "bakery").mkdir()
    assert new_workspace_id("build a bakery site", str(tmp_path)) == "bakery-2"
    (tmp_path / "bakery-2").mkdir()
    assert new_workspace_id("build a bakery site", str(tmp_path)) == "bakery-3"
