from pathlib import Path
from types import SimpleNamespace

import pytest
from click.testing import CliRunner
from rich.console import Console

from droid_factory import __version__
from droid_factory.cli import _main, cli

MARKETPLACE = Path(__file__).resolve().parent / "fixtures" / "marketplace"


@pytest.fixture
def home(monkeypatch, tmp_path):
    home_dir = tmp_path / "home"
    home_dir.mkdir()
    monkeypatch.setattr(Path, "home", classmethod(lambda cls: home_dir))
    return home_dir


@pytest.fixture
def project(tmp_path):
    path = tmp_path / "project"
    path.mkdir()
    return path


def _invoke(*args):
    return CliRunner().invoke(cli, list(args))


# --- options ---

def test_version():
    result = _invoke("--version")
    assert result.exit_code == 0
    assert __version__ in result.output


def test_list_templates():
    result = _invoke("--list")
    assert result.exit_code == 0
    assert "Available command templates:" in result.output
    assert "- code-review" in result.output
    assert "- security-code-reviewer" in result.output


def test_invalid_scope():
    result = _invoke("--scope", "global")
    assert result.exit_code == 2


# --- templates ---

def test_install_one_command_template(home, project):
    result = _invoke(
        "--scope", "project", "--path", str(project), "--only-commands", "--commands", "plan", "--yes"
    )
    assert result.exit_code == 0, result.output
    factory = project.resolve() / ".factory"
    assert (factory / "commands" / "plan.md").is_file()
    assert not (factory / "droids").exists()
    assert "Completed: 1 created, 0 overwritten, 0 skipped." in result.output
    assert "Custom droids need to be enabled" in result.output


def test_nothing_selected(home, project):
    result = _invoke("--scope", "project", "--path", str(project), "--no-commands", "--no-droids")
    assert result.exit_code == 0
    assert "Nothing to install (no commands or droids selected)." in result.output


def test_template_dry_run(home, project):
    result = _invoke("--scope", "project", "--path", str(project), "--dry-run")
    assert result.exit_code == 0
    assert "Install plan:" in result.output
    assert "Summary: 4 new, 0 existing" in result.output
    assert "Dry run: no files were written." in result.output
    assert not (project / ".factory").exists()


def test_prompt_eof_exits_as_interrupted(monkeypatch, home, project):
    monkeypatch.setattr(_main, "sys", SimpleNamespace(stdin=SimpleNamespace(isatty=lambda: True)))
    monkeypatch.setattr(_main, "console", Console(soft_wrap=True, force_terminal=True))
    result = _invoke(
        "--scope", "project", "--path", str(project), "--only-commands", "--commands", "plan"
    )
    assert result.exit_code == 130, result.output
    assert "Cancelled." in result.output
    assert not (project / ".factory" / "commands" / "plan.md").exists()


# --- marketplace ---

def test_marketplace_dry_run(home, project):
    result = _invoke(
        "--marketplace", str(MARKETPLACE), "--scope", "project", "--path", str(project), "--dry-run"
    )
    assert result.exit_code == 0, result.output
    assert "Install plan (marketplace):" in result.output
    assert "workflows__review [demo]" in result.output
    assert "frontend [demo]" in result.output
    assert "empty (No components found)" in result.output
    assert "Dry run: no files were written." in result.output
    assert not (project / ".factory").exists()


def test_marketplace_load_failure(home, tmp_path):
    result = _invoke("--marketplace", str(tmp_path / "missing"), "--dry-run")
    assert result.exit_code == 1
    assert "Failed to load marketplace:" in result.output


def test_marketplace_install(home, project):
    result = _invoke(
        "--marketplace",
        str(MARKETPLACE),
        "--plugins",
        "demo",
        "--scope",
        "project",
        "--path",
        str(project),
        "--yes",
    )
    assert result.exit_code == 0, result.output
    factory = project.resolve() / ".factory"
    assert (factory / "commands" / "workflows__review.md").is_file()
    assert (factory / "droids" / "helper.md").is_file()
    assert (factory / "hooks" / "format.sh").is_file()
    assert (factory / "skills" / "frontend" / "SKILL.md").is_file()
    assert "Completed: 5 created, 0 overwritten, 0 skipped." in result.output


def test_marketplace_unknown_plugin_installs_nothing(home, project):
    result = _invoke(
        "--marketplace",
        str(MARKETPLACE),
        "--plugins",
        "nope",
        "--scope",
        "project",
        "--path",
        str(project),
        "--yes",
    )
    assert result.exit_code == 0
    assert "Nothing to install (no plugins or components selected)." in result.output


def test_custom_droids_enabled_message(home, project):
    (home / ".factory").mkdir()
    (home / ".factory" / "settings.json").write_text('{"enableCustomDroids": true}')
    result = _invoke(
        "--scope", "project", "--path", str(project), "--only-droids", "--droids", "all", "--yes"
    )
    assert result.exit_code == 0
    assert "Custom droids are enabled in your settings." in result.output
    assert "Completed: 2 created" in result.output
