from __future__ import annotations

import json
from pathlib import Path

from conftest import FakeTransport
import pytest
from typer.testing import CliRunner

from fontlock.core.config import API_KEY_ENV, FontLockConfig
from fontlock.fonts.catalog import DEFAULT_LISTING_CACHE
from fontlock.ui.cli import app
from fontlock.ui.cli import utils as cli_utils
from fontlock.ui.cli.state import CLIState
from fontlock.version import get_version


@pytest.fixture
def runner() -> CliRunner:
    return CliRunner()


@pytest.fixture
def project(tmp_path: Path, monkeypatch: pytest.MonkeyPatch, transport: FakeTransport) -> Path:
    monkeypatch.delenv(API_KEY_ENV, raising=False)
    monkeypatch.setattr(cli_utils, "create_transport", lambda: transport)
    templates = tmp_path / "templates"
    templates.mkdir()
    (templates / "base.html").write_text(
        "{{ gfonts('Roboto', '400 700', 'normal') }}\n"
        "{{ gfonts('Roboto Mono', [400], 'normal', 'swap', true) }}\n",
        encoding="utf-8",
    )
    return tmp_path


def _invoke(runner: CliRunner, project: Path, *args: str):
    return runner.invoke(app, ["--project-dir", str(project), *args])


def test_version(runner: CliRunner) -> None:
    result = runner.invoke(app, ["--version"])

    assert result.exit_code == 0
    assert get_version() in result.stdout


def test_lock_writes_manifest(runner: CliRunner, project: Path) -> None:
    result = _invoke(runner, project, "lock")

    assert result.exit_code == 0, result.output
    manifest = json.loads((project / "assets" / "fonts.json").read_text(encoding="utf-8"))
    assert list(manifest["fonts"]) == ["Roboto", "Roboto Mono"]
    assert manifest["fonts"]["Roboto Mono"]["monospace"] is True
    assert (project / "assets" / "fonts" / "roboto.css").is_file()
    assert "Locked 2 font(s)" in result.output


def test_lock_without_declarations_warns(runner: CliRunner, project: Path) -> None:
    empty = project / "empty"
    empty.mkdir()

    result = _invoke(runner, project, "lock", str(empty))

    assert result.exit_code == 0
    assert not (project / "assets" / "fonts.json").exists()


def test_lock_without_template_directories_fails(
    runner: CliRunner, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.delenv(API_KEY_ENV, raising=False)

    result = _invoke(runner, tmp_path, "lock")

    assert result.exit_code == 1


def test_lock_failure_reports_family(
    runner: CliRunner, project: Path, transport: FakeTransport
) -> None:
    transport.add("https://fonts.googleapis.com/css2?family=Roboto+Mono", "boom", status=500)

    result = _invoke(runner, project, "lock")

    assert result.exit_code == 1
    assert not (project / "assets" / "fonts.json").exists()


def test_status_reports_readiness(runner: CliRunner, project: Path) -> None:
    assert _invoke(runner, project, "lock").exit_code == 0
    (project / "fontlock.yml").write_text("use_locked_fonts: true\n", encoding="utf-8")

    result = _invoke(runner, project, "status")

    assert result.exit_code == 0, result.output
    assert "Roboto Mono" in result.stdout
    assert "Ready to use locked fonts." in result.stdout
    assert "local" in result.stdout
    assert "remote" not in result.stdout


def test_status_shows_remote_when_locked_fonts_disabled(runner: CliRunner, project: Path) -> None:
    assert _invoke(runner, project, "lock").exit_code == 0

    result = _invoke(runner, project, "status")

    assert result.exit_code == 0, result.output
    assert "remote" in result.stdout


def test_status_without_manifest(runner: CliRunner, project: Path) -> None:
    result = _invoke(runner, project, "status")

    assert result.exit_code == 0
    assert "Not ready to use locked fonts" in result.stdout


def test_search_without_key_fails(runner: CliRunner, project: Path, transport: FakeTransport) -> None:
    result = _invoke(runner, project, "search", "roboto")

    assert result.exit_code == 1
    assert transport.calls == []


def test_search_lists_matches(
    runner: CliRunner, project: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.setenv(API_KEY_ENV, "secret")

    result = _invoke(runner, project, "search", "roboto", "--max-results", "1")

    assert result.exit_code == 0, result.output
    assert "Roboto" in result.stdout
    assert "100, 300, regular, italic, 500..." in result.stdout
    assert "Ubuntu" not in result.stdout


def test_import_downloads_single_font(
    runner: CliRunner, project: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.setenv(API_KEY_ENV, "secret")

    result = _invoke(runner, project, "import", "Ubuntu", "--weights", "400,700")

    assert result.exit_code == 0, result.output
    assert (project / "assets" / "fonts" / "ubuntu.css").is_file()
    assert (project / "assets" / "fonts" / "ubuntu-700.woff2").is_file()


def test_import_dry_run_downloads_nothing(
    runner: CliRunner, project: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.setenv(API_KEY_ENV, "secret")

    result = _invoke(runner, project, "import", "Ubuntu", "--dry-run")

    assert result.exit_code == 0, result.output
    assert not (project / "assets" / "fonts").exists()


def test_import_unknown_font_fails(
    runner: CliRunner, project: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.setenv(API_KEY_ENV, "secret")

    assert _invoke(runner, project, "import", "Nonexistent").exit_code == 1


def test_prune_dry_run_then_apply(runner: CliRunner, project: Path) -> None:
    assert _invoke(runner, project, "lock").exit_code == 0
    (project / "templates" / "base.html").write_text(
        "{{ gfonts('Roboto', '400 700') }}", encoding="utf-8"
    )
    manifest_file = project / "assets" / "fonts.json"

    dry = _invoke(runner, project, "prune", "--dry-run")
    assert dry.exit_code == 0, dry.output
    assert "Roboto Mono" in json.loads(manifest_file.read_text(encoding="utf-8"))["fonts"]

    applied = _invoke(runner, project, "prune", "--yes")
    assert applied.exit_code == 0, applied.output
    assert list(json.loads(manifest_file.read_text(encoding="utf-8"))["fonts"]) == ["Roboto"]
    assert not (project / "assets" / "fonts" / "roboto-mono.css").exists()


def test_prune_confirmation_can_abort(runner: CliRunner, project: Path) -> None:
    assert _invoke(runner, project, "lock").exit_code == 0
    (project / "templates" / "base.html").write_text("", encoding="utf-8")

    result = runner.invoke(app, ["--project-dir", str(project), "prune"], input="n\n")

    assert result.exit_code == 0
    fonts = json.loads((project / "assets" / "fonts.json").read_text(encoding="utf-8"))["fonts"]
    assert len(fonts) == 2


def test_warm_cache_redownloads(runner: CliRunner, project: Path) -> None:
    assert _invoke(runner, project, "lock").exit_code == 0
    css = project / "assets" / "fonts" / "roboto.css"
    css.unlink()

    result = _invoke(runner, project, "warm-cache")

    assert result.exit_code == 0, result.output
    assert css.is_file()


def test_warm_cache_is_best_effort(
    runner: CliRunner, project: Path, transport: FakeTransport
) -> None:
    assert _invoke(runner, project, "lock").exit_code == 0
    transport.add("https://fonts.googleapis.com/css2?family=Roboto:", "boom", status=500)
    (project / "assets" / "fonts" / "roboto-mono.css").unlink()

    result = _invoke(runner, project, "warm-cache")

    assert result.exit_code == 1
    assert (project / "assets" / "fonts" / "roboto-mono.css").is_file()


def test_warm_cache_without_manifest_fails(runner: CliRunner, project: Path) -> None:
    assert _invoke(runner, project, "warm-cache").exit_code == 1


def test_catalogs_share_a_listing_cache_per_invocation(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch, transport: FakeTransport
) -> None:
    state = CLIState()
    monkeypatch.setattr(cli_utils, "get_cli_state", lambda: state)
    config = FontLockConfig(project_dir=tmp_path, cache_ttl=30)

    first = cli_utils.build_catalog(config, transport)
    second = cli_utils.build_catalog(config, transport)

    assert first.cache is second.cache is state.listing_cache
    assert first.cache.ttl == 30
    assert first.cache is not DEFAULT_LISTING_CACHE
    assert DEFAULT_LISTING_CACHE.ttl == 3600
