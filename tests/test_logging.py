from __future__ import annotations

import pytest

from fontlock.fonts import logging as pipeline_logging
from fontlock.fonts.logging import FontPipelineLogger


@pytest.fixture(autouse=True)
def _outside_cli(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(pipeline_logging, "_active_state", lambda: None)


def test_info_formats_arguments(capsys: pytest.CaptureFixture[str]) -> None:
    FontPipelineLogger().info("Locked %s (%d files)", "Roboto", 2)

    assert capsys.readouterr().out == "Locked Roboto (2 files)\n"


def test_mismatched_arguments_are_appended(capsys: pytest.CaptureFixture[str]) -> None:
    FontPipelineLogger().info("Locked", "Roboto")

    assert capsys.readouterr().out == "Locked Roboto\n"


def test_debug_requires_verbose(capsys: pytest.CaptureFixture[str]) -> None:
    FontPipelineLogger().debug("hidden")
    FontPipelineLogger(verbose=True).debug("shown")

    assert capsys.readouterr().out == "shown\n"


def test_quiet_silences_info_but_not_warnings(capsys: pytest.CaptureFixture[str]) -> None:
    logger = FontPipelineLogger(quiet=True)
    logger.info("hidden")
    logger.notice("hidden")
    logger.warning("careful")

    captured = capsys.readouterr()
    assert captured.out == ""
    assert "careful" in captured.err


def test_quiet_progress_still_counts() -> None:
    with FontPipelineLogger(quiet=True).progress("Downloading", total=3) as advance:
        advance()
        advance(step=2, description="Roboto")

    assert advance.completed == 3


def test_progress_reports_completion() -> None:
    with FontPipelineLogger().progress("Downloading", total=2) as advance:
        advance(step=0, description="Roboto")
        advance()
        advance()

    assert advance.completed == 2
