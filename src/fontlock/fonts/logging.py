"""Pipeline messages routed through the CLI consoles when a CLI run is active."""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

import typer


if TYPE_CHECKING:
    from rich.progress import Progress, TaskID

    from fontlock.ui.cli.state import CLIState


def _active_state() -> CLIState | None:
    from fontlock.ui.cli.state import get_cli_state

    try:
        return get_cli_state(create=False)
    except RuntimeError:
        return None


def _format(message: str, args: tuple[Any, ...]) -> str:
    if not args:
        return message
    try:
        return message % args
    except (TypeError, ValueError):
        return " ".join([message, *(str(arg) for arg in args)])


@dataclass(slots=True)
class ProgressReporter:
    """Callable handed out by :meth:`FontPipelineLogger.progress`."""

    _progress: Progress | None = None
    _task: TaskID | None = None
    completed: int = 0

    def __call__(self, step: int = 1, description: str | None = None) -> None:
        self.completed += step
        if self._progress is None or self._task is None:
            return
        if description is not None:
            self._progress.update(self._task, description=description)
        self._progress.update(self._task, advance=step)


@dataclass(slots=True)
class FontPipelineLogger:
    """Report pipeline progress on the CLI consoles, or plain stdout/stderr.

    ``verbose`` defaults to the CLI ``-v`` flag; ``quiet`` silences info,
    debug and progress output but never warnings.
    """

    verbose: bool = False
    quiet: bool = False
    _state: CLIState | None = field(default=None, init=False, repr=False)

    def __post_init__(self) -> None:
        self._state = _active_state()
        if self._state is not None and self._state.verbosity >= 1:
            self.verbose = True

    def info(self, message: str, *args: Any) -> None:
        if self.quiet:
            return
        text = _format(message, args)
        if self._state is not None:
            self._state.console.log(text)
        else:
            typer.echo(text)

    notice = info

    def debug(self, message: str, *args: Any) -> None:
        if self.verbose:
            self.info(message, *args)

    def warning(self, message: str, *args: Any) -> None:
        text = _format(message, args)
        if self._state is None:
            typer.secho(text, fg="yellow", err=True)
            return
        from fontlock.ui.cli.state import emit_warning

        emit_warning(text)

    @contextmanager
    def progress(self, task: str, total: int | None = None) -> Iterator[ProgressReporter]:
        """Show a Rich progress bar for ``task`` while the block runs."""
        if self.quiet:
            yield ProgressReporter()
            return

        from rich.console import Console
        from rich.progress import (
            BarColumn,
            Progress,
            SpinnerColumn,
            TextColumn,
            TimeElapsedColumn,
        )

        console = self._state.console if self._state is not None else Console(stderr=True)
        columns = [
            SpinnerColumn(),
            TextColumn("[bold cyan]{task.description}"),
            BarColumn(),
            TextColumn("{task.completed}/{task.total}" if total else "{task.completed}"),
            TimeElapsedColumn(),
        ]
        with Progress(*columns, console=console, transient=not self.verbose) as progress:
            yield ProgressReporter(progress, progress.add_task(task, total=total))


__all__ = ["FontPipelineLogger", "ProgressReporter"]
