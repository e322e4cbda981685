"""Per-invocation CLI state: verbosity, consoles and the loaded configuration."""

from __future__ import annotations

from contextvars import ContextVar
from dataclasses import dataclass, field
from pathlib import Path
import sys
from typing import TYPE_CHECKING, TextIO

import click

from fontlock.core.exceptions import exception_messages


if TYPE_CHECKING:
    from rich.console import Console

    from fontlock.core.config import FontLockConfig
    from fontlock.fonts.catalog import ListingCache

__all__ = [
    "CLIState",
    "debug_enabled",
    "emit_error",
    "emit_warning",
    "get_cli_state",
    "render_message",
    "set_cli_state",
]

_LEVEL_STYLES = {"warning": "yellow", "error": "red"}


def _bind_console(current: Console | None, stream: TextIO, **options: object) -> Console:
    from rich.console import Console

    # Rebind when the stream was replaced since the last call.
    if current is not None and current.file is stream:
        return current
    return Console(file=stream, **options)


@dataclass(slots=True)
class CLIState:
    """Options collected by the root command and shared with every subcommand."""

    verbosity: int = 0
    show_tracebacks: bool = False
    config_path: Path | None = None
    project_dir: Path | None = None
    listing_cache: ListingCache | None = field(default=None, repr=False)
    _config: FontLockConfig | None = field(default=None, init=False, repr=False)
    _console: Console | None = field(default=None, init=False, repr=False)
    _err_console: Console | None = field(default=None, init=False, repr=False)

    @property
    def console(self) -> Console:
        self._console = _bind_console(self._console, sys.stdout)
        return self._console

    @property
    def err_console(self) -> Console:
        self._err_console = _bind_console(self._err_console, sys.stderr, highlight=False)
        return self._err_console

    @property
    def config(self) -> FontLockConfig:
        """Load the configuration on first access and reuse it afterwards."""
        if self._config is None:
            from fontlock.core.config import load_config

            self._config = load_config(self.config_path, project_dir=self.project_dir)
        return self._config


_STATE_VAR: ContextVar[CLIState | None] = ContextVar("fontlock_cli_state", default=None)


def get_cli_state(ctx: click.Context | None = None, *, create: bool = True) -> CLIState:
    """Return the state attached to the active click context, or the last one bound.

    Raises ``RuntimeError`` when ``create`` is false and no state exists yet.
    """
    ctx = ctx or click.get_current_context(silent=True)
    state = ctx.find_object(CLIState) if ctx is not None else None
    if state is None and ctx is not None and create:
        state = ctx.ensure_object(CLIState)
    if state is None:
        state = _STATE_VAR.get()
    if state is None:
        if not create:
            raise RuntimeError("CLI state is not initialised for this context.")
        state = CLIState()
    _STATE_VAR.set(state)
    return state


def set_cli_state(
    *,
    ctx: click.Context | None = None,
    verbosity: int | None = None,
    debug: bool | None = None,
    config_path: Path | None = None,
    project_dir: Path | None = None,
) -> CLIState:
    """Record the root command options, returning the updated state."""
    state = get_cli_state(ctx)
    if verbosity is not None:
        state.verbosity = max(0, verbosity)
    if debug is not None:
        state.show_tracebacks = debug
    if config_path is not None or project_dir is not None:
        state.config_path = config_path
        state.project_dir = project_dir
        state._config = None
        state.listing_cache = None
    return state


def _diagnostics(exception: BaseException, verbosity: int) -> list[str]:
    if verbosity < 1:
        return []
    messages = exception_messages(exception)
    lines = [f"type: {type(exception).__name__}"]
    if verbosity >= 2 and len(messages) > 1:
        lines.append("caused by:")
        lines.extend(f"  {message}" for message in messages[1:])
    return lines


def render_message(
    level: str,
    message: str,
    *,
    exception: BaseException | None = None,
) -> None:
    """Print ``message`` for ``level``; ``-v`` and ``-vv`` add the exception chain."""
    state = get_cli_state()
    style = _LEVEL_STYLES.get(level)
    if style is None:
        state.console.log(message)
        return

    from rich.text import Text

    text = Text.assemble((f"{level}: ", f"bold {style}"), (message, style))
    if exception is not None:
        extra = _diagnostics(exception, state.verbosity)
        if extra:
            text.append("\n" + "\n".join(extra), style=style)
    state.err_console.print(text)


def emit_warning(message: str, *, exception: BaseException | None = None) -> None:
    render_message("warning", message, exception=exception)


def emit_error(message: str, *, exception: BaseException | None = None) -> None:
    render_message("error", message, exception=exception)


def debug_enabled() -> bool:
    """Return whether ``--debug`` asked for full tracebacks."""
    try:
        return get_cli_state(create=False).show_tracebacks
    except RuntimeError:
        return False
