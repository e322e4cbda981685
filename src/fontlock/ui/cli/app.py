"""Typer application wiring for the fontlock CLI."""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

import typer

from fontlock.version import get_version

from .commands import import_font, lock, prune, search, status, warm_cache
from .state import debug_enabled, emit_error, get_cli_state, set_cli_state


app = typer.Typer(
    help="Lock template webfonts into a local, reproducible cache.",
    context_settings={"help_option_names": ["--help", "-h"]},
    no_args_is_help=True,
)


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"fontlock {get_version()}")
        raise typer.Exit()


@app.callback()
def configure(
    ctx: typer.Context,
    config: Annotated[
        Path | None,
        typer.Option(
            "--config",
            "-c",
            help="Configuration file (defaults to fontlock.yml in the project directory).",
            exists=True,
            dir_okay=False,
            readable=True,
        ),
    ] = None,
    project_dir: Annotated[
        Path | None,
        typer.Option(
            "--project-dir",
            "-p",
            help="Project root used to resolve relative paths.",
            file_okay=False,
        ),
    ] = None,
    verbose: Annotated[
        int,
        typer.Option(
            "--verbose",
            "-v",
            count=True,
            help="Increase CLI verbosity. Combine multiple times for additional diagnostics.",
        ),
    ] = 0,
    debug: Annotated[
        bool,
        typer.Option(
            "--debug/--no-debug",
            help="Show full tracebacks when an unexpected error occurs.",
        ),
    ] = False,
    version: Annotated[
        bool,
        typer.Option(
            "--version",
            callback=_version_callback,
            is_eager=True,
            help="Print the version and exit.",
        ),
    ] = False,
) -> None:
    """Lock template webfonts into a local, reproducible cache."""
    set_cli_state(
        ctx=ctx,
        verbosity=verbose,
        debug=debug,
        config_path=config,
        project_dir=project_dir,
    )


app.command("lock")(lock)
app.command("prune")(prune)
app.command("import")(import_font)
app.command("search")(search)
app.command("status")(status)
app.command("warm-cache")(warm_cache)


def main() -> None:
    """Entry point compatible with console scripts."""
    try:
        app()
    except typer.Exit:
        raise
    except KeyboardInterrupt as exc:
        if debug_enabled():
            raise
        emit_error("Operation cancelled by user.", exception=exc)
        raise typer.Exit(code=1) from exc
    except SystemExit:
        raise
    except Exception as exc:  # pragma: no cover - defensive catch-all
        state = get_cli_state()
        if state.show_tracebacks:
            from rich.traceback import Traceback

            tb = Traceback.from_exception(
                type(exc),
                exc,
                exc.__traceback__,
                show_locals=state.verbosity >= 2,
            )
            state.err_console.print(tb)
        else:
            emit_error(str(exc), exception=exc)
        raise typer.Exit(code=1) from exc


__all__ = ["app", "main"]
