"""Validate a single family against the catalog and download it."""

from __future__ import annotations

from typing import Annotated

from rich import box
from rich.table import Table
import typer

from fontlock.core.exceptions import (
    ConfigurationError,
    FetchError,
    TransportError,
    UpstreamError,
    exception_hint,
)
from fontlock.fonts.logging import FontPipelineLogger
from fontlock.fonts.variants import normalize_values

from .._options import DryRunOption
from ..state import emit_error, emit_warning, get_cli_state
from ..utils import build_catalog, build_fetcher, current_config, display_path, format_list


def import_font(
    name: Annotated[str, typer.Argument(help='Font family name, e.g. "Roboto".')],
    weights: Annotated[
        str,
        typer.Option("--weights", "-w", help="Weights, comma or space separated."),
    ] = "400",
    styles: Annotated[
        str,
        typer.Option("--styles", "-s", help="Styles, comma or space separated."),
    ] = "normal",
    display: Annotated[
        str | None,
        typer.Option("--display", "-d", help="font-display value (defaults to the configured one)."),
    ] = None,
    monospace: Annotated[
        bool,
        typer.Option("--monospace", help="Generate usage rules for code elements."),
    ] = False,
    dry_run: DryRunOption = False,
) -> None:
    """Download one font family for local use."""
    config = current_config()
    console = get_cli_state().console

    requested_styles = normalize_values(styles) or ["normal"]
    try:
        requested_weights = [int(value) for value in normalize_values(weights)] or [400]
    except ValueError as exc:
        raise typer.BadParameter(f"Invalid weights '{weights}'.", param_hint="--weights") from exc
    font_display = display or config.defaults.display

    info = Table(title=f"Importing {name}", box=box.SIMPLE, show_header=False)
    info.add_column("Setting", style="cyan")
    info.add_column("Value")
    info.add_row("Weights", format_list(requested_weights))
    info.add_row("Styles", format_list(requested_styles))
    info.add_row("Display", font_display)
    console.print(info)

    logger = FontPipelineLogger()
    catalog = build_catalog(config)
    try:
        metadata = catalog.get_metadata(name)
    except (ConfigurationError, TransportError, UpstreamError) as exc:
        emit_error(str(exc), exception=exc)
        raise typer.Exit(code=1) from exc
    if metadata is None:
        emit_error(f'Font "{name}" not found in the catalog. Use "fontlock search" to find it.')
        raise typer.Exit(code=1)
    logger.info("Font validated (%s)", metadata.get("category", "unknown category"))

    if dry_run:
        console.print(f'Dry run: font "{name}" is available; nothing was downloaded.')
        return

    try:
        resolution = build_fetcher(config, catalog, logger).resolve(
            name, requested_weights, requested_styles, font_display, monospace
        )
    except FetchError as exc:
        emit_error(f'Failed to import font "{name}": {exception_hint(exc)}', exception=exc)
        raise typer.Exit(code=1) from exc

    console.print(f"[green]Imported font {name}[/green]")
    weights_table = Table(title="Weights", box=box.SIMPLE, header_style="bold cyan")
    weights_table.add_column("Type")
    weights_table.add_column("Weights")
    weights_table.add_row("Requested", format_list(requested_weights))
    weights_table.add_row("Downloaded", format_list(resolution.downloaded_weights))
    console.print(weights_table)

    missing = [weight for weight in requested_weights if weight not in resolution.downloaded_weights]
    if missing:
        emit_warning(f"Weights not available from the catalog: {format_list(missing)}")

    console.print(f"Files saved: {len(resolution.files)}")
    console.print(f"CSS file: {display_path(resolution.css_path, config.project_dir)}")


__all__ = ["import_font"]
