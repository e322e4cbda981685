"""Search the remote catalog listing."""

from __future__ import annotations

from typing import Annotated

from rich import box
from rich.table import Table
import typer

from fontlock.core.exceptions import ConfigurationError, TransportError, UpstreamError

from ..state import emit_error, emit_warning, get_cli_state
from ..utils import build_catalog, current_config


PREVIEW_VARIANTS = 5


def _variant_preview(variants: list[str]) -> str:
    preview = ", ".join(variants[:PREVIEW_VARIANTS])
    return f"{preview}..." if len(variants) > PREVIEW_VARIANTS else preview


def search(
    query: Annotated[str, typer.Argument(help="Case-insensitive family substring.")] = "",
    max_results: Annotated[
        int,
        typer.Option("--max-results", "-m", min=1, help="Maximum number of results."),
    ] = 20,
) -> None:
    """List catalog families matching QUERY."""
    config = current_config()
    catalog = build_catalog(config)
    try:
        fonts = catalog.search(query, max_results)
    except (ConfigurationError, TransportError, UpstreamError) as exc:
        emit_error(str(exc), exception=exc)
        raise typer.Exit(code=1) from exc

    if not fonts:
        emit_warning(f'No fonts found matching "{query}".' if query else "The catalog is empty.")
        return

    table = Table(title="Catalog fonts", box=box.SIMPLE, header_style="bold cyan")
    table.add_column("Family", style="magenta")
    table.add_column("Variants", justify="right")
    table.add_column("Available")
    table.add_column("Category")
    for font in fonts:
        variants = [str(variant) for variant in font.get("variants") or []]
        table.add_row(
            str(font.get("family", "")),
            str(len(variants)),
            _variant_preview(variants),
            str(font.get("category", "")),
        )
    console = get_cli_state().console
    console.print(table)
    console.print(f"Showing {len(fonts)} font(s).")


__all__ = ["search"]
