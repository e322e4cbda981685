"""Scan templates and lock every declared font into the local cache."""

from __future__ import annotations

from rich import box
from rich.table import Table
import typer

from fontlock.core.exceptions import FetchError, ManifestError, exception_hint
from fontlock.fonts.logging import FontPipelineLogger

from .._options import TemplateDirsArgument
from ..state import emit_error, emit_warning, get_cli_state
from ..utils import (
    build_catalog,
    build_fetcher,
    build_manifest_builder,
    current_config,
    display_path,
    format_list,
    resolve_template_dirs,
    scan_templates,
)


def lock(template_dirs: TemplateDirsArgument = None) -> None:
    """Download every font declared in the templates and write the manifest."""
    config = current_config()
    console = get_cli_state().console

    directories = resolve_template_dirs(config, template_dirs)
    if not directories:
        emit_error("No template directories found. Pass template directories as arguments.")
        raise typer.Exit(code=1)

    console.print("[bold]Scanning templates[/bold]")
    for directory in directories:
        console.print(f"  • {display_path(directory, config.project_dir)}")

    declarations = scan_templates(config, directories)
    if not declarations:
        emit_warning(f"No {config.keyword}() calls found in templates.")
        return

    table = Table(title="Found fonts", box=box.SIMPLE, header_style="bold cyan")
    table.add_column("Font", style="magenta")
    table.add_column("Weights")
    table.add_column("Styles")
    table.add_column("Monospace")
    for name, declaration in declarations.items():
        table.add_row(
            name,
            format_list(declaration.weights),
            format_list(declaration.styles),
            "yes" if declaration.monospace else "no",
        )
    console.print(table)

    logger = FontPipelineLogger()
    catalog = build_catalog(config)
    builder = build_manifest_builder(config, build_fetcher(config, catalog, logger))

    with logger.progress("Downloading fonts", total=len(declarations)) as advance:

        def _on_font(index: int, total: int, family: str) -> None:
            advance(step=0 if index == 1 else 1, description=f"Downloading {family}")

        try:
            manifest = builder.build(declarations, progress=_on_font)
        except FetchError as exc:
            family = exc.family or "unknown"
            emit_error(
                f'Failed to lock font "{family}": {exception_hint(exc)}',
                exception=exc,
            )
            raise typer.Exit(code=1) from exc
        except ManifestError as exc:
            emit_error(str(exc), exception=exc)
            raise typer.Exit(code=1) from exc
        advance(step=1, description="Done")

    console.print(
        f"[green]Locked {len(manifest.fonts)} font(s) into "
        f"{display_path(config.manifest_file, config.project_dir)}[/green]"
    )
    if not config.use_locked_fonts:
        console.print("Enable locked fonts by setting 'use_locked_fonts: true' in fontlock.yml.")


__all__ = ["lock"]
