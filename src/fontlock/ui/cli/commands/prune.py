"""Remove locked fonts that no template declares anymore."""

from __future__ import annotations

from typing import Annotated

from rich import box
from rich.table import Table
import typer

from fontlock.core.exceptions import ManifestError
from fontlock.fonts.manifest import PruneResult, prune_manifest

from .._options import DryRunOption, TemplateDirsArgument
from ..state import emit_error, emit_warning, get_cli_state
from ..utils import current_config, display_path, resolve_template_dirs, scan_templates


def prune(
    template_dirs: TemplateDirsArgument = None,
    dry_run: DryRunOption = False,
    yes: Annotated[
        bool,
        typer.Option("--yes", "-y", help="Do not ask for confirmation."),
    ] = False,
) -> None:
    """Drop manifest entries, binaries and stylesheets of unused fonts."""
    config = current_config()
    console = get_cli_state().console

    if not config.manifest_file.is_file():
        emit_warning(
            f"No manifest at {display_path(config.manifest_file, config.project_dir)}; "
            "nothing to prune."
        )
        return

    directories = resolve_template_dirs(config, template_dirs)
    if not directories:
        emit_error("No template directories found. Pass template directories as arguments.")
        raise typer.Exit(code=1)
    used = scan_templates(config, directories)

    def _run(preview: bool) -> PruneResult:
        try:
            return prune_manifest(
                config.manifest_file,
                config.fonts_dir,
                config.project_dir,
                used,
                dry_run=preview,
            )
        except ManifestError as exc:
            emit_error(str(exc), exception=exc)
            raise typer.Exit(code=1) from exc

    plan = _run(preview=True)
    if not plan.removed:
        console.print("[green]Every locked font is still used; nothing to prune.[/green]")
        return

    table = Table(title="Unused fonts", box=box.SIMPLE, header_style="bold cyan")
    table.add_column("Font", style="magenta")
    for name in plan.removed:
        table.add_row(name)
    console.print(table)
    for path in plan.deleted_files:
        console.print(f"  - {display_path(path, config.project_dir)}")

    if dry_run:
        console.print(f"Dry run: {len(plan.removed)} font(s) would be removed.")
        return

    if not yes and not typer.confirm(f"Remove {len(plan.removed)} unused font(s)?", default=False):
        console.print("Aborted.")
        return

    result = _run(preview=False)
    console.print(
        f"[green]Removed {len(result.removed)} font(s); {len(result.kept)} remain locked.[/green]"
    )


__all__ = ["prune"]
