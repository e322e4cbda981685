"""Report configuration, manifest contents and locked-font readiness."""

from __future__ import annotations

from rich import box
from rich.table import Table
import typer

from fontlock.core.exceptions import ManifestError
from fontlock.fonts.manifest import load_manifest

from ..state import emit_error, emit_warning, get_cli_state
from ..utils import build_selector, current_config, display_path, format_list


def _yes_no(value: bool) -> str:
    return "yes" if value else "no"


def status() -> None:
    """Show where fonts are locked and whether renders can use them."""
    config = current_config()
    console = get_cli_state().console

    settings = Table(title="Settings", box=box.SIMPLE, header_style="bold cyan")
    settings.add_column("Setting", style="cyan")
    settings.add_column("Value")
    settings.add_row("Project", str(config.project_dir))
    settings.add_row("Use locked fonts", _yes_no(config.use_locked_fonts))
    settings.add_row("Keyword", f"{config.keyword}()")
    settings.add_row("API key", "set" if config.api_key else "missing")
    console.print(settings)

    paths = Table(title="Paths", box=box.SIMPLE, header_style="bold cyan")
    paths.add_column("Setting", style="cyan")
    paths.add_column("Value")
    paths.add_column("Exists")
    paths.add_row(
        "Fonts directory",
        display_path(config.fonts_dir, config.project_dir),
        _yes_no(config.fonts_dir.is_dir()),
    )
    paths.add_row(
        "Manifest file",
        display_path(config.manifest_file, config.project_dir),
        _yes_no(config.manifest_file.is_file()),
    )
    for directory in config.template_dirs:
        paths.add_row(
            "Templates",
            display_path(directory, config.project_dir),
            _yes_no(directory.is_dir()),
        )
    console.print(paths)

    if config.manifest_file.is_file():
        try:
            manifest = load_manifest(config.manifest_file)
        except ManifestError as exc:
            emit_error(f"Invalid manifest file: {exc}", exception=exc)
            raise typer.Exit(code=1) from exc
        if manifest.fonts:
            fonts = Table(title="Locked fonts", box=box.SIMPLE, header_style="bold cyan")
            fonts.add_column("Font", style="magenta")
            fonts.add_column("Monospace")
            fonts.add_column("Weights")
            fonts.add_column("Styles")
            fonts.add_column("Served from")
            selector = build_selector(config)
            for name, entry in manifest.fonts.items():
                fonts.add_row(
                    name,
                    _yes_no(entry.monospace),
                    format_list(entry.weights),
                    format_list(entry.styles),
                    "local" if selector.should_use_local(name) else "remote",
                )
            console.print(fonts)
            console.print(f"Found {len(manifest.fonts)} locked font(s).")
        else:
            emit_warning("No fonts locked yet.")
        if manifest.generated_at:
            console.print(f"Last locked: {manifest.generated_at}")
    else:
        emit_warning('No manifest file found. Run "fontlock lock" to generate it.')

    checks = [
        ("Use locked fonts is enabled", config.use_locked_fonts),
        ("Manifest file exists", config.manifest_file.is_file()),
        ("Fonts directory exists", config.fonts_dir.is_dir()),
    ]
    readiness = Table(title="Locked fonts readiness", box=box.SIMPLE, header_style="bold cyan")
    readiness.add_column("Check")
    readiness.add_column("Result")
    for label, passed in checks:
        readiness.add_row(label, "[green]ok[/green]" if passed else "[red]failed[/red]")
    console.print(readiness)

    if all(passed for _, passed in checks):
        console.print("[green]Ready to use locked fonts.[/green]")
    else:
        console.print(
            "Not ready to use locked fonts: run 'fontlock lock' and set "
            "'use_locked_fonts: true' in fontlock.yml."
        )


__all__ = ["status"]
