"""Re-download every locked font, for instance on a fresh deployment."""

from __future__ import annotations

import typer

from fontlock.core.exceptions import FetchError, ManifestError, exception_hint
from fontlock.fonts.logging import FontPipelineLogger
from fontlock.fonts.manifest import load_manifest

from .._options import ManifestOption
from ..state import emit_error, emit_warning, get_cli_state
from ..utils import build_catalog, build_fetcher, current_config, display_path


def warm_cache(manifest: ManifestOption = None) -> None:
    """Fetch the assets of every manifest font, continuing past failures."""
    config = current_config()
    console = get_cli_state().console

    manifest_file = manifest or config.manifest_file
    if not manifest_file.is_file():
        emit_error(
            f"Manifest file not found: {display_path(manifest_file, config.project_dir)}. "
            'Run "fontlock lock" first.'
        )
        raise typer.Exit(code=1)
    try:
        locked = load_manifest(manifest_file)
    except ManifestError as exc:
        emit_error(str(exc), exception=exc)
        raise typer.Exit(code=1) from exc

    logger = FontPipelineLogger()
    fetcher = build_fetcher(config, build_catalog(config), logger)
    succeeded = 0
    failed: list[str] = []

    with logger.progress("Warming cache", total=len(locked.fonts)) as advance:
        for name, entry in locked.fonts.items():
            advance(step=0, description=f"Downloading {name}")
            try:
                fetcher.resolve(
                    name,
                    entry.weights or [400],
                    entry.styles or ["normal"],
                    config.defaults.display,
                    entry.monospace,
                )
            except (FetchError, OSError) as exc:
                failed.append(name)
                emit_warning(
                    f'Failed to download font "{name}": {exception_hint(exc)}', exception=exc
                )
            else:
                succeeded += 1
            advance(step=1)

    if not failed:
        console.print(f"[green]Warmed cache for {succeeded} font(s).[/green]")
        return
    emit_warning(f"Cache warmed with {succeeded} success(es) and {len(failed)} failure(s).")
    raise typer.Exit(code=1)


__all__ = ["warm_cache"]
