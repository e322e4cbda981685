"""Shared Typer option definitions for CLI commands."""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

import typer


TemplateDirsArgument = Annotated[
    list[Path] | None,
    typer.Argument(
        metavar="TEMPLATE_DIR...",
        help=(
            "Directories scanned for font declarations. Defaults to the configured "
            "template directories (templates/ and views/ when present)."
        ),
        file_okay=False,
        dir_okay=True,
    ),
]

DryRunOption = Annotated[
    bool,
    typer.Option(
        "--dry-run",
        help="Report what would happen without touching the filesystem.",
    ),
]

ManifestOption = Annotated[
    Path | None,
    typer.Option(
        "--manifest",
        help="Manifest file to read instead of the configured one.",
        dir_okay=False,
    ),
]
