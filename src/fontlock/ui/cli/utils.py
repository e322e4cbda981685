"""Auxiliary helpers used by CLI commands."""

from __future__ import annotations

from collections.abc import Iterable
from pathlib import Path

import typer

from fontlock.core.config import FontLockConfig
from fontlock.core.exceptions import ConfigurationError
from fontlock.core.http import RequestsTransport, Transport
from fontlock.fonts.catalog import CatalogClient, ListingCache
from fontlock.fonts.fetcher import AssetFetcher
from fontlock.fonts.logging import FontPipelineLogger
from fontlock.fonts.manifest import ManifestBuilder
from fontlock.fonts.scanner import DeclarationScanner, FontDeclaration
from fontlock.fonts.selector import CacheSelector, SelectorCache

from .state import emit_error, get_cli_state


def current_config() -> FontLockConfig:
    """Return the configuration bound to the CLI state, exiting on invalid settings."""
    try:
        return get_cli_state().config
    except ConfigurationError as exc:
        emit_error(str(exc), exception=exc)
        raise typer.Exit(code=1) from exc


def create_transport() -> Transport:
    """Return the transport shared by the commands of one invocation."""
    return RequestsTransport()


def build_catalog(config: FontLockConfig, transport: Transport | None = None) -> CatalogClient:
    """Return a catalog client sharing the listing cache of the current invocation."""
    state = get_cli_state()
    if state.listing_cache is None:
        state.listing_cache = ListingCache(ttl=config.cache_ttl)
    return CatalogClient(
        transport or create_transport(), api_key=config.api_key, cache=state.listing_cache
    )


def build_fetcher(
    config: FontLockConfig,
    catalog: CatalogClient,
    logger: FontPipelineLogger | None = None,
) -> AssetFetcher:
    return AssetFetcher(catalog, config.fonts_dir, logger=logger)


def build_manifest_builder(
    config: FontLockConfig,
    fetcher: AssetFetcher,
) -> ManifestBuilder:
    return ManifestBuilder(
        fetcher,
        config.manifest_file,
        config.project_dir,
        default_display=config.defaults.display,
        logger=fetcher.logger,
    )


def build_selector(config: FontLockConfig, cache: SelectorCache | None = None) -> CacheSelector:
    return CacheSelector.from_config(config, cache)


def resolve_template_dirs(config: FontLockConfig, directories: Iterable[Path] | None) -> list[Path]:
    """Return explicit directories, anchored on the project, or the configured ones."""
    explicit = [Path(entry) for entry in directories or []]
    if not explicit:
        return list(config.template_dirs)
    return [entry if entry.is_absolute() else config.project_dir / entry for entry in explicit]


def scan_templates(config: FontLockConfig, directories: Iterable[Path]) -> dict[str, FontDeclaration]:
    scanner = DeclarationScanner(keyword=config.keyword, suffixes=config.template_suffixes)
    return scanner.scan(directories)


def display_path(path: Path, base: Path) -> str:
    """Render ``path`` relative to ``base`` when possible."""
    try:
        return path.resolve().relative_to(base.resolve()).as_posix()
    except ValueError:
        return str(path)


def format_list(values: Iterable[object]) -> str:
    sequence = [str(value) for value in values]
    return ", ".join(sequence) if sequence else "-"


__all__ = [
    "build_catalog",
    "build_fetcher",
    "build_manifest_builder",
    "build_selector",
    "create_transport",
    "current_config",
    "display_path",
    "format_list",
    "resolve_template_dirs",
    "scan_templates",
]
