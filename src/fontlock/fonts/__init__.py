"""Webfont locking façade.

Architecture
: `DeclarationScanner` walks template directories and collects every
  ``gfonts(...)`` call site, unioning the weights and styles requested for a
  family. `slice_arguments` splits call arguments without a template grammar.
: `CatalogClient` talks to the remote catalog through an injected `Transport`:
  it generates family stylesheets and caches the full listing in a
  `ListingCache` for search and metadata lookups.
: `AssetFetcher` downloads the binaries referenced by a stylesheet, names them
  deterministically and rewrites the stylesheet to point at the local copies.
: `ManifestBuilder` resolves every declaration in sequence and persists the
  manifest only when all of them succeed. `prune_manifest` drops families the
  templates no longer use.
: `CacheSelector` answers, per render, whether a family is served locally.
  It never raises; a missing or corrupt manifest means the remote stylesheet.

Goal
: Serve template fonts from reproducible, self-hosted assets once locked, while
  falling back to the live catalog whenever the lock is missing or stale.
"""

from fontlock.fonts.arguments import ArgumentSlicer, slice_arguments
from fontlock.fonts.catalog import CatalogClient, ListingCache
from fontlock.fonts.fetcher import AssetFetcher, DownloadedAsset, FontResolution
from fontlock.fonts.logging import FontPipelineLogger
from fontlock.fonts.manifest import (
    FontManifestEntry,
    Manifest,
    ManifestBuilder,
    PruneResult,
    load_manifest,
    prune_manifest,
    save_manifest,
)
from fontlock.fonts.scanner import DeclarationScanner, FontDeclaration
from fontlock.fonts.selector import CacheSelector, FontSelection, SelectorCache


__all__ = [
    "ArgumentSlicer",
    "AssetFetcher",
    "CacheSelector",
    "CatalogClient",
    "DeclarationScanner",
    "DownloadedAsset",
    "FontDeclaration",
    "FontManifestEntry",
    "FontPipelineLogger",
    "FontResolution",
    "FontSelection",
    "ListingCache",
    "Manifest",
    "ManifestBuilder",
    "PruneResult",
    "SelectorCache",
    "load_manifest",
    "prune_manifest",
    "save_manifest",
    "slice_arguments",
]
