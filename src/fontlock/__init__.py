"""Lock webfonts declared in templates into a local, reproducible cache."""

from __future__ import annotations

from fontlock.core.config import FontLockConfig, load_config
from fontlock.core.exceptions import (
    ConfigurationError,
    FetchError,
    FontLockError,
    ManifestError,
    TransportError,
    UpstreamError,
)
from fontlock.fonts import (
    AssetFetcher,
    CacheSelector,
    CatalogClient,
    DeclarationScanner,
    ManifestBuilder,
)
from fontlock.version import get_version


__version__ = get_version()

__all__ = [
    "AssetFetcher",
    "CacheSelector",
    "CatalogClient",
    "ConfigurationError",
    "DeclarationScanner",
    "FetchError",
    "FontLockConfig",
    "FontLockError",
    "ManifestBuilder",
    "ManifestError",
    "TransportError",
    "UpstreamError",
    "__version__",
    "get_version",
    "load_config",
]
