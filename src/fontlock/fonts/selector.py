"""Render-time choice between locally locked assets and the remote catalog."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
import json
import logging
from pathlib import Path
from typing import TYPE_CHECKING

from fontlock.fonts.variants import CSS_API, build_stylesheet_url


if TYPE_CHECKING:
    from fontlock.core.config import FontLockConfig


logger = logging.getLogger(__name__)


@dataclass(slots=True)
class SelectorCache:
    """Lowercase family index of a manifest, tagged with the mtime it came from."""

    mtime: int | None = None
    index: dict[str, str] = field(default_factory=dict)

    def reset(self) -> None:
        self.mtime = None
        self.index = {}


@dataclass(slots=True)
class FontSelection:
    """Where a renderer should load ``family`` from.

    ``preconnect`` is only ever set for remote stylesheets, telling the renderer
    to emit connection hints for the catalog hosts.
    """

    family: str
    local: bool
    href: str
    preconnect: bool = False


def _read_index(path: Path) -> dict[str, str]:
    payload = json.loads(path.read_text(encoding="utf-8"))
    fonts = payload.get("fonts") if isinstance(payload, dict) else None
    if not isinstance(fonts, dict):
        raise ValueError("manifest has no 'fonts' object")
    index: dict[str, str] = {}
    for name, entry in fonts.items():
        css = entry.get("css") if isinstance(entry, dict) else None
        index[str(name).lower()] = str(css) if css else ""
    return index


class CacheSelector:
    """Decide per render whether a family is served from the local lock.

    The manifest is stat'ed on every lookup and only re-parsed when its
    modification time moves. Lookup failures never propagate: a missing or
    corrupt manifest simply means "use the remote stylesheet".
    """

    def __init__(
        self,
        manifest_file: Path,
        cache: SelectorCache | None = None,
        *,
        enabled: bool = True,
        public_prefix: str = "/",
        catalog_url: str = CSS_API,
        display: str = "swap",
        preconnect: bool = False,
    ) -> None:
        self.manifest_file = Path(manifest_file)
        self.cache = cache if cache is not None else SelectorCache()
        self.enabled = enabled
        self.public_prefix = public_prefix
        self.catalog_url = catalog_url
        self.display = display
        self.preconnect = preconnect

    @classmethod
    def from_config(
        cls, config: FontLockConfig, cache: SelectorCache | None = None
    ) -> CacheSelector:
        """Build a selector honouring ``use_locked_fonts`` and the URL settings."""
        return cls(
            config.manifest_file,
            cache,
            enabled=config.use_locked_fonts,
            public_prefix=config.public_prefix,
            display=config.defaults.display,
            preconnect=config.defaults.preconnect,
        )

    def _index(self) -> dict[str, str] | None:
        try:
            mtime = self.manifest_file.stat().st_mtime_ns
            if self.cache.mtime != mtime:
                index = _read_index(self.manifest_file)
                self.cache.index = index
                self.cache.mtime = mtime
        except (OSError, ValueError, AttributeError) as exc:
            logger.debug("Font manifest %s unavailable: %s", self.manifest_file, exc)
            self.cache.reset()
            return None
        return self.cache.index

    def should_use_local(self, family: str) -> bool:
        if not self.enabled:
            return False
        index = self._index()
        return index is not None and family.lower() in index

    def asset_path(self, family: str) -> str | None:
        """Return the public URL of the family's locked stylesheet."""
        if not self.should_use_local(family):
            return None
        css = self.cache.index.get(family.lower(), "")
        if not css:
            return None
        return f"{self.public_prefix.rstrip('/')}/{css.lstrip('/')}"

    def select(
        self,
        family: str,
        weights: Sequence[int | str],
        styles: Sequence[str],
        display: str | None = None,
    ) -> FontSelection:
        local_href = self.asset_path(family)
        if local_href is not None:
            return FontSelection(family=family, local=True, href=local_href)
        remote = build_stylesheet_url(
            family, weights, styles, display or self.display, base=self.catalog_url
        )
        return FontSelection(
            family=family, local=False, href=remote, preconnect=self.preconnect
        )


__all__ = ["CacheSelector", "FontSelection", "SelectorCache"]
