"""Download a family's binaries and rewrite its stylesheet to local files.

Weights and styles are assigned to binaries round-robin in download order
(``weights[i % len(weights)]``, italic on odd indexes when italic was
requested). This relies on the catalog emitting ``@font-face`` blocks in the
same order the variant query was generated; the ``@font-face`` descriptors
themselves are not parsed.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
from pathlib import Path, PurePosixPath
import re
from urllib.parse import urlparse

from fontlock.core.exceptions import FetchError, TransportError, UpstreamError
from fontlock.fonts.catalog import CatalogClient
from fontlock.fonts.logging import FontPipelineLogger
from fontlock.fonts.variants import DEFAULT_WEIGHT, ITALIC, sanitize_family, usage_stylesheet


FONT_EXTENSIONS = frozenset({"woff2", "woff", "ttf", "eot", "otf"})
DEFAULT_EXTENSION = "woff2"

_URL_PATTERN = re.compile(r"url\(([^)]+)\)")


@dataclass(slots=True)
class DownloadedAsset:
    """A binary fetched for one ``url(...)`` occurrence."""

    filename: str
    content: bytes = field(repr=False)
    weight: int
    style: str
    url: str
    path: Path


@dataclass(slots=True)
class FontResolution:
    """Everything written to disk for one family."""

    family: str
    files: dict[str, Path]
    css: str
    css_path: Path
    downloaded_weights: list[int]
    assets: list[DownloadedAsset] = field(default_factory=list)


def guess_extension(url: str) -> str:
    """Return the font extension of the URL's last path segment, ``woff2`` otherwise."""
    segment = PurePosixPath(urlparse(url).path).name
    if "." in segment:
        candidate = segment.rsplit(".", 1)[1].lower()
        if candidate in FONT_EXTENSIONS:
            return candidate
    return DEFAULT_EXTENSION


def unique_filename(stem: str, extension: str, used: set[str]) -> str:
    """Return ``stem.ext`` or the first free ``stem-N.ext``."""
    candidate = f"{stem}.{extension}"
    counter = 0
    while candidate in used:
        counter += 1
        candidate = f"{stem}-{counter}.{extension}"
    used.add(candidate)
    return candidate


class AssetFetcher:
    """Resolve a family into local binaries plus a combined stylesheet."""

    def __init__(
        self,
        catalog: CatalogClient,
        fonts_dir: Path,
        *,
        logger: FontPipelineLogger | None = None,
    ) -> None:
        self.catalog = catalog
        self.fonts_dir = Path(fonts_dir)
        self.logger = logger or FontPipelineLogger()

    def resolve(
        self,
        family: str,
        weights: Sequence[int | str],
        styles: Sequence[str],
        display: str = "swap",
        monospace: bool = False,
    ) -> FontResolution:
        weight_list = [int(weight) for weight in weights]
        style_list = [str(style) for style in styles]
        sanitized = sanitize_family(family)
        self.fonts_dir.mkdir(parents=True, exist_ok=True)

        try:
            stylesheet = self.catalog.fetch_stylesheet(family, weight_list, style_list, display)
        except (TransportError, UpstreamError) as exc:
            raise FetchError(
                f'Failed to download CSS for font "{family}": {exc}', family=family
            ) from exc

        has_italic = ITALIC in style_list
        used: set[str] = set()
        files: dict[str, Path] = {}
        assets: list[DownloadedAsset] = []
        downloaded: list[int] = []

        def _replace(match: re.Match[str]) -> str:
            index = len(assets)
            url = match.group(1).strip().strip("'\"")
            try:
                content = self.catalog.download(url)
            except (TransportError, UpstreamError) as exc:
                raise FetchError(
                    f'Failed to download font file "{url}": {exc}', url=url, family=family
                ) from exc

            weight = weight_list[index % len(weight_list)] if weight_list else DEFAULT_WEIGHT
            italic = has_italic and index % 2 == 1
            stem = f"{sanitized}-{weight}"
            if italic:
                stem += "-italic"
            if monospace:
                stem += "-mono"
            filename = unique_filename(stem, guess_extension(url), used)

            path = self.fonts_dir / filename
            path.write_bytes(content)
            files[filename] = path
            assets.append(
                DownloadedAsset(
                    filename=filename,
                    content=content,
                    weight=weight,
                    style=ITALIC if italic else "normal",
                    url=url,
                    path=path,
                )
            )
            if weight not in downloaded:
                downloaded.append(weight)
            self.logger.debug("Downloaded %s -> %s", url, filename)
            return f'url("./{filename}")'

        rewritten = _URL_PATTERN.sub(_replace, stylesheet)
        usage = usage_stylesheet(family, weight_list, monospace=monospace)
        combined = f"{rewritten.rstrip()}\n\n{usage}\n"

        css_path = self.fonts_dir / f"{sanitized}.css"
        css_path.write_text(combined, encoding="utf-8")

        return FontResolution(
            family=family,
            files=files,
            css=combined,
            css_path=css_path,
            downloaded_weights=sorted(downloaded),
            assets=assets,
        )


__all__ = [
    "AssetFetcher",
    "DownloadedAsset",
    "FontResolution",
    "guess_extension",
    "unique_filename",
]
