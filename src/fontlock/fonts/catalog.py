"""Client for the remote font catalog (listing and stylesheet endpoints)."""

from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
import json
import time
from typing import Any
from urllib.parse import urlencode

from fontlock.core.exceptions import ConfigurationError, TransportError, UpstreamError
from fontlock.core.http import FetchResponse, Transport
from fontlock.fonts.variants import CSS_API, ITALIC, build_stylesheet_url


LISTING_API = "https://www.googleapis.com/webfonts/v1/webfonts"
LISTING_CACHE_KEY = "fonts_list"
DEFAULT_CACHE_TTL = 3600
# The stylesheet endpoint serves woff2 only to browser-like agents.
STYLESHEET_USER_AGENT = "Mozilla/5.0 (compatible; fontlock)"

_MISSING_KEY = (
    "Font catalog API key is required. Get a free key at "
    "https://console.cloud.google.com/apis/credentials and set 'api_key' in "
    "fontlock.yml or the FONTLOCK_API_KEY environment variable."
)


@dataclass(slots=True)
class _CacheEntry:
    data: Any
    expires: float


@dataclass(slots=True)
class ListingCache:
    """In-memory TTL cache for catalog listings, keyed by logical operation."""

    ttl: float = DEFAULT_CACHE_TTL
    clock: Callable[[], float] = time.monotonic
    _entries: dict[str, _CacheEntry] = field(default_factory=dict, init=False, repr=False)

    def get(self, key: str) -> Any | None:
        entry = self._entries.get(key)
        if entry is None:
            return None
        if entry.expires < self.clock():
            del self._entries[key]
            return None
        return entry.data

    def put(self, key: str, data: Any) -> None:
        self._entries[key] = _CacheEntry(data=data, expires=self.clock() + self.ttl)

    def clear(self) -> None:
        self._entries.clear()

    def __contains__(self, key: str) -> bool:
        return self.get(key) is not None


# Shared by every client in the process unless a cache is injected.
DEFAULT_LISTING_CACHE = ListingCache()


def _raise_for_response(response: FetchResponse, url: str, what: str) -> None:
    if response.error is not None:
        raise TransportError(f"Failed to reach {what} '{url}': {response.error}", url=url)
    if not 200 <= response.status < 300:
        raise UpstreamError(
            f"{what.capitalize()} '{url}' answered HTTP {response.status}",
            url=url,
            status=response.status,
        )


def parse_variant(variant: str) -> tuple[int, str]:
    """Map catalog variant names (``regular``, ``700italic``) to ``(weight, style)``."""
    style = "normal"
    weight_text = variant
    if variant.endswith(ITALIC):
        style = ITALIC
        weight_text = variant[: -len(ITALIC)]
    try:
        weight = int(weight_text)
    except ValueError:
        weight = 0
    return (weight or 400, style)


class CatalogClient:
    """Query the catalog listing and generate family stylesheets."""

    def __init__(
        self,
        transport: Transport,
        *,
        api_key: str | None = None,
        cache: ListingCache | None = None,
        listing_url: str = LISTING_API,
        stylesheet_url: str = CSS_API,
    ) -> None:
        self.transport = transport
        self.api_key = api_key
        self.cache = cache if cache is not None else DEFAULT_LISTING_CACHE
        self.listing_url = listing_url
        self.stylesheet_url = stylesheet_url

    # ------------------------------------------------------------ stylesheets

    def fetch_stylesheet(
        self,
        family: str,
        weights: Sequence[int | str],
        styles: Sequence[str],
        display: str = "swap",
    ) -> str:
        """Return the generated ``@font-face`` stylesheet for a family."""
        url = build_stylesheet_url(family, weights, styles, display, base=self.stylesheet_url)
        response = self.transport.fetch(url, {"User-Agent": STYLESHEET_USER_AGENT})
        _raise_for_response(response, url, "stylesheet endpoint")
        return response.text

    def download(self, url: str) -> bytes:
        """Return the raw bytes behind ``url`` (font binaries)."""
        response = self.transport.fetch(url)
        _raise_for_response(response, url, "font host")
        return response.content

    # ---------------------------------------------------------------- listing

    def search(self, query: str = "", max_results: int = 20) -> list[dict[str, Any]]:
        """Filter the full listing by case-insensitive family substring."""
        fonts = self._listing()
        if query:
            needle = query.lower()
            fonts = [font for font in fonts if needle in str(font.get("family", "")).lower()]
        return fonts[: max(0, max_results)]

    def get_metadata(self, family: str) -> dict[str, Any] | None:
        """Return the listing entry for ``family`` or ``None`` when unknown."""
        for font in self._listing():
            if font.get("family") == family:
                return font
        return None

    def get_variants(self, family: str) -> tuple[list[int], list[str]]:
        """Return the weights and styles the catalog offers for ``family``."""
        metadata = self.get_metadata(family)
        if not metadata:
            return ([], [])
        weights: list[int] = []
        styles = ["normal"]
        for variant in metadata.get("variants") or []:
            if not isinstance(variant, str):
                continue
            weight, style = parse_variant(variant)
            if weight not in weights:
                weights.append(weight)
            if style not in styles:
                styles.append(style)
        return (weights, styles)

    def _listing(self) -> list[dict[str, Any]]:
        if not self.api_key:
            raise ConfigurationError(_MISSING_KEY)

        cached = self.cache.get(LISTING_CACHE_KEY)
        if cached is not None:
            return cached

        url = f"{self.listing_url}?{urlencode({'key': self.api_key, 'sort': 'popularity'})}"
        response = self.transport.fetch(url, {"Accept": "application/json"})
        # Keep the credential out of error messages.
        _raise_for_response(response, self.listing_url, "catalog listing")
        try:
            payload = json.loads(response.content)
        except ValueError as exc:
            raise UpstreamError(
                f"Catalog listing '{self.listing_url}' returned invalid JSON",
                url=self.listing_url,
                status=response.status,
            ) from exc

        items = payload.get("items") if isinstance(payload, dict) else None
        fonts = [item for item in items or [] if isinstance(item, dict)]
        self.cache.put(LISTING_CACHE_KEY, fonts)
        return fonts


__all__ = [
    "DEFAULT_LISTING_CACHE",
    "LISTING_API",
    "CatalogClient",
    "ListingCache",
    "parse_variant",
]
