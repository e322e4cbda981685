from __future__ import annotations

from collections.abc import Mapping
import json

import pytest

from fontlock.core.http import FetchResponse
from fontlock.fonts.catalog import DEFAULT_LISTING_CACHE


ROBOTO_CSS = """\
@font-face {
  font-family: 'Roboto';
  font-style: normal;
  font-weight: 400;
  src: url(https://fonts.gstatic.com/s/roboto/v1/roboto-400.woff2) format('woff2');
}
@font-face {
  font-family: 'Roboto';
  font-style: normal;
  font-weight: 700;
  src: url(https://fonts.gstatic.com/s/roboto/v1/roboto-700.woff2) format('woff2');
}
"""

LISTING = {
    "items": [
        {
            "family": "Roboto",
            "category": "sans-serif",
            "variants": ["100", "300", "regular", "italic", "500", "700", "700italic", "900"],
        },
        {
            "family": "Roboto Mono",
            "category": "monospace",
            "variants": ["regular", "700"],
        },
        {
            "family": "Ubuntu",
            "category": "sans-serif",
            "variants": ["300", "regular", "500", "700"],
        },
    ]
}


class FakeTransport:
    """In-memory transport answering from a route table keyed by URL prefix."""

    def __init__(self, routes: Mapping[str, FetchResponse] | None = None) -> None:
        self.routes: dict[str, FetchResponse] = dict(routes or {})
        self.calls: list[tuple[str, dict[str, str]]] = []

    def add(self, prefix: str, body: str | bytes = b"", status: int = 200) -> None:
        content = body.encode("utf-8") if isinstance(body, str) else body
        self.routes[prefix] = FetchResponse(status=status, content=content)

    def fail(self, prefix: str, error: str = "connection refused") -> None:
        self.routes[prefix] = FetchResponse(status=0, error=error)

    def fetch(self, url: str, headers: Mapping[str, str] | None = None) -> FetchResponse:
        self.calls.append((url, dict(headers or {})))
        # Longest prefix wins so specific URLs can override a host-wide route.
        for prefix in sorted(self.routes, key=len, reverse=True):
            if url.startswith(prefix):
                return self.routes[prefix]
        return FetchResponse(status=404)

    @property
    def urls(self) -> list[str]:
        return [url for url, _ in self.calls]


@pytest.fixture(autouse=True)
def _clear_listing_cache():
    DEFAULT_LISTING_CACHE.clear()
    yield
    DEFAULT_LISTING_CACHE.clear()


@pytest.fixture
def transport() -> FakeTransport:
    fake = FakeTransport()
    fake.add("https://fonts.googleapis.com/css2", ROBOTO_CSS)
    fake.add("https://fonts.gstatic.com/", b"\x00font-bytes")
    fake.add("https://www.googleapis.com/webfonts/v1/webfonts", json.dumps(LISTING))
    return fake
