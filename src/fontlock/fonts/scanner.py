"""Discover font declarations inside template sources."""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Sequence
from dataclasses import dataclass, field
import logging
from pathlib import Path
import re

from fontlock.core.config import DEFAULT_TEMPLATE_SUFFIXES
from fontlock.fonts.arguments import slice_arguments, strip_quotes


logger = logging.getLogger(__name__)

DEFAULT_KEYWORD = "gfonts"
DEFAULT_WEIGHTS = ("400",)
DEFAULT_STYLES = ("normal",)
MAX_ARGUMENT_CHARS = 400

_BRACKET_LITERAL = re.compile(r"^\s*\[(.*)\]\s*$", re.DOTALL)


@dataclass(slots=True)
class FontDeclaration:
    """Weights and styles requested for a family across every call site."""

    name: str
    weights: list[str] = field(default_factory=list)
    styles: list[str] = field(default_factory=list)
    display: str | None = None
    monospace: bool = False

    def merge_weights(self, values: Iterable[str]) -> None:
        for value in values:
            if value not in self.weights:
                self.weights.append(value)

    def merge_styles(self, values: Iterable[str]) -> None:
        for value in values:
            if value not in self.styles:
                self.styles.append(value)


def parse_specifier(value: str) -> list[str]:
    """Parse ``[300, '400']`` or ``'300 400'`` into a list of strings."""
    match = _BRACKET_LITERAL.match(value)
    if match:
        return [strip_quotes(part) for part in slice_arguments(match.group(1))]
    return [piece.strip() for piece in strip_quotes(value).split(" ") if piece.strip()]


class DeclarationScanner:
    """Collect ``keyword(name, weights, styles, display, monospace)`` call sites.

    Repeated declarations of a family are unioned: the first call site that
    supplies weights or styles wins their position, later ones append. Bare
    call sites get ``400``/``normal`` only when nothing was recorded yet.
    """

    def __init__(
        self,
        *,
        keyword: str = DEFAULT_KEYWORD,
        suffixes: Sequence[str] = DEFAULT_TEMPLATE_SUFFIXES,
    ) -> None:
        self.keyword = keyword
        self.suffixes = tuple(suffix.lower() for suffix in suffixes)
        self._pattern = re.compile(rf"\b{re.escape(keyword)}\s*\(\s*([^)]*)\)")

    def scan(self, directories: Iterable[str | Path]) -> dict[str, FontDeclaration]:
        """Scan every template under ``directories`` and merge the declarations."""
        fonts: dict[str, FontDeclaration] = {}
        for path in self.iter_templates(directories):
            try:
                content = path.read_text(encoding="utf-8", errors="replace")
            except OSError as exc:
                logger.debug("Skipping unreadable template %s: %s", path, exc)
                continue
            self.scan_text(content, fonts)
        return fonts

    def iter_templates(self, directories: Iterable[str | Path]) -> Iterator[Path]:
        for directory in directories:
            root = Path(directory)
            if not root.is_dir():
                logger.debug("Skipping missing template directory %s", root)
                continue
            for path in sorted(root.rglob("*")):
                if path.is_file() and path.name.lower().endswith(self.suffixes):
                    yield path

    def scan_text(
        self,
        text: str,
        fonts: dict[str, FontDeclaration] | None = None,
    ) -> dict[str, FontDeclaration]:
        """Merge the declarations found in ``text`` into ``fonts``."""
        if fonts is None:
            fonts = {}
        for match in self._pattern.finditer(text):
            self._record(match.group(1)[:MAX_ARGUMENT_CHARS], fonts)
        return fonts

    def _record(self, raw: str, fonts: dict[str, FontDeclaration]) -> None:
        parts = slice_arguments(raw.strip())
        if not parts:
            return
        name = strip_quotes(parts[0])
        if not name:
            return

        declaration = fonts.get(name)
        if declaration is None:
            declaration = fonts[name] = FontDeclaration(name=name)

        weights = parse_specifier(parts[1]) if len(parts) > 1 and parts[1] else []
        if weights:
            declaration.merge_weights(weights)
        elif not declaration.weights:
            declaration.merge_weights(DEFAULT_WEIGHTS)

        styles = parse_specifier(parts[2]) if len(parts) > 2 and parts[2] else []
        if styles:
            declaration.merge_styles(styles)
        elif not declaration.styles:
            declaration.merge_styles(DEFAULT_STYLES)

        if len(parts) > 3 and declaration.display is None:
            display = strip_quotes(parts[3])
            if display and display.lower() not in {"null", "none"}:
                declaration.display = display
        if len(parts) > 4 and strip_quotes(parts[4]).lower() == "true":
            declaration.monospace = True


__all__ = [
    "DEFAULT_KEYWORD",
    "DeclarationScanner",
    "FontDeclaration",
    "parse_specifier",
]
