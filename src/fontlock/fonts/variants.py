"""Naming, variant-axis and stylesheet helpers shared by every stage."""

from __future__ import annotations

from collections.abc import Callable, Iterable, Sequence
import re


CSS_API = "https://fonts.googleapis.com/css2"
ITALIC = "italic"
DEFAULT_WEIGHT = 400
FALLBACK_WEIGHT = 700


def sanitize_family(name: str) -> str:
    """Return the on-disk and CSS variable key for a family name."""
    return name.lower().replace(" ", "-")


def font_variable(name: str) -> str:
    return f"--font-family-{sanitize_family(name)}"


def _dedupe(values: Iterable[str]) -> list[str]:
    seen: set[str] = set()
    ordered: list[str] = []
    for value in values:
        if value in seen:
            continue
        seen.add(value)
        ordered.append(value)
    return ordered


def variant_tokens(weights: Sequence[int | str], styles: Sequence[str]) -> list[str]:
    """Serialize the weight x style cross product into catalog axis tokens.

    Italic styles contribute an ``ital,wght@1,<w>`` token on top of the plain
    ``wght@<w>`` token every style emits.
    """
    tokens: list[str] = []
    for style in styles:
        for weight in weights:
            value = int(weight)
            if style == ITALIC:
                tokens.append(f"ital,wght@1,{value}")
            tokens.append(f"wght@{value}")
    return _dedupe(tokens)


def build_stylesheet_url(
    family: str,
    weights: Sequence[int | str],
    styles: Sequence[str],
    display: str = "swap",
    *,
    base: str = CSS_API,
) -> str:
    """Return the catalog stylesheet URL for a family and its variants."""
    name = family.replace(" ", "+")
    variants = ";".join(variant_tokens(weights, styles))
    return f"{base}?family={name}:{variants}&display={display}"


def _first_weight(weights: Sequence[int], predicate: Callable[[int], bool], default: int) -> int:
    for weight in weights:
        if predicate(weight):
            return weight
    return default


def usage_stylesheet(family: str, weights: Sequence[int | str], *, monospace: bool = False) -> str:
    """Build the default usage rules that accompany a family's ``@font-face`` blocks."""
    values = [int(weight) for weight in weights]
    variable = font_variable(family)
    fallback = "monospace" if monospace else "sans-serif"
    base_weight = values[0] if values else DEFAULT_WEIGHT

    lines = [
        ":root {",
        f"  {variable}: '{family}', {fallback};",
        "}",
        "",
    ]
    if monospace:
        lines += [
            "code, pre, kbd, samp, var, tt {",
            f"  font-family: var({variable});",
            f"  font-weight: {base_weight};",
            "}",
        ]
        return "\n".join(lines)

    heading_weight = _first_weight(values, lambda w: w > 500, FALLBACK_WEIGHT)
    bold_weight = _first_weight(values, lambda w: w >= 700, FALLBACK_WEIGHT)
    lines += [
        "body {",
        f"  font-family: var({variable});",
        f"  font-weight: {base_weight};",
        "}",
        "",
        "h1, h2, h3, h4, h5, h6 {",
        f"  font-family: var({variable});",
        f"  font-weight: {heading_weight};",
        "}",
        "",
        "strong, b {",
        f"  font-weight: {bold_weight};",
        "}",
    ]
    return "\n".join(lines)


_SEPARATORS = re.compile(r"\s+")


def normalize_values(value: str | Iterable[int | str]) -> list[str]:
    """Turn ``"300,400"``, ``"300 400"`` or ``[300, 400]`` into ``["300", "400"]``."""
    if isinstance(value, str):
        pieces = value.split(",") if "," in value else _SEPARATORS.split(value)
        return [piece.strip() for piece in pieces if piece.strip()]
    return [str(item).strip() for item in value]


__all__ = [
    "CSS_API",
    "ITALIC",
    "build_stylesheet_url",
    "font_variable",
    "normalize_values",
    "sanitize_family",
    "usage_stylesheet",
    "variant_tokens",
]
