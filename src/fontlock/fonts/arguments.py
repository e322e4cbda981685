"""Top-level comma splitting for template function arguments.

The grammar is deliberately tiny: quoted strings (single or double quotes,
no escapes) and bracket nesting. Anything else is passed through verbatim.
Input comes from free-form template text, so malformed input never raises;
whatever non-blank text is still buffered at the end becomes the last segment.
"""

from __future__ import annotations

from dataclasses import dataclass, field


QUOTES = frozenset({"'", '"'})
OPENERS = frozenset({"[", "(", "{"})
CLOSERS = frozenset({"]", ")", "}"})


@dataclass(slots=True)
class ArgumentSlicer:
    """State machine splitting a raw argument string on top-level commas.

    States: outside any quote (``quote is None``) or inside a quote opened by
    ``quote``. ``depth`` counts open brackets and never drops below zero.
    """

    quote: str | None = None
    depth: int = 0
    segments: list[str] = field(default_factory=list)
    _buffer: list[str] = field(default_factory=list, repr=False)

    def feed(self, char: str) -> None:
        if self.quote is not None:
            if char == self.quote:
                self.quote = None
            self._buffer.append(char)
            return

        if char in QUOTES:
            self.quote = char
        elif char in OPENERS:
            self.depth += 1
        elif char in CLOSERS:
            self.depth = max(0, self.depth - 1)
        elif char == "," and self.depth == 0:
            self._emit()
            return
        self._buffer.append(char)

    def finish(self) -> list[str]:
        if "".join(self._buffer).strip():
            self._emit()
        self._buffer.clear()
        return self.segments

    def _emit(self) -> None:
        self.segments.append("".join(self._buffer).strip())
        self._buffer.clear()


def slice_arguments(raw: str) -> list[str]:
    """Split ``raw`` on commas that sit outside quotes and brackets."""
    slicer = ArgumentSlicer()
    for char in raw:
        slicer.feed(char)
    return slicer.finish()


def strip_quotes(value: str) -> str:
    """Trim whitespace, then any surrounding quote characters."""
    return value.strip().strip("'\"")


__all__ = ["ArgumentSlicer", "slice_arguments", "strip_quotes"]
