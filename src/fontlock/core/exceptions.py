"""Custom exception hierarchy for the font locking pipeline."""

from __future__ import annotations


class FontLockError(RuntimeError):
    """Base exception for font locking failures."""


class ConfigurationError(FontLockError):
    """Raised when a required setting (API key, config file) is missing or invalid."""


class TransportError(FontLockError):
    """Raised when a host cannot be reached at the network level."""

    def __init__(self, message: str, *, url: str | None = None) -> None:
        super().__init__(message)
        self.url = url


class UpstreamError(FontLockError):
    """Raised when the catalog or a binary host answers with a non-success status."""

    def __init__(self, message: str, *, url: str | None = None, status: int | None = None) -> None:
        super().__init__(message)
        self.url = url
        self.status = status


class FetchError(FontLockError):
    """Raised when a family or one of its binaries cannot be fetched."""

    def __init__(
        self,
        message: str,
        *,
        url: str | None = None,
        family: str | None = None,
    ) -> None:
        super().__init__(message)
        self.url = url
        self.family = family


class ManifestError(FontLockError):
    """Raised when the manifest cannot be serialized, read, or written."""


def exception_messages(exc: BaseException) -> list[str]:
    """Return the collected message chain for an exception and its causes."""
    messages: list[str] = []
    visited: set[int] = set()
    current: BaseException | None = exc
    while current is not None and id(current) not in visited:
        visited.add(id(current))
        text = str(current).strip()
        if text:
            first_line = text.splitlines()[0].strip()
            if first_line:
                messages.append(first_line)
        current = current.__cause__ or current.__context__
    return messages


def exception_hint(exc: BaseException) -> str | None:
    """Return the most specific message available for an exception chain."""
    messages = exception_messages(exc)
    return messages[-1] if messages else None


__all__ = [
    "ConfigurationError",
    "FetchError",
    "FontLockError",
    "ManifestError",
    "TransportError",
    "UpstreamError",
    "exception_hint",
    "exception_messages",
]
