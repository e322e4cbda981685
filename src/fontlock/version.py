"""Installed distribution version, used by ``fontlock --version``."""

from __future__ import annotations

from importlib.metadata import PackageNotFoundError, version


DISTRIBUTION = "fontlock"
UNKNOWN_VERSION = "0.0.0"


def get_version(distribution: str = DISTRIBUTION) -> str:
    """Return the installed version, or ``0.0.0`` when running from a bare checkout."""
    try:
        return version(distribution)
    except PackageNotFoundError:
        return UNKNOWN_VERSION


__all__ = ["get_version"]
