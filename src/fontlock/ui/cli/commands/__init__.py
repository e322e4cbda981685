"""CLI command implementations exposed via `fontlock.ui.cli`."""

from __future__ import annotations

from .import_ import import_font
from .lock import lock
from .prune import prune
from .search import search
from .status import status
from .warm_cache import warm_cache


__all__ = ["import_font", "lock", "prune", "search", "status", "warm_cache"]
