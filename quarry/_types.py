"""
Core types for quarry.

Re-exports from kungfu + shared aliases.
"""

from __future__ import annotations

from collections.abc import Hashable
from enum import Enum, auto

# Re-export from kungfu
from kungfu import Result, Ok, Error, LazyCoroResult

# ═══════════════════════════════════════════════════════════════════════════════
# Sentinels
# ═══════════════════════════════════════════════════════════════════════════════


class Unset(Enum):
    """Marker for "no value given" where None is a legal value."""

    UNSET = auto()

    def __repr__(self) -> str:
        return "UNSET"


UNSET = Unset.UNSET

# ═══════════════════════════════════════════════════════════════════════════════
# Aliases
# ═══════════════════════════════════════════════════════════════════════════════

type Key = Hashable
"""Batch key — anything usable as a dict key."""

type PathSegment = str | int
type Path = tuple[PathSegment, ...]
"""Response path: response keys and list indices."""

# ═══════════════════════════════════════════════════════════════════════════════
# Exports
# ═══════════════════════════════════════════════════════════════════════════════

__all__ = (
    # Re-exports from kungfu
    "Result",
    "Ok",
    "Error",
    "LazyCoroResult",
    # Sentinels
    "Unset",
    "UNSET",
    # Aliases
    "Key",
    "PathSegment",
    "Path",
)
