"""
Query errors — taxonomy shared by the document, loader and execution layers.

    QueryError
    ├── DocumentError      malformed or untyped query — fatal, no data
    ├── ArgumentError      missing / mistyped argument — field-local
    ├── ResolverError      resolver raised — field-local
    ├── NonNullViolation   null at a non-null position — bubbles
    └── LoaderError        (quarry.loader) batched fetch failed — field-local
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from quarry._types import Path


# ═══════════════════════════════════════════════════════════════════════════════
# FieldError — one entry of the response "errors" list
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class FieldError:
    """Error entry with the response path where it happened."""

    message: str
    path: Path = ()

    def to_dict(self) -> dict[str, Any]:
        return {"message": self.message, "path": list(self.path)}


# ═══════════════════════════════════════════════════════════════════════════════
# Exceptions
# ═══════════════════════════════════════════════════════════════════════════════


class QueryError(Exception):
    """Base for every error produced while running a query."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def __str__(self) -> str:
        return self.message


class DocumentError(QueryError):
    """Malformed or untyped selection. Aborts the whole execution."""


class ArgumentError(QueryError):
    """Required argument missing, or a value not matching its declared type."""


class ResolverError(QueryError):
    """A resolver (or leaf serialization) failed. Original exception is __cause__."""

    @classmethod
    def wrap(cls, exc: Exception) -> ResolverError:
        if isinstance(exc, ResolverError):
            return exc
        error = cls(str(exc) or type(exc).__name__)
        error.__cause__ = exc
        return error


class NonNullViolation(QueryError):
    """
    Null reached a non-null position.

    Carries the located error of the originating field; the nearest nullable
    ancestor records it and resolves to null.
    """

    def __init__(self, error: FieldError) -> None:
        super().__init__(error.message)
        self.error = error


__all__ = (
    "FieldError",
    "QueryError",
    "DocumentError",
    "ArgumentError",
    "ResolverError",
    "NonNullViolation",
)
