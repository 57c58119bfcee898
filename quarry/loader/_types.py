"""
Loader types.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable, Mapping, Sequence

from quarry.errors import QueryError


class LoaderError(QueryError):
    """
    Batched fetch failed.

    Every future of the failing batch settles to the same instance.
    """

    def __init__(self, loader: str, message: str) -> None:
        super().__init__(message)
        self.loader = loader

    @classmethod
    def wrap(cls, loader: str, exc: Exception) -> LoaderError:
        """Fetch failure for loader; the original exception is __cause__."""
        error = cls(loader, f"Loader '{loader}' failed: {exc}")
        error.__cause__ = exc
        return error


type Fetch[K, V] = Callable[[frozenset[K]], Awaitable[Mapping[K, V]]]
"""fetch(keys) -> {key: value}; absent keys resolve to None."""

type CollectionFetch[K, V] = Callable[[frozenset[K]], Awaitable[Mapping[K, Sequence[V]]]]
"""fetch(keys) -> {key: [values]}; absent keys resolve to ()."""

type ValueFetch[V] = Callable[[], Awaitable[V]]
"""fetch() -> value; keyless, run at most once per loader."""

type Schedule = Callable[[Callable[[], None]], None]
"""schedule(dispatch) — arranges for dispatch to run later on the loop."""


__all__ = ("LoaderError", "Fetch", "CollectionFetch", "ValueFetch", "Schedule")
