"""
Execution scope — everything that lives exactly as long as one query.

Holds the application context, the memoized loaders and the error list.
Closing the scope cancels whatever is still outstanding; nothing survives
into a later request.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from types import TracebackType
from typing import Any, Self

from quarry._types import Path
from quarry.errors import FieldError
from quarry.loader import BatchLoader, CollectionBatchLoader, CollectionFetch, Fetch, ValueFetch, ValueLoader

logger = logging.getLogger(__name__)

# Consecutive event-loop passes without executor progress before an idle
# callback fires.
IDLE_PASSES = 2


class ExecutionScope:
    """
    Per-request state shared by every resolver of one execution.

    Example:
        async with ExecutionScope(store) as scope:
            loader = scope.get_or_create_loader("items_by_id", store.items.get_by_ids)
            item = await loader.load(1)
    """

    def __init__(self, context: Any = None, *, max_batch_size: int | None = None) -> None:
        self.context = context
        self._max_batch_size = max_batch_size
        self._loaders: dict[str, BatchLoader[Any, Any]] = {}
        self._errors: list[FieldError] = []
        self._progress = 0
        self._idle: set[asyncio.Handle] = set()
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def loaders(self) -> dict[str, BatchLoader[Any, Any]]:
        return dict(self._loaders)

    # ─── loaders ─────────────────────────────────────────────────────────────

    def get_or_create_loader[K, V](self, name: str, fetch: Fetch[K, V]) -> BatchLoader[K, V]:
        """One-to-one loader memoized by name; fetch is used only on first call."""
        return self._loader(name, BatchLoader, fetch)

    def get_or_create_collection_loader[K, V](
        self,
        name: str,
        fetch: CollectionFetch[K, V],
    ) -> CollectionBatchLoader[K, V]:
        """One-to-many loader memoized by name; fetch is used only on first call."""
        return self._loader(name, CollectionBatchLoader, fetch)

    def get_or_create_value_loader[V](self, name: str, fetch: ValueFetch[V]) -> ValueLoader[V]:
        """Keyless loader memoized by name: fetch() runs at most once per scope."""
        return self._loader(name, ValueLoader, fetch)

    def _loader(self, name: str, kind: type[BatchLoader[Any, Any]], fetch: Any) -> Any:
        loader = self._loaders.get(name)
        if loader is None:
            if self._closed:
                raise RuntimeError("ExecutionScope is closed")
            loader = kind(
                fetch,
                name=name,
                schedule=self.when_idle,
                max_batch_size=self._max_batch_size,
            )
            self._loaders[name] = loader
        elif type(loader) is not kind:
            raise TypeError(f"Loader '{name}' already exists as {type(loader).__name__}")
        return loader

    # ─── errors ──────────────────────────────────────────────────────────────

    def record_error(self, path: Path, message: str) -> FieldError:
        error = FieldError(message, tuple(path))
        self._errors.append(error)
        return error

    def record(self, error: FieldError) -> None:
        self._errors.append(error)

    def get_errors(self) -> tuple[FieldError, ...]:
        return tuple(self._errors)

    # ─── scheduling ──────────────────────────────────────────────────────────

    def mark_progress(self) -> None:
        self._progress += 1

    def when_idle(self, callback: Callable[[], None]) -> None:
        """
        Run callback once IDLE_PASSES loop passes in a row saw no progress.

        Every resolver that can still run gets the chance to enqueue its keys
        before the callback fires.
        """
        if self._closed:
            return
        loop = asyncio.get_running_loop()
        seen = self._progress
        quiet = 0

        def check() -> None:
            nonlocal seen, quiet
            self._idle.discard(handle)
            if self._closed:
                return
            if self._progress == seen:
                quiet += 1
            else:
                seen, quiet = self._progress, 0
            if quiet >= IDLE_PASSES:
                callback()
            else:
                reschedule()

        def reschedule() -> None:
            nonlocal handle
            handle = loop.call_soon(check)
            self._idle.add(handle)

        handle = loop.call_soon(check)
        self._idle.add(handle)

    # ─── lifecycle ───────────────────────────────────────────────────────────

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        for handle in tuple(self._idle):
            handle.cancel()
        self._idle.clear()
        for loader in self._loaders.values():
            loader.close()
        logger.debug("Scope closed with %d loaders, %d errors", len(self._loaders), len(self._errors))

    async def __aenter__(self) -> Self:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()


__all__ = ("ExecutionScope", "IDLE_PASSES")
