"""
Batch loaders — coalesce per-key lookups into one backend call.

    loader = BatchLoader(repo.get_by_ids, name="items_by_id")
    a, b = await asyncio.gather(loader.load(1), loader.load(2))
    # one repo.get_by_ids(frozenset({1, 2})) call

Keys requested during the same scheduling window are dispatched together.
Each key gets exactly one future for the loader's lifetime: repeated loads
return it, settled or not, and it is never overwritten. The future is
shared, so a caller that may be cancelled should await it through
asyncio.shield (the executor and load_many do).
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Hashable, Iterable, Mapping, Sequence
from typing import Any

from combinators import lift as L

from quarry._types import Ok, Error
from quarry.loader._types import CollectionFetch, Fetch, LoaderError, Schedule, ValueFetch

logger = logging.getLogger(__name__)


# ═══════════════════════════════════════════════════════════════════════════════
# BatchLoader — one-to-one
# ═══════════════════════════════════════════════════════════════════════════════


class BatchLoader[K: Hashable, V]:
    """
    One-to-one batched loader.

    Args:
        fetch: fetch(keys) -> {key: value}
        name: used in logs and error messages
        schedule: schedule(dispatch); defaults to loop.call_soon
        max_batch_size: split a dispatch into chunks of at most this many keys
    """

    def __init__(
        self,
        fetch: Fetch[K, Any],
        *,
        name: str = "loader",
        schedule: Schedule | None = None,
        max_batch_size: int | None = None,
    ) -> None:
        if max_batch_size is not None and max_batch_size < 1:
            raise ValueError("max_batch_size must be positive")
        self.name = name
        self._fetch = fetch
        self._schedule = schedule
        self._max_batch_size = max_batch_size
        self._cache: dict[K, asyncio.Future[Any]] = {}
        self._pending: dict[K, None] = {}
        self._scheduled = False
        self._closed = False
        self._dispatches: set[asyncio.Task[None]] = set()
        self.batches = 0

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.name!r}, cached={len(self._cache)}, pending={len(self._pending)})"

    @property
    def closed(self) -> bool:
        return self._closed

    # ─── requests ────────────────────────────────────────────────────────────

    def load(self, key: K) -> asyncio.Future[V | None]:
        """Future of the value for key. Raises LoaderError once closed."""
        fut = self._cache.get(key)
        if fut is not None:
            return fut
        if self._closed:
            raise LoaderError(self.name, f"Loader '{self.name}' is closed")

        fut = asyncio.get_running_loop().create_future()
        self._cache[key] = fut
        self._pending[key] = None
        if not self._scheduled:
            self._scheduled = True
            if self._schedule is not None:
                self._schedule(self.dispatch)
            else:
                asyncio.get_running_loop().call_soon(self.dispatch)
        return fut

    def load_many(self, keys: Iterable[K]) -> asyncio.Future[list[V | None]]:
        """
        Values in input order, duplicates and misses included.

        Cancelling the returned future leaves the cached per-key futures intact.
        """
        return asyncio.gather(*(asyncio.shield(self.load(key)) for key in keys))

    # ─── dispatch ────────────────────────────────────────────────────────────

    def dispatch(self) -> None:
        """Send every pending key to fetch, chunked by max_batch_size."""
        self._scheduled = False
        if self._closed or not self._pending:
            return
        keys = list(self._pending)
        self._pending.clear()

        size = self._max_batch_size or len(keys)
        loop = asyncio.get_running_loop()
        for start in range(0, len(keys), size):
            task = loop.create_task(
                self._run_batch(keys[start : start + size]),
                name=f"quarry-loader:{self.name}",
            )
            self._dispatches.add(task)
            task.add_done_callback(self._dispatches.discard)

    async def _run_batch(self, keys: list[K]) -> None:
        self.batches += 1
        logger.debug("Loader %s dispatching %d keys", self.name, len(keys))

        result = await L.catching_async(
            lambda: self._fetch(frozenset(keys)),
            on_error=lambda exc: LoaderError.wrap(self.name, exc),
        )

        match result:
            case Ok(found) if isinstance(found, Mapping):
                for key in keys:
                    self._settle(key, self._pick(found, key))
            case Ok(found):
                self._fail(
                    keys,
                    LoaderError(
                        self.name,
                        f"Loader '{self.name}' returned {type(found).__name__}, expected a mapping",
                    ),
                )
            case Error(error):
                logger.warning("Loader %s batch of %d keys failed: %s", self.name, len(keys), error)
                self._fail(keys, error)

    def _pick(self, found: Mapping[K, Any], key: K) -> Any:
        return found.get(key)

    def _settle(self, key: K, value: Any) -> None:
        fut = self._cache[key]
        if not fut.done():
            fut.set_result(value)

    def _fail(self, keys: Sequence[K], error: LoaderError) -> None:
        for key in keys:
            fut = self._cache[key]
            if not fut.done():
                fut.set_exception(error)

    # ─── lifecycle ───────────────────────────────────────────────────────────

    def close(self) -> None:
        """Cancel unsettled futures and in-flight batches; refuse new keys."""
        self._closed = True
        self._pending.clear()
        for fut in self._cache.values():
            if not fut.done():
                fut.cancel()
        for task in tuple(self._dispatches):
            task.cancel()


# ═══════════════════════════════════════════════════════════════════════════════
# CollectionBatchLoader — one-to-many
# ═══════════════════════════════════════════════════════════════════════════════


class CollectionBatchLoader[K: Hashable, V](BatchLoader[K, tuple[V, ...]]):
    """
    One-to-many batched loader: each key resolves to its group.

    A key with no matches resolves to () — never None, never an error.
    """

    def __init__(
        self,
        fetch: CollectionFetch[K, V],
        *,
        name: str = "collection_loader",
        schedule: Schedule | None = None,
        max_batch_size: int | None = None,
    ) -> None:
        super().__init__(fetch, name=name, schedule=schedule, max_batch_size=max_batch_size)

    def load(self, key: K) -> asyncio.Future[tuple[V, ...]]:  # type: ignore[override]
        return super().load(key)  # type: ignore[return-value]

    def _pick(self, found: Mapping[K, Any], key: K) -> tuple[V, ...]:
        return tuple(found.get(key, ()))


# ═══════════════════════════════════════════════════════════════════════════════
# ValueLoader — keyless
# ═══════════════════════════════════════════════════════════════════════════════


class ValueLoader[V](BatchLoader[None, V]):
    """
    Keyless loader: fetch() runs at most once, every load() shares the result.

        all_items = ValueLoader(store.items.all, name="all_items")
        a, b = await asyncio.gather(all_items.load(), all_items.load())
        # one store.items.all() call
    """

    def __init__(
        self,
        fetch: ValueFetch[V],
        *,
        name: str = "value_loader",
        schedule: Schedule | None = None,
        max_batch_size: int | None = None,
    ) -> None:
        async def fetch_one(keys: frozenset[None]) -> Mapping[None, V]:
            return {None: await fetch()}

        super().__init__(fetch_one, name=name, schedule=schedule, max_batch_size=max_batch_size)

    def load(self, key: None = None) -> asyncio.Future[V]:  # type: ignore[override]
        return super().load(None)  # type: ignore[return-value]


__all__ = ("BatchLoader", "CollectionBatchLoader", "ValueLoader")
