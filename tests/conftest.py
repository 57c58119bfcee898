from __future__ import annotations

from collections.abc import Collection, Hashable
from typing import Any

import pytest
import pytest_asyncio

from quarry.execution import Executor
from quarry.inventory import build_schema
from quarry.store import InventoryStore, create_memory_store, seed


class RecordingRepository:
    """Delegates to a repository and records every batched fetch."""

    def __init__(self, inner: Any) -> None:
        self._inner = inner
        self.calls: list[tuple[str, frozenset[Hashable]]] = []
        self.all_calls = 0

    async def all(self) -> Any:
        self.all_calls += 1
        return await self._inner.all()

    async def get_by_ids(self, ids: Collection[Hashable]) -> Any:
        self.calls.append(("id", frozenset(ids)))
        return await self._inner.get_by_ids(ids)

    async def get_by_foreign_key(self, column: str, ids: Collection[Hashable]) -> Any:
        self.calls.append((column, frozenset(ids)))
        return await self._inner.get_by_foreign_key(column, ids)

    def __getattr__(self, name: str) -> Any:
        return getattr(self._inner, name)


def recording(store: InventoryStore) -> InventoryStore:
    return InventoryStore(
        items=RecordingRepository(store.items),
        customers=RecordingRepository(store.customers),
        orders=RecordingRepository(store.orders),
        order_items=RecordingRepository(store.order_items),
    )


@pytest_asyncio.fixture
async def store() -> InventoryStore:
    s = create_memory_store()
    await seed(s)
    return s


@pytest.fixture
def spy_store(store: InventoryStore) -> InventoryStore:
    return recording(store)


@pytest.fixture
def executor() -> Executor:
    return Executor(build_schema(), timeout=5.0)
