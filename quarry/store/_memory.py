"""
In-memory repositories.

Note: single process only; nothing survives a restart. Used by tests and
the default app configuration.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Collection, Hashable, Mapping, Sequence
from dataclasses import fields, replace
from typing import Any

from quarry.store._types import Customer, InventoryStore, Item, Order, OrderItem, StoreError

logger = logging.getLogger(__name__)


class MemoryRepository[E]:
    """
    Dict-backed repository with sequential integer ids.

    Example:
        items = MemoryRepository(Item, key="item_id")
        item = await items.create(Item(barcode="123", title="Headphone", selling_price=Decimal(50)))
        item.item_id  # 1
    """

    def __init__(self, entity: type[E], key: str) -> None:
        self._entity = entity
        self._key = key
        self._columns = frozenset(f.name for f in fields(entity))  # type: ignore[arg-type]
        if key not in self._columns:
            raise StoreError(f"{entity.__name__} has no column '{key}'")
        self._rows: dict[int, E] = {}
        self._next_id = 1
        self._lock = asyncio.Lock()

    def __len__(self) -> int:
        return len(self._rows)

    def _column(self, column: str) -> str:
        if column not in self._columns:
            raise StoreError(f"{self._entity.__name__} has no column '{column}'")
        return column

    async def all(self) -> Sequence[E]:
        return list(self._rows.values())

    async def get_by_id(self, id: Hashable) -> E | None:
        return self._rows.get(id)  # type: ignore[call-overload]

    async def get_by_ids(self, ids: Collection[Hashable]) -> Mapping[Hashable, E]:
        return {id: self._rows[id] for id in ids if id in self._rows}  # type: ignore[index]

    async def get_by_foreign_key(
        self,
        column: str,
        ids: Collection[Hashable],
    ) -> Mapping[Hashable, Sequence[E]]:
        column = self._column(column)
        wanted = set(ids)
        groups: dict[Hashable, list[E]] = {}
        for row in self._rows.values():
            value = getattr(row, column)
            if value in wanted:
                groups.setdefault(value, []).append(row)
        return groups

    async def find_one(self, column: str, value: Any) -> E | None:
        column = self._column(column)
        for row in self._rows.values():
            if getattr(row, column) == value:
                return row
        return None

    async def create(self, entity: E) -> E:
        async with self._lock:
            new_id = self._next_id
            self._next_id += 1
            created = replace(entity, **{self._key: new_id})  # type: ignore[type-var]
            self._rows[new_id] = created
        logger.debug("Created %s %s=%d", self._entity.__name__, self._key, new_id)
        return created


def create_memory_store() -> InventoryStore:
    """Empty in-memory InventoryStore."""
    return InventoryStore(
        items=MemoryRepository(Item, key="item_id"),
        customers=MemoryRepository(Customer, key="customer_id"),
        orders=MemoryRepository(Order, key="order_id"),
        order_items=MemoryRepository(OrderItem, key="id"),
    )


__all__ = ("MemoryRepository", "create_memory_store")
