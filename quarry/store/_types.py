"""
Store types — inventory entities and the repository protocol.
"""

from __future__ import annotations

from collections.abc import Collection, Hashable, Mapping, Sequence
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Any, Protocol


class StoreError(Exception):
    """Storage operation failed (unknown column, backend error)."""


# ═══════════════════════════════════════════════════════════════════════════════
# Entities
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True, kw_only=True)
class Item:
    item_id: int | None = None
    barcode: str
    title: str
    selling_price: Decimal


@dataclass(frozen=True, slots=True, kw_only=True)
class Customer:
    customer_id: int | None = None
    name: str
    billing_address: str


@dataclass(frozen=True, slots=True, kw_only=True)
class Order:
    order_id: int | None = None
    tag: str
    created_at: datetime
    customer_id: int


@dataclass(frozen=True, slots=True, kw_only=True)
class OrderItem:
    id: int | None = None
    item_id: int
    quantity: int
    order_id: int


# ═══════════════════════════════════════════════════════════════════════════════
# Repository protocol
# ═══════════════════════════════════════════════════════════════════════════════


class Repository[E](Protocol):
    """
    Async access to one entity table.

    Methods raise on backend failure; batch methods are what loaders call.

    Example:
        by_id = await store.items.get_by_ids({1, 2})
        by_customer = await store.orders.get_by_foreign_key("customer_id", {1, 2})
    """

    async def all(self) -> Sequence[E]:
        """Every entity in id order."""
        ...

    async def get_by_id(self, id: Hashable) -> E | None: ...

    async def get_by_ids(self, ids: Collection[Hashable]) -> Mapping[Hashable, E]:
        """Batched one-to-one fetch; missing ids are absent from the mapping."""
        ...

    async def get_by_foreign_key(
        self,
        column: str,
        ids: Collection[Hashable],
    ) -> Mapping[Hashable, Sequence[E]]:
        """Batched one-to-many fetch grouped by column value, each group in id order."""
        ...

    async def find_one(self, column: str, value: Any) -> E | None:
        """First entity (by id) whose column equals value."""
        ...

    async def create(self, entity: E) -> E:
        """Insert; returns the entity with its new id."""
        ...


@dataclass(frozen=True, slots=True)
class InventoryStore:
    """The four repositories resolvers read from (scope.context)."""

    items: Repository[Item]
    customers: Repository[Customer]
    orders: Repository[Order]
    order_items: Repository[OrderItem]


__all__ = (
    "StoreError",
    "Item",
    "Customer",
    "Order",
    "OrderItem",
    "Repository",
    "InventoryStore",
)
