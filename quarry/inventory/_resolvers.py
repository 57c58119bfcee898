"""
Inventory resolvers.

Root fields read repositories directly (items through a keyless loader, so
repeated selections share one read); relation fields go through
request-scoped loaders, one per relation, so sibling rows share a fetch.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Mapping, Sequence
from functools import partial
from typing import Any

from quarry.errors import ResolverError
from quarry.execution import ExecutionScope
from quarry.store import Customer, InventoryStore, Item, Order, OrderItem

logger = logging.getLogger(__name__)

ALL_ITEMS = "all_items"
ITEMS_BY_ID = "items_by_id"
CUSTOMERS_BY_ID = "customers_by_id"
ORDERS_BY_ID = "orders_by_id"
ORDERS_BY_CUSTOMER_ID = "orders_by_customer_id"
ORDER_ITEMS_BY_ORDER_ID = "order_items_by_order_id"


def _store(scope: ExecutionScope) -> InventoryStore:
    return scope.context


# ═══════════════════════════════════════════════════════════════════════════════
# Query
# ═══════════════════════════════════════════════════════════════════════════════


def items(parent: Any, args: Mapping[str, Any], scope: ExecutionScope) -> asyncio.Future[Sequence[Item]]:
    return scope.get_or_create_value_loader(ALL_ITEMS, _store(scope).items.all).load()


async def item(parent: Any, args: Mapping[str, Any], scope: ExecutionScope) -> Item | None:
    return await _store(scope).items.find_one("barcode", args["barcode"])


async def orders(parent: Any, args: Mapping[str, Any], scope: ExecutionScope) -> Sequence[Order]:
    return await _store(scope).orders.all()


async def customers(parent: Any, args: Mapping[str, Any], scope: ExecutionScope) -> Sequence[Customer]:
    return await _store(scope).customers.all()


async def order_items(parent: Any, args: Mapping[str, Any], scope: ExecutionScope) -> Sequence[OrderItem]:
    return await _store(scope).order_items.all()


# ═══════════════════════════════════════════════════════════════════════════════
# Relations — batched
# ═══════════════════════════════════════════════════════════════════════════════


def customer_orders(parent: Customer, args: Mapping[str, Any], scope: ExecutionScope) -> asyncio.Future[tuple[Order, ...]]:
    store = _store(scope)
    loader = scope.get_or_create_collection_loader(
        ORDERS_BY_CUSTOMER_ID,
        partial(store.orders.get_by_foreign_key, "customer_id"),
    )
    return loader.load(parent.customer_id)


def order_customer(parent: Order, args: Mapping[str, Any], scope: ExecutionScope) -> asyncio.Future[Customer | None]:
    loader = scope.get_or_create_loader(CUSTOMERS_BY_ID, _store(scope).customers.get_by_ids)
    return loader.load(parent.customer_id)


def order_lines(parent: Order, args: Mapping[str, Any], scope: ExecutionScope) -> asyncio.Future[tuple[OrderItem, ...]]:
    store = _store(scope)
    loader = scope.get_or_create_collection_loader(
        ORDER_ITEMS_BY_ORDER_ID,
        partial(store.order_items.get_by_foreign_key, "order_id"),
    )
    return loader.load(parent.order_id)


def order_item_item(parent: OrderItem, args: Mapping[str, Any], scope: ExecutionScope) -> asyncio.Future[Item | None]:
    loader = scope.get_or_create_loader(ITEMS_BY_ID, _store(scope).items.get_by_ids)
    return loader.load(parent.item_id)


def order_item_order(parent: OrderItem, args: Mapping[str, Any], scope: ExecutionScope) -> asyncio.Future[Order | None]:
    loader = scope.get_or_create_loader(ORDERS_BY_ID, _store(scope).orders.get_by_ids)
    return loader.load(parent.order_id)


# ═══════════════════════════════════════════════════════════════════════════════
# Mutation
# ═══════════════════════════════════════════════════════════════════════════════


async def create_item(parent: Any, args: Mapping[str, Any], scope: ExecutionScope) -> Item:
    data = args["item"]
    return await _store(scope).items.create(
        Item(barcode=data["barcode"], title=data["title"], selling_price=data["sellingPrice"])
    )


async def create_customer(parent: Any, args: Mapping[str, Any], scope: ExecutionScope) -> Customer:
    data = args["customer"]
    return await _store(scope).customers.create(
        Customer(name=data["name"], billing_address=data["billingAddress"])
    )


async def create_order(parent: Any, args: Mapping[str, Any], scope: ExecutionScope) -> Order:
    store = _store(scope)
    data = args["order"]
    if await store.customers.get_by_id(data["customerId"]) is None:
        raise ResolverError(f"Customer {data['customerId']} does not exist")
    return await store.orders.create(
        Order(tag=data["tag"], created_at=data["createdAt"], customer_id=data["customerId"])
    )


async def create_order_item(parent: Any, args: Mapping[str, Any], scope: ExecutionScope) -> OrderItem:
    store = _store(scope)
    data = args["orderItem"]
    if await store.items.get_by_id(data["itemId"]) is None:
        raise ResolverError(f"Item {data['itemId']} does not exist")
    if await store.orders.get_by_id(data["orderId"]) is None:
        raise ResolverError(f"Order {data['orderId']} does not exist")
    created = await store.order_items.create(
        OrderItem(item_id=data["itemId"], quantity=data["quantity"], order_id=data["orderId"])
    )
    logger.debug("Order %s gained item %s x%d", created.order_id, created.item_id, created.quantity)
    return created
