"""
Inventory — the Item / Customer / Order / OrderItem graph.

    from quarry.inventory import build_schema, create_executor
    from quarry.store import create_memory_store, seed

    store = create_memory_store()
    await seed(store)

    executor = create_executor()
    result = await executor.run("{ customers { name orders { tag } } }", context=store)
    # one orders_by_customer_id fetch for both customers
"""

from quarry.inventory._resolvers import (
    ALL_ITEMS,
    ITEMS_BY_ID,
    CUSTOMERS_BY_ID,
    ORDERS_BY_ID,
    ORDERS_BY_CUSTOMER_ID,
    ORDER_ITEMS_BY_ORDER_ID,
)
from quarry.inventory._schema import build_schema, create_executor

__all__ = (
    "ALL_ITEMS",
    "ITEMS_BY_ID",
    "CUSTOMERS_BY_ID",
    "ORDERS_BY_ID",
    "ORDERS_BY_CUSTOMER_ID",
    "ORDER_ITEMS_BY_ORDER_ID",
    "build_schema",
    "create_executor",
)
