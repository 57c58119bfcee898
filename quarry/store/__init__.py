"""
Store — inventory entities behind async repositories.

    from quarry.store import create_memory_store, create_sqlalchemy_store, seed

    store = create_memory_store()
    await seed(store)

    store, engine = await create_sqlalchemy_store("sqlite+aiosqlite:///:memory:")

Both backends implement Repository[E]; resolvers never see which one runs.
"""

from quarry.store._types import (
    StoreError,
    Item,
    Customer,
    Order,
    OrderItem,
    Repository,
    InventoryStore,
)
from quarry.store._memory import MemoryRepository, create_memory_store
from quarry.store._sqlalchemy import (
    Base,
    ItemRow,
    CustomerRow,
    OrderRow,
    OrderItemRow,
    SQLAlchemyRepository,
    create_sqlalchemy_store,
)
from quarry.store._seed import seed

__all__ = (
    "StoreError",
    "Item",
    "Customer",
    "Order",
    "OrderItem",
    "Repository",
    "InventoryStore",
    "MemoryRepository",
    "create_memory_store",
    "Base",
    "ItemRow",
    "CustomerRow",
    "OrderRow",
    "OrderItemRow",
    "SQLAlchemyRepository",
    "create_sqlalchemy_store",
    "seed",
)
