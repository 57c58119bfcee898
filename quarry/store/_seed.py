"""
Fixture data — the initial inventory.
"""

from __future__ import annotations

import logging
from datetime import datetime, timedelta
from decimal import Decimal

from quarry.store._types import Customer, InventoryStore, Item, Order, OrderItem

logger = logging.getLogger(__name__)


async def seed(store: InventoryStore, *, today: datetime | None = None) -> None:
    """
    Load three items, two customers with one order each, and three order lines.

    Ids are whatever the store assigns; on an empty store they start at 1.
    """
    if today is None:
        today = datetime.now().replace(hour=0, minute=0, second=0, microsecond=0)

    headphone = await store.items.create(Item(barcode="123", title="Headphone", selling_price=Decimal(50)))
    keyboard = await store.items.create(Item(barcode="456", title="Keyboard", selling_price=Decimal(40)))
    monitor = await store.items.create(Item(barcode="789", title="Monitor", selling_price=Decimal(100)))

    jon = await store.customers.create(Customer(name="Jon Doe", billing_address="123 Mainnstreet"))
    jane = await store.customers.create(Customer(name="Jane Doe", billing_address="456 Mainnstreet"))

    first = await store.orders.create(Order(tag="ORD-123", created_at=today, customer_id=jon.customer_id))
    second = await store.orders.create(
        Order(tag="ORD-456", created_at=today - timedelta(days=1), customer_id=jane.customer_id)
    )

    for item, quantity, order in (
        (headphone, 2, first),
        (keyboard, 1, first),
        (monitor, 1, second),
    ):
        await store.order_items.create(
            OrderItem(item_id=item.item_id, quantity=quantity, order_id=order.order_id)
        )

    logger.info("Seeded store with 3 items, 2 customers, 2 orders")


__all__ = ("seed",)
