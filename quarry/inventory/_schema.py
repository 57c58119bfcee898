"""
Inventory schema — Item, Customer, Order, OrderItem plus their inputs.
"""

from __future__ import annotations

import logging

from quarry.config import Settings, get_settings
from quarry.document import DocumentCache
from quarry.execution import Executor
from quarry.inventory import _resolvers as R
from quarry.schema import Argument, Field, ListOf, NonNull, Schema, SchemaRegistry

logger = logging.getLogger(__name__)


def build_schema() -> Schema:
    registry = SchemaRegistry()

    # ═══════════════════════════════════════════════════════════════════════════
    # Object types
    # ═══════════════════════════════════════════════════════════════════════════

    registry.register_type("Item", {
        "itemId": Field(NonNull("Int"), source="item_id"),
        "barcode": Field(NonNull("String")),
        "title": Field(NonNull("String")),
        "sellingPrice": Field(NonNull("Decimal"), source="selling_price"),
    })

    registry.register_type("Customer", {
        "customerId": Field(NonNull("Int"), source="customer_id"),
        "name": Field(NonNull("String")),
        "billingAddress": Field(NonNull("String"), source="billing_address"),
        "orders": Field(
            NonNull(ListOf(NonNull("Order"))),
            resolve=R.customer_orders,
            description="Orders placed by this customer",
        ),
    })

    registry.register_type("Order", {
        "orderId": Field(NonNull("Int"), source="order_id"),
        "tag": Field(NonNull("String")),
        "createdAt": Field(NonNull("DateTime"), source="created_at"),
        "customerId": Field(NonNull("Int"), source="customer_id"),
        "customer": Field("Customer", resolve=R.order_customer),
        "items": Field(
            NonNull(ListOf(NonNull("OrderItem"))),
            resolve=R.order_lines,
            description="Lines of this order",
        ),
    })

    registry.register_type("OrderItem", {
        "id": Field(NonNull("Int")),
        "itemId": Field(NonNull("Int"), source="item_id"),
        "quantity": Field(NonNull("Int")),
        "orderId": Field(NonNull("Int"), source="order_id"),
        "item": Field("Item", resolve=R.order_item_item),
        "order": Field("Order", resolve=R.order_item_order),
    })

    # ═══════════════════════════════════════════════════════════════════════════
    # Input types
    # ═══════════════════════════════════════════════════════════════════════════

    registry.register_input("ItemInput", {
        "barcode": Argument(NonNull("String")),
        "title": Argument(NonNull("String")),
        "sellingPrice": Argument(NonNull("Decimal")),
    })
    registry.register_input("CustomerInput", {
        "name": Argument(NonNull("String")),
        "billingAddress": Argument(NonNull("String")),
    })
    registry.register_input("OrderInput", {
        "tag": Argument(NonNull("String")),
        "createdAt": Argument(NonNull("DateTime")),
        "customerId": Argument(NonNull("Int")),
    })
    registry.register_input("OrderItemInput", {
        "quantity": Argument(NonNull("Int")),
        "itemId": Argument(NonNull("Int")),
        "orderId": Argument(NonNull("Int")),
    })

    # ═══════════════════════════════════════════════════════════════════════════
    # Roots
    # ═══════════════════════════════════════════════════════════════════════════

    registry.register_type("Query", {
        "items": Field(ListOf(NonNull("Item")), resolve=R.items),
        "item": Field(
            "Item",
            resolve=R.item,
            args=(Argument(NonNull("String"), name="barcode"),),
        ),
        "orders": Field(ListOf(NonNull("Order")), resolve=R.orders),
        "customers": Field(ListOf(NonNull("Customer")), resolve=R.customers),
        "orderItems": Field(ListOf(NonNull("OrderItem")), resolve=R.order_items),
    })

    registry.register_type("Mutation", {
        "createItem": Field(
            "Item",
            resolve=R.create_item,
            args=(Argument(NonNull("ItemInput"), name="item"),),
        ),
        "createCustomer": Field(
            "Customer",
            resolve=R.create_customer,
            args=(Argument(NonNull("CustomerInput"), name="customer"),),
        ),
        "createOrder": Field(
            "Order",
            resolve=R.create_order,
            args=(Argument(NonNull("OrderInput"), name="order"),),
        ),
        "createOrderItem": Field(
            "OrderItem",
            resolve=R.create_order_item,
            args=(Argument(NonNull("OrderItemInput"), name="orderItem"),),
        ),
    })

    return registry.build(query="Query", mutation="Mutation")


def create_executor(settings: Settings | None = None) -> Executor:
    """Executor over the inventory schema, tuned by settings."""
    settings = settings or get_settings()
    return Executor(
        build_schema(),
        timeout=settings.execution_timeout,
        document_cache=DocumentCache(settings.document_cache_size),
        max_batch_size=settings.max_batch_size,
    )


__all__ = ("build_schema", "create_executor")
