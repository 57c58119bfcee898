from __future__ import annotations

import pytest

from quarry.errors import FieldError
from quarry.execution import Executor
from quarry.store import InventoryStore


@pytest.mark.asyncio
async def test_items_query(executor: Executor, store: InventoryStore) -> None:
    result = await executor.run("{ items { barcode title } }", context=store)

    assert result.errors == ()
    assert result.data == {
        "items": [
            {"barcode": "123", "title": "Headphone"},
            {"barcode": "456", "title": "Keyboard"},
            {"barcode": "789", "title": "Monitor"},
        ]
    }


@pytest.mark.asyncio
async def test_repeated_items_selections_read_once(executor: Executor, spy_store: InventoryStore) -> None:
    result = await executor.run("{ a: items { barcode } b: items { title } }", context=spy_store)

    assert result.errors == ()
    assert [i["barcode"] for i in result.data["a"]] == ["123", "456", "789"]
    assert [i["title"] for i in result.data["b"]] == ["Headphone", "Keyboard", "Monitor"]
    assert spy_store.items.all_calls == 1


@pytest.mark.asyncio
async def test_items_are_read_again_in_a_new_request(executor: Executor, spy_store: InventoryStore) -> None:
    await executor.run("{ items { barcode } }", context=spy_store)
    await executor.run("{ items { barcode } }", context=spy_store)

    assert spy_store.items.all_calls == 2


@pytest.mark.asyncio
async def test_customer_orders_batch_into_one_fetch(executor: Executor, spy_store: InventoryStore) -> None:
    result = await executor.run("{ customers { name orders { tag } } }", context=spy_store)

    assert result.errors == ()
    assert result.data == {
        "customers": [
            {"name": "Jon Doe", "orders": [{"tag": "ORD-123"}]},
            {"name": "Jane Doe", "orders": [{"tag": "ORD-456"}]},
        ]
    }
    assert spy_store.orders.calls == [("customer_id", frozenset({1, 2}))]


@pytest.mark.asyncio
async def test_each_relation_has_its_own_batch(executor: Executor, spy_store: InventoryStore) -> None:
    result = await executor.run(
        "{ orders { tag customer { name } items { quantity item { title } } } }",
        context=spy_store,
    )

    assert result.errors == ()
    assert result.data == {
        "orders": [
            {
                "tag": "ORD-123",
                "customer": {"name": "Jon Doe"},
                "items": [
                    {"quantity": 2, "item": {"title": "Headphone"}},
                    {"quantity": 1, "item": {"title": "Keyboard"}},
                ],
            },
            {
                "tag": "ORD-456",
                "customer": {"name": "Jane Doe"},
                "items": [{"quantity": 1, "item": {"title": "Monitor"}}],
            },
        ]
    }
    assert spy_store.customers.calls == [("id", frozenset({1, 2}))]
    assert spy_store.order_items.calls == [("order_id", frozenset({1, 2}))]
    assert spy_store.items.calls == [("id", frozenset({1, 2, 3}))]


@pytest.mark.asyncio
async def test_repeated_keys_are_fetched_once(executor: Executor, spy_store: InventoryStore) -> None:
    result = await executor.run("{ orderItems { id order { tag } } }", context=spy_store)

    assert [row["order"]["tag"] for row in result.data["orderItems"]] == ["ORD-123", "ORD-123", "ORD-456"]
    assert spy_store.orders.calls == [("id", frozenset({1, 2}))]


@pytest.mark.asyncio
async def test_create_item_then_read(executor: Executor, store: InventoryStore) -> None:
    created = await executor.run(
        'mutation { createItem(item: {barcode: "999", title: "Mouse", sellingPrice: 20}) '
        "{ itemId barcode title sellingPrice } }",
        context=store,
    )
    assert created.errors == ()
    assert created.data == {
        "createItem": {"itemId": 4, "barcode": "999", "title": "Mouse", "sellingPrice": 20.0}
    }

    read = await executor.run('{ item(barcode: "999") { itemId barcode title sellingPrice } }', context=store)
    assert read.data == {"item": created.data["createItem"]}


@pytest.mark.asyncio
async def test_create_order_with_variables(executor: Executor, store: InventoryStore) -> None:
    result = await executor.run(
        "mutation New($order: OrderInput!) { createOrder(order: $order) { orderId tag createdAt customer { name } } }",
        {"order": {"tag": "ORD-789", "createdAt": "2024-05-01T10:30:00", "customerId": 2}},
        context=store,
    )

    assert result.errors == ()
    assert result.data == {
        "createOrder": {
            "orderId": 3,
            "tag": "ORD-789",
            "createdAt": "2024-05-01T10:30:00",
            "customer": {"name": "Jane Doe"},
        }
    }


@pytest.mark.asyncio
async def test_create_order_for_unknown_customer(executor: Executor, store: InventoryStore) -> None:
    result = await executor.run(
        'mutation { createOrder(order: {tag: "X", createdAt: "2024-05-01T00:00:00", customerId: 99}) { orderId } }',
        context=store,
    )

    assert result.data == {"createOrder": None}
    assert result.errors == (FieldError("Customer 99 does not exist", ("createOrder",)),)
    assert len(await store.orders.all()) == 2


@pytest.mark.asyncio
async def test_create_customer_and_order_item(executor: Executor, store: InventoryStore) -> None:
    result = await executor.run(
        "mutation {"
        ' customer: createCustomer(customer: {name: "Ann", billingAddress: "1 Road"}) { customerId name }'
        " line: createOrderItem(orderItem: {quantity: 5, itemId: 3, orderId: 2}) { id quantity order { tag } }"
        " bad: createOrderItem(orderItem: {quantity: 1, itemId: 42, orderId: 2}) { id }"
        " }",
        context=store,
    )

    assert result.data == {
        "customer": {"customerId": 3, "name": "Ann"},
        "line": {"id": 4, "quantity": 5, "order": {"tag": "ORD-456"}},
        "bad": None,
    }
    assert result.errors == (FieldError("Item 42 does not exist", ("bad",)),)


@pytest.mark.asyncio
async def test_unknown_barcode_is_null(executor: Executor, store: InventoryStore) -> None:
    result = await executor.run('{ item(barcode: "000") { title } }', context=store)

    assert result.data == {"item": None}
    assert result.errors == ()


@pytest.mark.asyncio
async def test_missing_input_field(executor: Executor, store: InventoryStore) -> None:
    result = await executor.run(
        'mutation { createItem(item: {barcode: "1", title: "No price"}) { itemId } }',
        context=store,
    )

    assert result.data == {"createItem": None}
    assert "sellingPrice" in result.errors[0].message
    assert len(await store.items.all()) == 3


@pytest.mark.asyncio
async def test_customer_without_orders_gets_empty_list(executor: Executor, store: InventoryStore) -> None:
    await executor.run(
        'mutation { createCustomer(customer: {name: "New", billingAddress: "Nowhere"}) { customerId } }',
        context=store,
    )

    result = await executor.run("{ customers { name orders { tag } } }", context=store)

    assert result.data["customers"][-1] == {"name": "New", "orders": []}
