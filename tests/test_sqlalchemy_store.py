from __future__ import annotations

from collections.abc import AsyncIterator
from decimal import Decimal
from pathlib import Path

import pytest
import pytest_asyncio

from quarry.execution import Executor
from quarry.store import InventoryStore, Item, StoreError, create_sqlalchemy_store, seed
from tests.conftest import recording


@pytest_asyncio.fixture
async def sql_store(tmp_path: Path) -> AsyncIterator[InventoryStore]:
    store, engine = await create_sqlalchemy_store(f"sqlite+aiosqlite:///{tmp_path / 'quarry.db'}")
    try:
        await seed(store)
        yield store
    finally:
        await engine.dispose()


@pytest.mark.asyncio
async def test_all_in_id_order(sql_store: InventoryStore) -> None:
    items = await sql_store.items.all()

    assert [i.item_id for i in items] == [1, 2, 3]
    assert [i.title for i in items] == ["Headphone", "Keyboard", "Monitor"]
    assert items[0].selling_price == Decimal(50)


@pytest.mark.asyncio
async def test_batched_lookups(sql_store: InventoryStore) -> None:
    by_id = await sql_store.customers.get_by_ids({1, 3})
    by_customer = await sql_store.orders.get_by_foreign_key("customer_id", {1, 2, 3})

    assert set(by_id) == {1}
    assert by_id[1].name == "Jon Doe"
    assert set(by_customer) == {1, 2}
    assert [o.tag for o in by_customer[2]] == ["ORD-456"]


@pytest.mark.asyncio
async def test_find_one_and_get_by_id(sql_store: InventoryStore) -> None:
    keyboard = await sql_store.items.find_one("barcode", "456")

    assert keyboard is not None and keyboard.title == "Keyboard"
    assert await sql_store.items.get_by_id(keyboard.item_id) == keyboard
    assert await sql_store.items.get_by_id(99) is None
    assert await sql_store.items.find_one("barcode", "nope") is None


@pytest.mark.asyncio
async def test_create_assigns_id(sql_store: InventoryStore) -> None:
    created = await sql_store.items.create(Item(barcode="999", title="Mouse", selling_price=Decimal("19.99")))

    assert created.item_id == 4
    assert (await sql_store.items.get_by_id(4)).selling_price == Decimal("19.99")


@pytest.mark.asyncio
async def test_unknown_column(sql_store: InventoryStore) -> None:
    with pytest.raises(StoreError):
        await sql_store.orders.get_by_foreign_key("nope", {1})


@pytest.mark.asyncio
async def test_customer_orders_batch_on_sqlalchemy(executor: Executor, sql_store: InventoryStore) -> None:
    spy = recording(sql_store)

    result = await executor.run("{ customers { name orders { tag } } }", context=spy)

    assert result.errors == ()
    assert [c["orders"] for c in result.data["customers"]] == [[{"tag": "ORD-123"}], [{"tag": "ORD-456"}]]
    assert spy.orders.calls == [("customer_id", frozenset({1, 2}))]


@pytest.mark.asyncio
async def test_create_then_read_on_sqlalchemy(executor: Executor, sql_store: InventoryStore) -> None:
    created = await executor.run(
        'mutation { createItem(item: {barcode: "999", title: "Mouse", sellingPrice: 20}) { itemId sellingPrice } }',
        context=sql_store,
    )
    read = await executor.run('{ item(barcode: "999") { itemId title sellingPrice } }', context=sql_store)

    assert created.data == {"createItem": {"itemId": 4, "sellingPrice": 20.0}}
    assert read.data == {"item": {"itemId": 4, "title": "Mouse", "sellingPrice": 20.0}}
