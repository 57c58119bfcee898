"""
Inventory — queries and mutations against a seeded store.

Key concepts:
- create_executor() builds the inventory schema with settings applied
- The store is the request context; resolvers reach it through the scope
- Relations batch per request: N customers → 1 orders fetch
- Failures are located by path and never abort sibling fields

Level 4: quarry.inventory
Level 3: quarry.execution.Executor
Level 2: quarry.store
"""

import json

from quarry.config import Settings
from quarry.inventory import create_executor
from quarry.store import create_memory_store, seed
from examples._infra import banner, run


executor = create_executor(Settings(_env_file=None, execution_timeout=5.0))


def dump(result) -> None:
    print(json.dumps(result.to_dict(), indent=2, default=str))


async def main() -> None:
    store = create_memory_store()
    await seed(store)

    banner("1. Nested relations")
    dump(await executor.run(
        "{ customers { name orders { tag items { quantity item { title } } } } }",
        context=store,
    ))

    banner("2. Variables + operation name")
    dump(await executor.run(
        "query One { items { barcode } } query Two($b: String!) { item(barcode: $b) { title sellingPrice } }",
        {"b": "456"},
        context=store,
        operation_name="Two",
    ))

    banner("3. Mutations run in order")
    dump(await executor.run(
        "mutation {"
        ' mouse: createItem(item: {barcode: "999", title: "Mouse", sellingPrice: 19.99}) { itemId }'
        " line: createOrderItem(orderItem: {quantity: 2, itemId: 4, orderId: 1}) { id item { title } }"
        " }",
        context=store,
    ))

    banner("4. Partial failure")
    dump(await executor.run(
        "mutation {"
        ' ok: createCustomer(customer: {name: "Ann", billingAddress: "1 Road"}) { customerId }'
        ' bad: createOrder(order: {tag: "X", createdAt: "2024-01-01T00:00:00", customerId: 42}) { orderId }'
        " }",
        context=store,
    ))

    banner("5. Document errors")
    dump(await executor.run("{ items { price } }", context=store))


if __name__ == "__main__":
    run(main)
