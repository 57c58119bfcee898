"""
Loader — per-request batching and memoization of keyed lookups.

    from quarry.loader import BatchLoader, CollectionBatchLoader, ValueLoader

    customers = BatchLoader(store.customers.get_by_ids, name="customers_by_id")
    orders = CollectionBatchLoader(
        partial(store.orders.get_by_foreign_key, "customer_id"),
        name="orders_by_customer_id",
    )

    jon, jane = await customers.load_many([1, 2])
    jon_orders = await orders.load(1)   # tuple, () when none

    all_items = ValueLoader(store.items.all, name="all_items")
    items = await all_items.load()      # fetched once per loader
"""

from quarry.loader._types import LoaderError, Fetch, CollectionFetch, ValueFetch, Schedule
from quarry.loader._loader import BatchLoader, CollectionBatchLoader, ValueLoader

__all__ = (
    "LoaderError",
    "Fetch",
    "CollectionFetch",
    "ValueFetch",
    "Schedule",
    "BatchLoader",
    "CollectionBatchLoader",
    "ValueLoader",
)
