"""
Batching — many loads, one round trip.

Key concepts:
- BatchLoader coalesces keys requested in the same loop pass
- Each key is fetched at most once per loader (memoized futures)
- CollectionBatchLoader groups one-to-many lookups; missing keys give ()
- ExecutionScope owns loaders for one request and closes them together

Level 3: quarry.execution.ExecutionScope
Level 2: quarry.loader
Level 1: kungfu.Result
"""

import asyncio
from collections.abc import Mapping

from quarry import loader as L
from quarry.execution import ExecutionScope
from quarry.loader import LoaderError
from examples._infra import FakeDb, User, banner, run, safely, show


db = FakeDb()


async def users_by_tier(tiers: frozenset[str]) -> Mapping[str, list[User]]:
    db.round_trips += 1
    print(f"  [DB] SELECT ... WHERE tier IN {sorted(tiers)}")
    grouped: dict[str, list[User]] = {}
    for user in db.users.values():
        if user.tier in tiers:
            grouped.setdefault(user.tier, []).append(user)
    return grouped


async def broken_fetch(ids: frozenset[int]) -> Mapping[int, User]:
    raise ConnectionError("db unreachable")


# ═══════════════════════════════════════════════════════════════════════════════
# 1. COALESCING — concurrent loads share one fetch
# ═══════════════════════════════════════════════════════════════════════════════


async def coalescing() -> None:
    banner("1. Coalescing")
    users = L.BatchLoader(db.get_users, name="users_by_id")

    alice, bob, nobody = await asyncio.gather(users.load(1), users.load(2), users.load(99))

    print(f"  alice={alice.name} bob={bob.name} nobody={nobody}")
    print(f"  round trips: {db.round_trips}, batches: {users.batches}")


# ═══════════════════════════════════════════════════════════════════════════════
# 2. MEMOIZATION — a key is fetched once per loader
# ═══════════════════════════════════════════════════════════════════════════════


async def memoization() -> None:
    banner("2. Memoization")
    users = L.BatchLoader(db.get_users, name="users_by_id")
    before = db.round_trips

    first = await users.load(3)
    again = await users.load(3)
    many = await users.load_many([1, 3])

    print(f"  same object: {first is again}, many={[u.name for u in many]}")
    print(f"  round trips: {db.round_trips - before}")


# ═══════════════════════════════════════════════════════════════════════════════
# 3. COLLECTIONS — one-to-many
# ═══════════════════════════════════════════════════════════════════════════════


async def collections() -> None:
    banner("3. Collections")
    by_tier = L.CollectionBatchLoader(users_by_tier, name="users_by_tier")

    gold, platinum = await asyncio.gather(by_tier.load("gold"), by_tier.load("platinum"))

    print(f"  gold={[u.name for u in gold]} platinum={platinum}")


# ═══════════════════════════════════════════════════════════════════════════════
# 4. FAILURE — every key of a failed batch sees the same error
# ═══════════════════════════════════════════════════════════════════════════════


async def failure() -> None:
    banner("4. Failure")
    users = L.BatchLoader(broken_fetch, name="users_by_id")

    first, second = await asyncio.gather(users.load(1), users.load(2), return_exceptions=True)

    print(f"  shared error: {first is second}, loader={first.loader if isinstance(first, LoaderError) else '-'}")
    show("load(1)", await safely(lambda: users.load(1)))


# ═══════════════════════════════════════════════════════════════════════════════
# 5. SCOPE — loaders live for one request
# ═══════════════════════════════════════════════════════════════════════════════


async def scoped() -> None:
    banner("5. Scope")
    async with ExecutionScope(max_batch_size=2) as scope:
        users = scope.get_or_create_loader("users_by_id", db.get_users)
        assert scope.get_or_create_loader("users_by_id", db.get_users) is users

        found = await asyncio.gather(*(users.load(i) for i in (1, 2, 3)))
        print(f"  {[u.name for u in found]} in {users.batches} chunks")

    show("after close", await safely(lambda: users.load(42)))


async def main() -> None:
    await coalescing()
    await memoization()
    await collections()
    await failure()
    await scoped()


if __name__ == "__main__":
    run(main)
