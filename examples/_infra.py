"""Shared infrastructure for examples."""

from __future__ import annotations

import asyncio
from collections.abc import Callable, Coroutine, Mapping
from dataclasses import dataclass, field

from combinators import lift as L

from quarry._types import Error, Ok, Result


# Types
@dataclass(frozen=True, slots=True)
class User:
    id: int
    name: str
    tier: str = "standard"


# Fake DB — counts round trips
@dataclass(slots=True)
class FakeDb:
    users: dict[int, User] = field(default_factory=lambda: {
        1: User(1, "Alice", "gold"),
        2: User(2, "Bob", "silver"),
        3: User(3, "Carol"),
    })
    round_trips: int = 0

    async def get_users(self, ids: frozenset[int]) -> Mapping[int, User]:
        self.round_trips += 1
        print(f"  [DB] SELECT ... WHERE id IN {sorted(ids)}")
        await asyncio.sleep(0.01)
        return {i: self.users[i] for i in ids if i in self.users}


# Helpers
def banner(title: str) -> None:
    print(f"\n{'─' * 50}\n{title}\n{'─' * 50}")


def show(label: str, result: Result[object, object]) -> None:
    match result:
        case Ok(value):
            print(f"  {label}: {value}")
        case Error(e):
            print(f"  {label}: error {e}")


async def safely[T](fn: Callable[[], Coroutine[object, object, T]]) -> Result[T, str]:
    return await L.catching_async(fn, on_error=str)


def run(main: Callable[[], Coroutine[object, object, None]]) -> None:
    asyncio.run(main())
