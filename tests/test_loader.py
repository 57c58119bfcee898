from __future__ import annotations

import asyncio
from collections.abc import Mapping
from typing import Any

import pytest

from quarry.loader import BatchLoader, CollectionBatchLoader, LoaderError, ValueLoader


class Backend:
    """Fetch function that records every batch it receives."""

    def __init__(self, rows: Mapping[Any, Any]) -> None:
        self.rows = rows
        self.calls: list[frozenset[Any]] = []

    async def __call__(self, keys: frozenset[Any]) -> Mapping[Any, Any]:
        self.calls.append(keys)
        return {k: self.rows[k] for k in keys if k in self.rows}


@pytest.mark.asyncio
async def test_loads_in_one_batch() -> None:
    backend = Backend({1: "a", 2: "b", 3: "c"})
    loader = BatchLoader(backend, name="letters")

    values = await asyncio.gather(loader.load(1), loader.load(2), loader.load(3))

    assert values == ["a", "b", "c"]
    assert backend.calls == [frozenset({1, 2, 3})]
    assert loader.batches == 1


@pytest.mark.asyncio
async def test_repeated_key_is_memoized() -> None:
    backend = Backend({1: "a"})
    loader = BatchLoader(backend, name="letters")

    first = loader.load(1)
    assert loader.load(1) is first
    assert await first == "a"
    assert await loader.load(1) == "a"
    assert backend.calls == [frozenset({1})]


@pytest.mark.asyncio
async def test_load_many_keeps_input_order() -> None:
    backend = Backend({1: "a", 3: "c"})
    loader = BatchLoader(backend, name="letters")

    assert await loader.load_many([3, 1, 2, 1]) == ["c", "a", None, "a"]
    assert backend.calls == [frozenset({1, 2, 3})]


@pytest.mark.asyncio
async def test_collection_loader_groups_and_empties() -> None:
    backend = Backend({1: ["x", "y"]})
    loader = CollectionBatchLoader(backend, name="groups")

    assert await loader.load_many([1, 2]) == [("x", "y"), ()]
    assert backend.calls == [frozenset({1, 2})]


@pytest.mark.asyncio
async def test_fetch_failure_settles_whole_batch() -> None:
    async def explode(keys: frozenset[int]) -> Mapping[int, str]:
        raise RuntimeError("boom")

    loader = BatchLoader(explode, name="broken")

    results = await asyncio.gather(loader.load(1), loader.load(2), return_exceptions=True)

    assert isinstance(results[0], LoaderError)
    assert results[0] is results[1]
    assert "boom" in results[0].message
    assert results[0].loader == "broken"
    assert isinstance(results[0].__cause__, RuntimeError)
    with pytest.raises(LoaderError):
        await loader.load(1)
    assert loader.batches == 1


@pytest.mark.asyncio
async def test_non_mapping_result_is_a_loader_error() -> None:
    async def as_list(keys: frozenset[int]) -> Any:
        return sorted(keys)

    loader = BatchLoader(as_list, name="listy")

    with pytest.raises(LoaderError, match="expected a mapping"):
        await loader.load(1)


@pytest.mark.asyncio
async def test_max_batch_size_chunks_dispatch() -> None:
    backend = Backend({i: i * 10 for i in range(5)})
    loader = BatchLoader(backend, name="chunked", max_batch_size=2)

    assert await loader.load_many(range(5)) == [0, 10, 20, 30, 40]
    assert sorted(len(c) for c in backend.calls) == [1, 2, 2]
    assert frozenset().union(*backend.calls) == frozenset(range(5))
    assert loader.batches == 3


def test_max_batch_size_must_be_positive() -> None:
    with pytest.raises(ValueError):
        BatchLoader(Backend({}), name="bad", max_batch_size=0)


@pytest.mark.asyncio
async def test_custom_schedule_controls_dispatch() -> None:
    backend = Backend({1: "a", 2: "b"})
    scheduled: list[Any] = []
    loader = BatchLoader(backend, name="manual", schedule=scheduled.append)

    first = loader.load(1)
    loader.load(2)
    await asyncio.sleep(0)

    assert len(scheduled) == 1
    assert backend.calls == []

    scheduled[0]()
    assert await first == "a"
    assert backend.calls == [frozenset({1, 2})]


@pytest.mark.asyncio
async def test_close_cancels_outstanding_work() -> None:
    gate = asyncio.Event()

    async def blocked(keys: frozenset[int]) -> Mapping[int, str]:
        await gate.wait()
        return {}

    loader = BatchLoader(blocked, name="blocked")
    pending = loader.load(1)
    await asyncio.sleep(0)
    await asyncio.sleep(0)

    loader.close()

    assert pending.cancelled()
    assert loader.closed
    with pytest.raises(LoaderError):
        loader.load(2)


@pytest.mark.asyncio
async def test_cancelled_load_many_keeps_keys_loadable() -> None:
    gate = asyncio.Event()
    calls: list[frozenset[int]] = []

    async def gated(keys: frozenset[int]) -> Mapping[int, str]:
        calls.append(keys)
        await gate.wait()
        return {k: str(k) for k in keys}

    loader = BatchLoader(gated, name="gated")
    waiter = asyncio.ensure_future(loader.load_many([1, 2]))
    await asyncio.sleep(0)
    await asyncio.sleep(0)

    waiter.cancel()
    await asyncio.sleep(0)
    gate.set()

    with pytest.raises(asyncio.CancelledError):
        await waiter
    assert await loader.load(1) == "1"
    assert await loader.load_many([2, 1]) == ["2", "1"]
    assert calls == [frozenset({1, 2})]


@pytest.mark.asyncio
async def test_value_loader_shares_one_fetch() -> None:
    calls = 0

    async def everything() -> list[str]:
        nonlocal calls
        calls += 1
        return ["a", "b"]

    loader = ValueLoader(everything, name="everything")

    assert loader.load() is loader.load()
    assert await loader.load() == ["a", "b"]
    assert calls == 1
    assert loader.batches == 1


@pytest.mark.asyncio
async def test_value_loader_failure_is_a_loader_error() -> None:
    async def broken() -> list[str]:
        raise ConnectionError("offline")

    loader = ValueLoader(broken, name="everything")

    with pytest.raises(LoaderError, match="offline") as info:
        await loader.load()
    assert isinstance(info.value.__cause__, ConnectionError)
