"""Tests for the asynchronous service client.

Coroutines are driven with ``asyncio.run`` so no async pytest plugin is needed.
"""

from __future__ import annotations

import asyncio
import json
import time
from datetime import timedelta

import httpx
import pytest
from pydantic import BaseModel

from restbase.client import AsyncServiceClient
from restbase.exceptions import (
    HttpFailureError,
    NoConnectivityError,
    NotFoundError,
    TransportError,
)


class Item(BaseModel):
    id: int
    name: str


ITEM = {"id": 1, "name": "a"}


@pytest.fixture(autouse=True)
def _quiet(quiet_output):
    yield


class TestAsyncFetch:
    def test_second_fetch_served_from_cache(
        self, profile, cache, probe, recording_transport
    ) -> None:
        transport = recording_transport(ITEM)

        async def run():
            async with AsyncServiceClient(
                profile, cache=cache, connectivity=probe, transport=transport
            ) as client:
                first = await client.fetch("items/1", Item, cache_duration=2)
                second = await client.fetch("items/1", Item, cache_duration=2)
            return first, second

        first, second = asyncio.run(run())
        assert first == second == Item(id=1, name="a")
        assert len(transport.requests) == 1
        assert probe.calls == 1

    def test_stale_entry_served_offline(
        self, profile, cache, clock, probe, recording_transport
    ) -> None:
        cache.put("items/1", json.dumps(ITEM), timedelta(hours=1))
        clock.advance(hours=3)
        probe.online = False
        transport = recording_transport({"id": 1, "name": "new"})

        async def run():
            async with AsyncServiceClient(
                profile, cache=cache, connectivity=probe, transport=transport
            ) as client:
                return await client.fetch("items/1", cache_duration=0)

        assert asyncio.run(run()) == ITEM
        assert transport.requests == []

    def test_nothing_cached_offline_raises(
        self, profile, cache, probe, recording_transport
    ) -> None:
        probe.online = False
        transport = recording_transport(ITEM)

        async def run():
            async with AsyncServiceClient(
                profile, cache=cache, connectivity=probe, transport=transport
            ) as client:
                await client.fetch("items/1")

        with pytest.raises(NoConnectivityError):
            asyncio.run(run())
        assert transport.requests == []

    def test_zero_duration_writes_nothing(
        self, profile, cache, probe, recording_transport
    ) -> None:
        async def run():
            async with AsyncServiceClient(
                profile, cache=cache, connectivity=probe, transport=recording_transport(ITEM)
            ) as client:
                return await client.fetch("items/1", cache_duration=0)

        assert asyncio.run(run()) == ITEM
        assert cache.get("items/1") is None

    def test_concurrent_fetches(self, profile, cache, probe, recording_transport) -> None:
        transport = recording_transport(ITEM)

        async def run():
            async with AsyncServiceClient(
                profile, cache=cache, connectivity=probe, transport=transport
            ) as client:
                return await asyncio.gather(
                    client.fetch("items/1"), client.fetch("items/2")
                )

        assert asyncio.run(run()) == [ITEM, ITEM]
        assert sorted(cache.keys()) == ["items/1", "items/2"]


class TestAsyncErrors:
    def test_not_found(self, profile, probe, recording_transport) -> None:
        transport = recording_transport({"message": "missing"}, status_code=404)

        async def run():
            async with AsyncServiceClient(
                profile, connectivity=probe, transport=transport
            ) as client:
                await client.fetch("items/9")

        with pytest.raises(NotFoundError) as exc_info:
            asyncio.run(run())
        assert exc_info.value.status_code == 404

    def test_transport_failure_wrapped(self, profile, probe) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ReadTimeout("timed out", request=request)

        async def run():
            async with AsyncServiceClient(
                profile, connectivity=probe, transport=httpx.MockTransport(handler)
            ) as client:
                await client.fetch("items/1")

        with pytest.raises(TransportError):
            asyncio.run(run())


class TestAsyncWrites:
    def test_create_replace_remove(self, profile, cache, probe, recording_transport) -> None:
        transport = recording_transport(ITEM)

        async def run():
            async with AsyncServiceClient(
                profile, cache=cache, connectivity=probe, transport=transport
            ) as client:
                await client.create("items", {"name": "a"})
                await client.replace("items/1", Item(id=1, name="a"))
                await client.remove("items/1")

        asyncio.run(run())
        assert [r.method for r in transport.requests] == ["POST", "PUT", "DELETE"]
        assert transport.requests[0].headers["content-type"] == "application/json"
        assert json.loads(transport.requests[1].content) == ITEM
        assert cache.keys() == []
        assert probe.calls == 0

    def test_write_failure(self, profile, probe, recording_transport) -> None:
        transport = recording_transport({"error": "bad"}, status_code=400)

        async def run():
            async with AsyncServiceClient(
                profile, connectivity=probe, transport=transport
            ) as client:
                await client.create("items", {})

        with pytest.raises(HttpFailureError) as exc_info:
            asyncio.run(run())
        assert exc_info.value.status_code == 400


class SlowStore:
    """CacheStore whose every call blocks the calling thread."""

    def __init__(self, delay: float) -> None:
        self.delay = delay
        self.entries: dict[str, str] = {}

    def get(self, key):
        time.sleep(self.delay)
        return self.entries.get(key)

    def is_expired(self, key):
        return True

    def put(self, key, body, ttl):
        time.sleep(self.delay)
        self.entries[key] = body


class TestEventLoopResponsiveness:
    def test_cache_io_does_not_block_loop(self, profile, probe, recording_transport) -> None:
        store = SlowStore(delay=0.3)
        transport = recording_transport(ITEM)

        async def run():
            loop = asyncio.get_running_loop()
            gaps: list[float] = []
            done = asyncio.Event()

            async def ticker():
                last = loop.time()
                while not done.is_set():
                    await asyncio.sleep(0.01)
                    now = loop.time()
                    gaps.append(now - last)
                    last = now

            tick = asyncio.create_task(ticker())
            async with AsyncServiceClient(
                profile, cache=store, connectivity=probe, transport=transport
            ) as client:
                result = await client.fetch("items/1")
            done.set()
            await tick
            return result, max(gaps)

        result, max_gap = asyncio.run(run())
        assert result == ITEM
        assert "items/1" in store.entries
        assert max_gap < 0.2
