import asyncio
import json
import time

import httpx
from fastapi.encoders import jsonable_encoder

from polybets import cache
from polybets.polymarket.schemas import Event, ParsedMarket
from polybets.services import bets_service
from polybets.settings import settings


class FakeRedis:
    def __init__(self):
        self.store = {}

    def get(self, key):
        return self.store.get(key)

    def set(self, key, value, nx=False, ex=None):
        if nx and key in self.store:
            return None
        self.store[key] = value
        return True

    def delete(self, key):
        self.store.pop(key, None)


def _batch() -> list[Event]:
    return [
        Event.model_validate(
            {
                "id": "e1",
                "title": "Will Bitcoin reach $100k?",
                "slug": "bitcoin-100k",
                "markets": [
                    {
                        "id": "m1",
                        "question": "Will Bitcoin reach $100k by December?",
                        "outcomes": '["Yes","No"]',
                        "outcomePrices": '["0.73","0.27"]',
                        "volume24hr": 5000,
                        "volume": 90000,
                        "active": True,
                        "closed": False,
                    }
                ],
            }
        )
    ]


def _fetch(calls: list, failures: int = 0):
    async def _inner():
        calls.append(1)
        if len(calls) <= failures:
            raise httpx.ConnectError("connection refused")
        return _batch()

    return _inner


def test_no_terms_skips_fetch():
    calls = []
    markets = asyncio.run(bets_service.get_polymarket_bets(name=None, symbol="-", fetch=_fetch(calls)))
    assert markets == []
    assert calls == []


def test_results_are_cached_per_terms(monkeypatch):
    fake_redis = FakeRedis()
    monkeypatch.setattr(cache, "redis_conn", fake_redis)
    monkeypatch.setattr(settings, "CACHE_ENABLED", True)
    calls = []

    first = asyncio.run(bets_service.get_polymarket_bets(name="Bitcoin", symbol="BTC", fetch=_fetch(calls)))
    second = asyncio.run(bets_service.get_polymarket_bets(name="Bitcoin", symbol="BTC", fetch=_fetch(calls)))

    assert [m.id for m in first] == ["m1"]
    assert second == first
    assert len(calls) == 1
    assert list(fake_redis.store) == [bets_service.bets_cache_key(["bitcoin", "btc"])]


def test_upstream_failure_is_retried_once():
    calls = []
    markets = asyncio.run(bets_service.get_polymarket_bets(name="Bitcoin", fetch=_fetch(calls, failures=1)))
    assert [m.id for m in markets] == ["m1"]
    assert len(calls) == 2


def test_persistent_failure_returns_empty_and_is_not_cached(monkeypatch):
    fake_redis = FakeRedis()
    monkeypatch.setattr(cache, "redis_conn", fake_redis)
    monkeypatch.setattr(settings, "CACHE_ENABLED", True)
    monkeypatch.setattr(settings, "BETS_FETCH_RETRIES", 2)
    calls = []

    markets = asyncio.run(bets_service.get_polymarket_bets(name="Bitcoin", fetch=_fetch(calls, failures=10)))

    assert markets == []
    assert len(calls) == 3
    assert fake_redis.store == {}


def test_stale_entry_served_when_upstream_fails(monkeypatch):
    fake_redis = FakeRedis()
    monkeypatch.setattr(cache, "redis_conn", fake_redis)
    monkeypatch.setattr(settings, "CACHE_ENABLED", True)
    stale_market = ParsedMarket(
        id="old",
        event_id="e0",
        event_title="Bitcoin above 90k?",
        event_slug="bitcoin-90k",
        question="Bitcoin above 90k?",
        slug="bitcoin-90k",
        volume24hr=10,
    )
    now = time.time()
    fake_redis.store[bets_service.bets_cache_key(["bitcoin"])] = json.dumps(
        {
            "value": jsonable_encoder([stale_market]),
            "expires_at": now - 10,
            "stale_until": now + 60,
        }
    )
    calls = []

    markets = asyncio.run(bets_service.get_polymarket_bets(name="Bitcoin", fetch=_fetch(calls, failures=10)))

    assert markets == [stale_market]
    assert len(calls) == 2


def test_cache_read_errors_fall_through_to_search(monkeypatch):
    class BrokenRedis(FakeRedis):
        def get(self, key):
            raise ConnectionError("redis down")

        def set(self, key, value, nx=False, ex=None):
            raise ConnectionError("redis down")

    monkeypatch.setattr(cache, "redis_conn", BrokenRedis())
    monkeypatch.setattr(settings, "CACHE_ENABLED", True)
    calls = []

    markets = asyncio.run(bets_service.get_polymarket_bets(name="Bitcoin", fetch=_fetch(calls)))

    assert [m.id for m in markets] == ["m1"]


def test_slow_redis_does_not_stall_the_event_loop(monkeypatch):
    class SlowRedis(FakeRedis):
        def get(self, key):
            time.sleep(0.2)
            return super().get(key)

        def set(self, key, value, nx=False, ex=None):
            time.sleep(0.2)
            return super().set(key, value, nx=nx, ex=ex)

    monkeypatch.setattr(cache, "redis_conn", SlowRedis())
    monkeypatch.setattr(settings, "CACHE_ENABLED", True)

    async def _run():
        ticks = 0
        done = asyncio.Event()

        async def ticker():
            nonlocal ticks
            while not done.is_set():
                ticks += 1
                await asyncio.sleep(0.02)

        async def lookup():
            try:
                return await bets_service.get_polymarket_bets(name="Bitcoin", fetch=_fetch([]))
            finally:
                done.set()

        markets, _ = await asyncio.gather(lookup(), ticker())
        return markets, ticks

    markets, ticks = asyncio.run(_run())

    assert [m.id for m in markets] == ["m1"]
    assert ticks >= 5


def test_unreadable_cache_payload_is_ignored(monkeypatch):
    fake_redis = FakeRedis()
    fake_redis.store[bets_service.bets_cache_key(["bitcoin"])] = b"\xff not json"
    monkeypatch.setattr(cache, "redis_conn", fake_redis)
    monkeypatch.setattr(settings, "CACHE_ENABLED", True)
    calls = []

    markets = asyncio.run(bets_service.get_polymarket_bets(name="Bitcoin", fetch=_fetch(calls)))

    assert [m.id for m in markets] == ["m1"]
    assert len(calls) == 1
    assert json.loads(fake_redis.store[bets_service.bets_cache_key(["bitcoin"])])["value"][0]["id"] == "m1"
