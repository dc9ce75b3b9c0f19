"""SOL/USD oracle and the TTL cache underneath it."""
import asyncio

import pytest

from packages.core.cache import TTLCache
from packages.core.errors import UpstreamError
from packages.pricing.oracle import PriceOracle
from packages.sources.coingecko import CoinGeckoClient


class StubRate:
    def __init__(self, *results):
        self.results = list(results)
        self.calls = 0

    async def __call__(self):
        self.calls += 1
        r = self.results.pop(0)
        if isinstance(r, Exception):
            raise r
        return r


async def test_two_calls_within_ttl_hit_upstream_once(clock):
    stub = StubRate(180.0)
    oracle = PriceOracle(stub, clock=clock)
    assert await oracle.get_exchange_rate() == 180.0
    clock.advance(59)
    assert await oracle.get_exchange_rate() == 180.0
    assert stub.calls == 1


async def test_call_after_ttl_refetches(clock):
    stub = StubRate(180.0, 190.0)
    oracle = PriceOracle(stub, clock=clock)
    await oracle.get_exchange_rate()
    clock.advance(60)
    assert await oracle.get_exchange_rate() == 190.0
    assert stub.calls == 2


async def test_failed_refresh_serves_previous_value(clock):
    stub = StubRate(180.0, UpstreamError("coingecko", "429"), 210.0)
    oracle = PriceOracle(stub, clock=clock)
    await oracle.get_exchange_rate()
    fetched_at = oracle.cache.fetched_at
    clock.advance(61)
    assert await oracle.get_exchange_rate() == 180.0
    assert oracle.cache.fetched_at == fetched_at
    # still stale, so the next call tries upstream again
    assert await oracle.get_exchange_rate() == 210.0
    assert stub.calls == 3


async def test_fallback_when_nothing_cached(clock):
    oracle = PriceOracle(StubRate(UpstreamError("coingecko", "down")), clock=clock)
    assert await oracle.get_exchange_rate() == 200.0


async def test_lamports_to_usd(clock):
    oracle = PriceOracle(StubRate(100.0), clock=clock)
    assert await oracle.lamports_to_usd(1_500_000_000) == 150.0


async def test_concurrent_misses_share_one_fetch(clock):
    gate = asyncio.Event()
    calls = 0

    async def slow_rate():
        nonlocal calls
        calls += 1
        await gate.wait()
        return 175.0

    oracle = PriceOracle(slow_rate, clock=clock)
    waiters = [asyncio.ensure_future(oracle.get_exchange_rate()) for _ in range(20)]
    await asyncio.sleep(0)
    gate.set()
    assert await asyncio.gather(*waiters) == [175.0] * 20
    assert calls == 1


async def test_cache_without_fallback_reraises(clock):
    async def boom():
        raise UpstreamError("bags", "down")

    cache = TTLCache(boom, 10, clock=clock)
    with pytest.raises(UpstreamError):
        await cache.get()


async def test_coingecko_parses_nested_price(router, http):
    base = "https://api.coingecko.com/api/v3"
    router.add(f"{base}/simple/price?ids=solana&vs_currencies=usd", json={"solana": {"usd": 187.12}})
    assert await CoinGeckoClient(http, base).simple_price() == 187.12


async def test_coingecko_missing_price_raises(router, http):
    base = "https://api.coingecko.com/api/v3"
    router.add(f"{base}/simple/price?ids=solana&vs_currencies=usd", json={"solana": {}})
    with pytest.raises(UpstreamError):
        await CoinGeckoClient(http, base).simple_price()


async def test_coingecko_non_finite_price_raises(router, http):
    base = "https://api.coingecko.com/api/v3"
    router.add(f"{base}/simple/price?ids=solana&vs_currencies=usd", text='{"solana": {"usd": NaN}}')
    with pytest.raises(UpstreamError):
        await CoinGeckoClient(http, base).simple_price()
