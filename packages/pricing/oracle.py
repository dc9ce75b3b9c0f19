# SOL/USD exchange rate behind a TTL cache
import time
from typing import Awaitable, Callable
import structlog
from packages.config.constants import LAMPORTS_PER_SOL, SOL_PRICE_FALLBACK, SOL_PRICE_TTL_SEC
from packages.core.cache import TTLCache

log = structlog.get_logger()


class PriceOracle:
    """
    get_exchange_rate() always returns a positive USD rate for SOL.

    Fresh for `ttl` seconds after the last successful fetch. On upstream
    failure the last known rate is served; before any success, `fallback`.
    """

    def __init__(self, fetch_rate: Callable[[], Awaitable[float]], *,
                 ttl: float = SOL_PRICE_TTL_SEC, fallback: float = SOL_PRICE_FALLBACK,
                 clock: Callable[[], float] = time.monotonic):
        self._fetch_rate = fetch_rate
        self.cache: TTLCache[float] = TTLCache(self._load, ttl, name="sol_price",
                                               fallback=fallback, clock=clock)

    async def _load(self) -> float:
        price = await self._fetch_rate()
        log.info("sol_price.updated", usd=price)
        return price

    async def get_exchange_rate(self) -> float:
        return await self.cache.get()

    async def lamports_to_usd(self, lamports: int) -> float:
        return lamports / LAMPORTS_PER_SOL * await self.get_exchange_rate()
