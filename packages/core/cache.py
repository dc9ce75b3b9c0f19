# single-value TTL cache with a shared in-flight refresh
import asyncio, time
from typing import Awaitable, Callable, Generic, Optional, TypeVar
import structlog

T = TypeVar("T")
log = structlog.get_logger()


class TTLCache(Generic[T]):
    """
    Holds one value plus the time it was fetched.

    get() serves the value while it is younger than ttl. On a miss every
    caller awaits the same refresh task, so N concurrent misses cost one
    upstream call. A failed refresh leaves value/fetched_at untouched and
    serves the stale value, else `fallback`, else re-raises.
    """

    def __init__(self, loader: Callable[[], Awaitable[T]], ttl: float, *,
                 name: str = "cache", fallback: Optional[T] = None,
                 clock: Callable[[], float] = time.monotonic):
        self.loader = loader
        self.ttl = ttl
        self.name = name
        self.fallback = fallback
        self.clock = clock
        self.value: Optional[T] = None
        self.fetched_at: Optional[float] = None
        self._inflight: Optional[asyncio.Task] = None

    def is_fresh(self) -> bool:
        if self.fetched_at is None:
            return False
        return (self.clock() - self.fetched_at) < self.ttl

    async def get(self) -> T:
        if self.is_fresh():
            return self.value  # type: ignore[return-value]
        return await self.refresh()

    async def refresh(self) -> T:
        task = self._inflight
        if task is None:
            task = asyncio.ensure_future(self._load())
            self._inflight = task
            task.add_done_callback(self._clear_inflight)
        # shield: one waiter being cancelled must not kill the shared fetch
        return await asyncio.shield(task)

    def _clear_inflight(self, task: asyncio.Task) -> None:
        if self._inflight is task:
            self._inflight = None

    async def _load(self) -> T:
        try:
            value = await self.loader()
        except Exception as e:
            log.warning("cache.refresh_failed", cache=self.name, err=str(e),
                        has_stale=self.value is not None)
            if self.value is not None:
                return self.value
            if self.fallback is not None:
                return self.fallback
            raise
        self.value = value
        self.fetched_at = self.clock()
        log.debug("cache.refreshed", cache=self.name)
        return value
