# bounded retries with exponential backoff
import asyncio, random
from typing import Any, Awaitable, Callable, Optional
import structlog

log = structlog.get_logger()


async def with_backoff(coro_factory: Callable[[], Awaitable[Any]], *, retries: int = 3,
                       base_delay: float = 1.0, max_delay: float = 30.0, jitter: float = 0.0,
                       on_retry: Optional[Callable[[int, BaseException], None]] = None,
                       sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep):
    """Run coro_factory(); on failure retry up to `retries` more times.

    Delay before retry n (0-based) is min(base_delay * 2**n, max_delay) plus
    up to `jitter` seconds. The last exception propagates unchanged.
    """
    attempt = 0
    while True:
        try:
            return await coro_factory()
        except Exception as e:
            if attempt >= retries:
                raise
            delay = min(base_delay * (2 ** attempt), max_delay)
            if jitter:
                delay += random.uniform(0, jitter)
            log.warning("backoff.retry", attempt=attempt + 1, retries=retries, delay=delay, err=str(e))
            if on_retry is not None:
                on_retry(attempt + 1, e)
            await sleep(delay)
            attempt += 1
