# keeps the current leaderboard snapshot fresh
import asyncio, time
from typing import Awaitable, Callable, List, Optional
import structlog
from packages.config.constants import POLL_INTERVAL_SEC
from packages.core.backoff import with_backoff
from packages.core.errors import AggregationError
from .aggregator import Aggregator
from .models import LeaderboardSnapshot, TokenRecord

log = structlog.get_logger()

TokenSource = Callable[[], Awaitable[List[str]]]


class LeaderboardPoller:
    """
    refresh() rebuilds the snapshot from scratch: token source -> aggregate.
    Batch-level failures are retried with exponential backoff; when every
    attempt fails the previous records stay and `error` is set.
    """

    def __init__(self, aggregator: Aggregator, token_source: TokenSource, *,
                 interval_sec: float = POLL_INTERVAL_SEC, retries: int = 3,
                 backoff_base: float = 1.0, backoff_cap: float = 30.0,
                 sleep: Callable[[float], Awaitable[object]] = asyncio.sleep,
                 clock: Callable[[], float] = time.time):
        self.aggregator = aggregator
        self.token_source = token_source
        self.interval_sec = interval_sec
        self.retries = retries
        self.backoff_base = backoff_base
        self.backoff_cap = backoff_cap
        self._sleep = sleep
        self._clock = clock
        self.snapshot = LeaderboardSnapshot()
        self._listeners: List[Callable[[LeaderboardSnapshot], None]] = []

    def subscribe(self, handler: Callable[[LeaderboardSnapshot], None]) -> None:
        self._listeners.append(handler)

    async def _attempt(self) -> List[TokenRecord]:
        mints = await self.token_source()
        return await self.aggregator.aggregate(mints)

    async def refresh(self) -> LeaderboardSnapshot:
        attempts = 0

        def _count(n: int, err: BaseException) -> None:
            nonlocal attempts
            attempts = n

        try:
            records = await with_backoff(self._attempt, retries=self.retries,
                                         base_delay=self.backoff_base, max_delay=self.backoff_cap,
                                         on_retry=_count, sleep=self._sleep)
        except Exception as e:
            err = AggregationError(attempts + 1, e)
            log.error("refresh.failed", attempts=err.attempts, err=str(e))
            self.snapshot = self.snapshot.model_copy(update={"error": str(err), "attempts": err.attempts})
        else:
            self.snapshot = LeaderboardSnapshot(records=records, refreshed_at=self._clock(),
                                                attempts=attempts + 1)
        for handler in list(self._listeners):
            handler(self.snapshot)
        return self.snapshot

    async def run(self, max_cycles: Optional[int] = None) -> None:
        cycles = 0
        while max_cycles is None or cycles < max_cycles:
            await self.refresh()
            cycles += 1
            if max_cycles is not None and cycles >= max_cycles:
                break
            await self._sleep(self.interval_sec)
