"""Leaderboard refresh: batch retries with backoff and the error state."""
import pytest

from packages.leaderboard.models import TokenRecord
from packages.leaderboard.poller import LeaderboardPoller


class StubAggregator:
    def __init__(self):
        self.runs = []

    async def aggregate(self, mints):
        self.runs.append(list(mints))
        return [TokenRecord(mint=m, loaded=True, market_cap_usd=1.0) for m in mints]


class FlakySource:
    def __init__(self, failures, mints=("MintA", "MintB")):
        self.failures = failures
        self.mints = list(mints)
        self.calls = 0

    async def __call__(self):
        self.calls += 1
        if self.calls <= self.failures:
            raise ConnectionError(f"token list down ({self.calls})")
        return self.mints


@pytest.fixture
def sleeps():
    return []


@pytest.fixture
def fake_sleep(sleeps):
    async def _sleep(d):
        sleeps.append(d)
    return _sleep


async def test_refresh_success(fake_sleep, sleeps):
    poller = LeaderboardPoller(StubAggregator(), FlakySource(0), sleep=fake_sleep, clock=lambda: 42.0)
    snap = await poller.refresh()
    assert [r.mint for r in snap.records] == ["MintA", "MintB"]
    assert snap.refreshed_at == 42.0
    assert snap.error is None
    assert snap.attempts == 1
    assert sleeps == []


async def test_refresh_retries_with_exponential_backoff(fake_sleep, sleeps):
    source = FlakySource(2)
    poller = LeaderboardPoller(StubAggregator(), source, sleep=fake_sleep)
    snap = await poller.refresh()
    assert snap.error is None
    assert snap.attempts == 3
    assert sleeps == [1.0, 2.0]


async def test_refresh_gives_up_and_keeps_previous_records(fake_sleep, sleeps):
    source = FlakySource(0)
    poller = LeaderboardPoller(StubAggregator(), source, sleep=fake_sleep, retries=3)
    good = await poller.refresh()

    source.failures, source.calls = 10, 0
    snap = await poller.refresh()
    assert snap.records == good.records
    assert snap.attempts == 4
    assert "token list down" in snap.error
    assert sleeps == [1.0, 2.0, 4.0]


async def test_backoff_is_capped(fake_sleep, sleeps):
    poller = LeaderboardPoller(StubAggregator(), FlakySource(10), sleep=fake_sleep,
                               retries=6, backoff_base=1.0, backoff_cap=30.0)
    await poller.refresh()
    assert sleeps == [1.0, 2.0, 4.0, 8.0, 16.0, 30.0]


async def test_run_polls_on_interval_and_notifies(fake_sleep, sleeps):
    seen = []
    poller = LeaderboardPoller(StubAggregator(), FlakySource(0), sleep=fake_sleep, interval_sec=300)
    poller.subscribe(seen.append)
    await poller.run(max_cycles=3)
    assert len(seen) == 3
    assert sleeps == [300, 300]
