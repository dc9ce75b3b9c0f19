# fan out market + earnings per mint, merge into TokenRecords
import asyncio
from typing import Awaitable, Callable, Iterable, List, Optional, Protocol
import structlog
from packages.config.constants import STAGGER_SEC
from packages.core.settle import settle_all
from .models import EarningsData, MarketData, TokenRecord

log = structlog.get_logger()


class MarketSource(Protocol):
    def fetch(self, mint: str) -> Awaitable[Optional[MarketData]]: ...

class EarningsSource(Protocol):
    def fetch(self, mint: str) -> Awaitable[Optional[EarningsData]]: ...


def unique_mints(mints: Iterable[str]) -> List[str]:
    seen, out = set(), []
    for m in mints:
        if m not in seen:
            seen.add(m)
            out.append(m)
    return out


def merge(mint: str, market: Optional[MarketData], earnings: Optional[EarningsData]) -> TokenRecord:
    """loaded follows the market side only; missing earnings just mean zero."""
    fields = {}
    if market is not None:
        fields = dict(
            name=market.name,
            symbol=market.symbol,
            market_cap_usd=market.market_cap,
            price_usd=market.price_usd,
            image=market.image,
            liquidity_usd=market.liquidity_usd,
            volume=market.volume,
            price_change=market.price_change,
            txns=market.txns,
            pair_address=market.pair_address,
            url=market.url,
        )
    if earnings is not None:
        fields.update(total_earnings_usd=earnings.total_usd,
                      total_earnings_sol=earnings.total_sol,
                      earnings_source=earnings.source)
    return TokenRecord(mint=mint, loaded=market is not None, **fields)


class Aggregator:
    def __init__(self, market: MarketSource, earnings: EarningsSource, stagger_sec: float = STAGGER_SEC,
                 sleep: Callable[[float], Awaitable[object]] = asyncio.sleep):
        self.market = market
        self.earnings = earnings
        self.stagger_sec = stagger_sec
        self._sleep = sleep

    async def _one(self, index: int, mint: str) -> TokenRecord:
        if self.stagger_sec > 0 and index:
            await self._sleep(index * self.stagger_sec)
        m, e = await settle_all([self.market.fetch(mint), self.earnings.fetch(mint)])
        if not m.ok:
            log.warning("market.fetch_raised", mint=mint, err=str(m.error))
        if not e.ok:
            log.warning("earnings.fetch_raised", mint=mint, err=str(e.error))
        return merge(mint, m.value, e.value)

    async def collect(self, mints: Iterable[str]) -> List[TokenRecord]:
        """One record per distinct mint (input order), loaded or not."""
        ordered = unique_mints(mints)
        outcomes = await settle_all([self._one(i, m) for i, m in enumerate(ordered)])
        records = []
        for mint, o in zip(ordered, outcomes):
            if o.ok:
                records.append(o.value)
            else:
                log.warning("aggregate.token_failed", mint=mint, err=str(o.error))
                records.append(TokenRecord(mint=mint, loaded=False))
        return records

    async def aggregate(self, mints: Iterable[str]) -> List[TokenRecord]:
        records = await self.collect(mints)
        loaded = [r for r in records if r.loaded]
        log.info("aggregate.done", requested=len(records), loaded=len(loaded))
        return loaded
