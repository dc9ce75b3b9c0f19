# Earnings Fetcher: ordered fee-endpoint candidates with one success rule
from dataclasses import dataclass
from typing import List, Optional, Protocol
import httpx
import structlog
from packages.core.errors import UpstreamError
from packages.leaderboard.models import EarningsData
from packages.pricing.oracle import PriceOracle
from packages.sources.bags import BagsClient, pick_number

log = structlog.get_logger()


@dataclass
class FeeReading:
    total_sol: Optional[float] = None
    total_usd: Optional[float] = None
    lamports: Optional[int] = None

    def has_value(self) -> bool:
        # zero is a value
        return self.total_sol is not None or self.total_usd is not None


class FeeCandidate(Protocol):
    name: str

    async def probe(self, mint: str) -> FeeReading: ...


class ClaimStatsEndpoint:
    """GET {base}/token-launch/claim-stats?tokenMint= ; totalClaimed is in SOL."""

    def __init__(self, bags: BagsClient):
        self.bags = bags
        self.name = f"claim-stats@{bags.base_url}"

    async def probe(self, mint: str) -> FeeReading:
        data = await self.bags.get_json("/token-launch/claim-stats", params={"tokenMint": mint})
        return FeeReading(total_sol=pick_number(data, "totalClaimed"),
                          total_usd=pick_number(data, "totalClaimedUsd"))


class ProxyEndpoint:
    """GET {proxy}/api/token-fees/{mint} served by apps.topbags.api."""

    def __init__(self, http: httpx.AsyncClient, base_url: str):
        self.http = http
        self.base_url = base_url.rstrip("/")
        self.name = f"proxy@{self.base_url}"

    async def probe(self, mint: str) -> FeeReading:
        r = await self.http.get(f"{self.base_url}/api/token-fees/{mint}")
        if r.status_code != 200:
            raise UpstreamError("proxy", f"token-fees returned {r.status_code}", status=r.status_code)
        data = r.json()
        lamports = pick_number(data, "feesLamports")
        return FeeReading(total_sol=pick_number(data, "feesSOL"),
                          total_usd=pick_number(data, "feesUSD"),
                          lamports=int(lamports) if lamports is not None else None)


class EarningsFetcher:
    """
    Tries candidates in order; 5xx/non-2xx, bad JSON and missing numbers move
    on to the next one. The first candidate with a numeric reading wins.
    fetch() never raises; None means "no data".
    """

    def __init__(self, candidates: List[FeeCandidate], oracle: PriceOracle):
        self.candidates = candidates
        self.oracle = oracle

    async def fetch(self, mint: str) -> Optional[EarningsData]:
        for c in self.candidates:
            try:
                reading = await c.probe(mint)
            except (httpx.HTTPError, UpstreamError, ValueError, OverflowError) as e:
                log.info("earnings.candidate_failed", mint=mint, candidate=c.name, err=str(e)[:200])
                continue
            if not reading.has_value():
                log.info("earnings.candidate_failed", mint=mint, candidate=c.name, err="no numeric fields")
                continue
            return await self.to_earnings(reading, c.name)
        log.warning("earnings.no_data", mint=mint, tried=len(self.candidates))
        return None

    async def to_earnings(self, reading: FeeReading, source: str) -> EarningsData:
        sol = reading.total_sol or 0.0
        if reading.total_usd:
            usd = reading.total_usd
        elif sol:
            usd = sol * await self.oracle.get_exchange_rate()
        else:
            usd = 0.0
        return EarningsData(total_sol=sol, total_usd=usd, lamports=reading.lamports, source=source)


def direct_candidates(http: httpx.AsyncClient, api_key: str, bases: List[str]) -> List[FeeCandidate]:
    return [ClaimStatsEndpoint(BagsClient(http, api_key, b)) for b in bases]
