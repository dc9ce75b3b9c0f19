# wires clients, oracle, fetchers and poller from Cfg
import time
from dataclasses import dataclass
from typing import Callable, List
import httpx
from packages.config.env import Cfg
from packages.config.tokens import load_token_list
from packages.core.cache import TTLCache
from packages.details.service import TokenDetailsService
from packages.earnings.fetcher import EarningsFetcher, ProxyEndpoint, direct_candidates
from packages.leaderboard.aggregator import Aggregator
from packages.leaderboard.poller import LeaderboardPoller, TokenSource
from packages.pricing.oracle import PriceOracle
from packages.sources.bags import BagsClient
from packages.sources.birdeye import BirdeyeClient
from packages.sources.coingecko import CoinGeckoClient
from packages.sources.dexscreener import DexScreenerClient


@dataclass
class Services:
    cfg: Cfg
    http: httpx.AsyncClient
    bags: BagsClient
    dex: DexScreenerClient
    oracle: PriceOracle
    earnings: EarningsFetcher
    aggregator: Aggregator
    token_list: TTLCache[List[str]]
    details: TokenDetailsService
    poller: LeaderboardPoller


def make_http(cfg: Cfg) -> httpx.AsyncClient:
    return httpx.AsyncClient(timeout=cfg.http_timeout_sec, follow_redirects=True)


def build_services(cfg: Cfg, http: httpx.AsyncClient, *, discover: bool = False,
                   clock: Callable[[], float] = time.monotonic) -> Services:
    bags = BagsClient(http, cfg.bags_api_key, cfg.bags_api_base)
    dex = DexScreenerClient(http, cfg.dexscreener_api)
    gecko = CoinGeckoClient(http, cfg.coingecko_api)
    oracle = PriceOracle(gecko.simple_price, ttl=cfg.sol_price_ttl_sec,
                         fallback=cfg.sol_price_fallback, clock=clock)

    if cfg.earnings_mode == "proxy":
        candidates = [ProxyEndpoint(http, cfg.proxy_base_url)]
    else:
        candidates = direct_candidates(http, cfg.bags_api_key,
                                       [cfg.bags_api_base, cfg.bags_api_fallback_base])
    earnings = EarningsFetcher(candidates, oracle)
    aggregator = Aggregator(dex, earnings, stagger_sec=cfg.stagger_sec)

    token_list: TTLCache[List[str]] = TTLCache(bags.list_tokens, cfg.token_list_ttl_sec,
                                               name="all_tokens", clock=clock)

    async def from_file() -> List[str]:
        return load_token_list(cfg.tokens_file)

    source: TokenSource = token_list.get if discover else from_file
    poller = LeaderboardPoller(aggregator, source, interval_sec=cfg.poll_interval_sec,
                               retries=cfg.refresh_retries, backoff_base=cfg.refresh_backoff_base_sec,
                               backoff_cap=cfg.refresh_backoff_cap_sec)
    details = TokenDetailsService(bags, dex, BirdeyeClient(http, cfg.birdeye_api_key, cfg.birdeye_api), oracle)
    return Services(cfg=cfg, http=http, bags=bags, dex=dex, oracle=oracle, earnings=earnings,
                    aggregator=aggregator, token_list=token_list, details=details, poller=poller)
