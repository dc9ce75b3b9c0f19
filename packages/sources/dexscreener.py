# DexScreener pair data -> MarketData
import math
from typing import Dict, List, Optional, Union
import httpx
import structlog
from pydantic import BaseModel, ConfigDict
from packages.config.constants import UNKNOWN_NAME, UNKNOWN_SYMBOL
from packages.leaderboard.models import MarketData, TxnCount

log = structlog.get_logger()

WINDOWS = ("m5", "h1", "h6", "h24")


# ---- upstream shape (only identifiers are required) ----
class _Loose(BaseModel):
    model_config = ConfigDict(extra="ignore")

class DexToken(_Loose):
    address: str
    name: Optional[str] = None
    symbol: Optional[str] = None

class DexLiquidity(_Loose):
    usd: Optional[float] = None
    base: Optional[float] = None
    quote: Optional[float] = None

class DexTxns(_Loose):
    buys: Optional[int] = None
    sells: Optional[int] = None

class DexPair(_Loose):
    chainId: Optional[str] = None
    dexId: Optional[str] = None
    url: Optional[str] = None
    pairAddress: str
    baseToken: DexToken
    quoteToken: Optional[DexToken] = None
    priceNative: Optional[Union[str, float]] = None
    priceUsd: Optional[Union[str, float]] = None
    txns: Optional[Dict[str, DexTxns]] = None
    volume: Optional[Dict[str, Optional[float]]] = None
    priceChange: Optional[Dict[str, Optional[float]]] = None
    liquidity: Optional[DexLiquidity] = None
    fdv: Optional[float] = None
    marketCap: Optional[float] = None

class DexTokensResponse(_Loose):
    schemaVersion: Optional[str] = None
    pairs: Optional[List[DexPair]] = None


def _finite(value: Optional[float]) -> Optional[float]:
    # NaN and inf would poison sorting and JSON output
    return value if value is not None and math.isfinite(value) else None

def _price(value) -> float:
    try:
        return _finite(float(value or 0)) or 0.0
    except (TypeError, ValueError):
        return 0.0

def _windows(values: Optional[Dict[str, Optional[float]]]) -> Dict[str, float]:
    if not values:
        return {}
    return {w: float(values[w]) for w in WINDOWS if _finite(values.get(w)) is not None}

def normalize_pair(pair: DexPair, mint: str) -> MarketData:
    """First-pair normalization. fdv wins over marketCap; zero counts as missing."""
    fdv, reported = _finite(pair.fdv), _finite(pair.marketCap)
    txns = {}
    for w, t in (pair.txns or {}).items():
        if w in WINDOWS:
            txns[w] = TxnCount(buys=t.buys or 0, sells=t.sells or 0)
    return MarketData(
        name=pair.baseToken.name or UNKNOWN_NAME,
        symbol=pair.baseToken.symbol or UNKNOWN_SYMBOL,
        market_cap=float(fdv or reported or 0),
        price_usd=_price(pair.priceUsd),
        image=f"https://dd.dexscreener.com/ds-data/tokens/solana/{mint}.png",
        fdv=fdv,
        reported_market_cap=reported,
        liquidity_usd=_finite(pair.liquidity.usd) if pair.liquidity else None,
        volume=_windows(pair.volume),
        price_change=_windows(pair.priceChange),
        txns=txns,
        pair_address=pair.pairAddress,
        dex_id=pair.dexId,
        url=pair.url or f"https://dexscreener.com/solana/{pair.pairAddress}",
        quote_symbol=pair.quoteToken.symbol if pair.quoteToken else None,
    )


class DexScreenerClient:
    """Market Data Fetcher. fetch() never raises; None means "no data"."""

    def __init__(self, http: httpx.AsyncClient, base_url: str = "https://api.dexscreener.com/latest/dex"):
        self.http = http
        self.base_url = base_url.rstrip("/")

    async def token_pairs(self, mint: str) -> DexTokensResponse:
        r = await self.http.get(f"{self.base_url}/tokens/{mint}")
        r.raise_for_status()
        return DexTokensResponse.model_validate(r.json())

    async def fetch(self, mint: str) -> Optional[MarketData]:
        try:
            resp = await self.token_pairs(mint)
        except (httpx.HTTPError, ValueError) as e:
            # ValueError covers bad JSON and pydantic.ValidationError
            log.warning("market.no_data", mint=mint, reason=type(e).__name__, err=str(e)[:200])
            return None
        if not resp.pairs:
            log.info("market.no_data", mint=mint, reason="no_pairs")
            return None
        # first pair stands in for the most representative one
        return normalize_pair(resp.pairs[0], mint)
