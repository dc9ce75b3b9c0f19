from enum import Enum
from typing import Dict, List, Optional
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel
from packages.config.constants import UNKNOWN_NAME, UNKNOWN_SYMBOL


class Metric(str, Enum):
    MARKET_CAP = "marketCap"
    EARNINGS = "earnings"


class _Camel(BaseModel):
    # attributes are snake_case, JSON is camelCase
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class TxnCount(_Camel):
    buys: int = 0
    sells: int = 0


class MarketData(_Camel):
    """Normalized view of one DexScreener pair for a mint."""
    name: str = UNKNOWN_NAME
    symbol: str = UNKNOWN_SYMBOL
    market_cap: float = 0.0
    price_usd: float = 0.0
    image: Optional[str] = None
    fdv: Optional[float] = None
    reported_market_cap: Optional[float] = None
    liquidity_usd: Optional[float] = None
    volume: Dict[str, float] = Field(default_factory=dict)
    price_change: Dict[str, float] = Field(default_factory=dict)
    txns: Dict[str, TxnCount] = Field(default_factory=dict)
    pair_address: Optional[str] = None
    dex_id: Optional[str] = None
    url: Optional[str] = None
    quote_symbol: Optional[str] = None


class EarningsData(_Camel):
    """Lifetime fees for a mint, in SOL and USD."""
    total_sol: float = 0.0
    total_usd: float = 0.0
    lamports: Optional[int] = None
    source: str = ""


class TokenRecord(_Camel):
    model_config = ConfigDict(frozen=True)

    mint: str
    name: str = UNKNOWN_NAME
    symbol: str = UNKNOWN_SYMBOL
    market_cap_usd: float = 0.0
    price_usd: float = 0.0
    total_earnings_usd: float = 0.0
    total_earnings_sol: float = 0.0
    loaded: bool = False
    image: Optional[str] = None
    liquidity_usd: Optional[float] = None
    volume: Dict[str, float] = Field(default_factory=dict)
    price_change: Dict[str, float] = Field(default_factory=dict)
    txns: Dict[str, TxnCount] = Field(default_factory=dict)
    pair_address: Optional[str] = None
    url: Optional[str] = None
    earnings_source: Optional[str] = None

    def metric_value(self, metric: Metric) -> float:
        if metric == Metric.EARNINGS:
            return self.total_earnings_usd
        return self.market_cap_usd


class RankedToken(_Camel):
    rank: int
    token: TokenRecord


class Standings(_Camel):
    metric: Metric
    podium: List[RankedToken]
    rest: List[RankedToken] = Field(default_factory=list, serialization_alias="list")


class LeaderboardSnapshot(_Camel):
    records: List[TokenRecord] = Field(default_factory=list)
    refreshed_at: Optional[float] = None
    error: Optional[str] = None
    attempts: int = 0
