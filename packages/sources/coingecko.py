# CoinGecko simple price
import math
import httpx
from packages.core.errors import UpstreamError


class CoinGeckoClient:
    def __init__(self, http: httpx.AsyncClient, base_url: str = "https://api.coingecko.com/api/v3"):
        self.http = http
        self.base_url = base_url.rstrip("/")

    async def simple_price(self, asset: str = "solana", vs: str = "usd") -> float:
        r = await self.http.get(f"{self.base_url}/simple/price", params={"ids": asset, "vs_currencies": vs})
        r.raise_for_status()
        data = r.json()
        price = (data.get(asset) or {}).get(vs) if isinstance(data, dict) else None
        if isinstance(price, bool) or not isinstance(price, (int, float)) or not math.isfinite(price) or price <= 0:
            raise UpstreamError("coingecko", f"no positive {asset}/{vs} price in payload")
        return float(price)
