# Birdeye price / holders / market, only used by token details
import asyncio
from typing import Any, Dict, Optional
import httpx
import structlog

log = structlog.get_logger()


class BirdeyeClient:
    def __init__(self, http: httpx.AsyncClient, api_key: str,
                 base_url: str = "https://public-api.birdeye.so/public"):
        self.http = http
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")

    @property
    def enabled(self) -> bool:
        return bool(self.api_key)

    async def _data(self, path: str, mint: str) -> Dict[str, Any]:
        r = await self.http.get(f"{self.base_url}{path}", params={"address": mint},
                                headers={"X-API-KEY": self.api_key})
        if r.status_code != 200:
            return {}
        body = r.json()
        inner = body.get("data") if isinstance(body, dict) else None
        return inner if isinstance(inner, dict) else {}

    async def token_overview(self, mint: str) -> Optional[Dict[str, Any]]:
        if not self.enabled:
            return None
        try:
            price, holders, market = await asyncio.gather(
                self._data("/price", mint),
                self._data("/token/holder", mint),
                self._data("/token/market", mint),
            )
        except (httpx.HTTPError, ValueError) as e:
            log.info("birdeye.unavailable", mint=mint, err=str(e))
            return None
        return {
            "price": price.get("value") or None,
            "holders": holders.get("holderNumber") or None,
            "marketCap": market.get("marketCap") or None,
            "volume24h": market.get("volume24h") or None,
            "liquidity": market.get("liquidity") or None,
        }
