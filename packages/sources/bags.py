# Bags.fm REST adapter: token list, lifetime fees, metadata, socials
import math
from typing import Any, Dict, List, Optional
import httpx
import structlog
from packages.core.errors import EmptyUpstream, UpstreamError

log = structlog.get_logger()


def number(value: Any) -> Optional[float]:
    """Finite int/float or a numeric string; bool, NaN, inf and garbage are not numbers."""
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, (int, float)):
        v = float(value)
    elif isinstance(value, str):
        try:
            v = float(value.strip())
        except ValueError:
            return None
    else:
        return None
    return v if math.isfinite(v) else None


def pick_number(payload: Any, *keys: str) -> Optional[float]:
    """First numeric value among keys, checked flat first, then under "data"/"response"."""
    if not isinstance(payload, dict):
        return number(payload)
    layers = [payload] + [payload[w] for w in ("data", "response") if isinstance(payload.get(w), dict)]
    for k in keys:
        for layer in layers:
            v = number(layer.get(k))
            if v is not None:
                return v
    return None


class BagsClient:
    def __init__(self, http: httpx.AsyncClient, api_key: str,
                 base_url: str = "https://public-api-v2.bags.fm/api/v1"):
        self.http = http
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")

    def headers(self, bearer: bool = False) -> Dict[str, str]:
        h = {"x-api-key": self.api_key, "Content-Type": "application/json"}
        if bearer:
            h["Authorization"] = f"Bearer {self.api_key}"
        return h

    async def get_json(self, path: str, params: Optional[dict] = None, bearer: bool = False) -> Any:
        r = await self.http.get(f"{self.base_url}{path}", params=params, headers=self.headers(bearer))
        if r.status_code // 100 != 2:
            raise UpstreamError("bags", f"{path} returned {r.status_code}", status=r.status_code)
        try:
            return r.json()
        except ValueError as e:
            raise UpstreamError("bags", f"{path} returned non-JSON body", status=r.status_code) from e

    async def list_tokens(self) -> List[str]:
        data = await self.get_json("/analytics/tokens", bearer=True)
        rows = (data.get("tokens") or data.get("data") or []) if isinstance(data, dict) else []
        mints = []
        for row in rows:
            if not isinstance(row, dict):
                continue
            m = row.get("mint") or row.get("address")
            if m:
                mints.append(str(m))
        if not mints:
            raise EmptyUpstream("bags", "token list is empty")
        return mints

    async def lifetime_fees(self, mint: str) -> int:
        """Lifetime protocol fees for a mint, in lamports."""
        data = await self.get_json("/token-launch/lifetime-fees", params={"tokenMint": mint})
        # shapes seen: {"success":true,"response":"123"} / {"data":{"lifetimeFees":..}} / {"lifetimeFees":..}
        raw = data.get("response") if isinstance(data, dict) else data
        lamports = number(raw) if not isinstance(raw, dict) else None
        if lamports is None:
            lamports = pick_number(data, "lifetimeFees", "feesLamports", "lamports")
        if lamports is None:
            raise UpstreamError("bags", "lifetime fees missing from payload")
        return int(lamports)

    async def token_metadata(self, mint: str) -> Optional[dict]:
        try:
            data = await self.get_json(f"/analytics/tokens/{mint}")
        except (httpx.HTTPError, UpstreamError) as e:
            log.info("bags.metadata_unavailable", mint=mint, err=str(e))
            return None
        return data if isinstance(data, dict) else None

    async def token_socials(self, mint: str) -> List[dict]:
        try:
            data = await self.get_json(f"/token/socials/{mint}")
        except (httpx.HTTPError, UpstreamError) as e:
            log.info("bags.socials_unavailable", mint=mint, err=str(e))
            return []
        if not isinstance(data, dict):
            return []
        rows = data.get("socials") or data.get("links") or []
        return [s for s in rows if isinstance(s, dict)]
