# per-token fee and detail payloads behind /api/token-fees and /api/token-details
import asyncio
from typing import Any, Dict, List, Optional
from packages.config.constants import LAMPORTS_PER_SOL, UNKNOWN_NAME, UNKNOWN_SYMBOL
from packages.core.mint import parse_mint
from packages.leaderboard.models import MarketData
from packages.pricing.oracle import PriceOracle
from packages.sources.bags import BagsClient
from packages.sources.birdeye import BirdeyeClient
from packages.sources.dexscreener import DexScreenerClient


def _first(*values):
    for v in values:
        if v:
            return v
    return None


def _creator(meta: dict) -> Optional[Dict[str, Any]]:
    c = meta.get("creator")
    if not isinstance(c, dict):
        return None
    handle = c.get("wallet") or c.get("username")
    return {
        "username": c.get("username") or c.get("wallet") or "Unknown",
        "avatar": c.get("avatar"),
        "twitter": c.get("twitter"),
        "profileUrl": f"https://bags.fm/profile/{handle}",
        "bio": c.get("bio"),
    }


def _links(meta: dict, socials: List[dict]):
    websites, links = [], []
    if meta.get("website"):
        websites.append({"url": meta["website"], "label": "Official Website"})
    for s in socials:
        if not s.get("url"):
            continue
        if s.get("type") == "website":
            websites.append({"url": s["url"], "label": s.get("label") or "Website"})
        else:
            links.append({"type": s.get("type") or "social", "url": s["url"], "label": s.get("label")})
    return websites, links


def _trading(dex: Optional[MarketData], bird: Optional[dict]) -> Dict[str, Any]:
    bird = bird or {}
    h24 = dex.txns.get("h24") if dex else None
    return {
        "price": _first(dex and dex.price_usd, bird.get("price")),
        "priceChange24h": _first(dex and dex.price_change.get("h24")),
        "volume24h": _first(dex and dex.volume.get("h24"), bird.get("volume24h")),
        "liquidityUsd": _first(dex and dex.liquidity_usd, bird.get("liquidity")),
        "marketCap": _first(dex and dex.reported_market_cap, bird.get("marketCap")),
        "fdv": _first(dex and dex.fdv),
        "holders": _first(bird.get("holders")),
        "buys24h": h24.buys if h24 else None,
        "sells24h": h24.sells if h24 else None,
        "txns24h": h24.model_dump() if h24 else None,
    }


class TokenDetailsService:
    def __init__(self, bags: BagsClient, dex: DexScreenerClient, birdeye: BirdeyeClient, oracle: PriceOracle):
        self.bags = bags
        self.dex = dex
        self.birdeye = birdeye
        self.oracle = oracle

    async def fees(self, mint: str) -> Dict[str, Any]:
        """Raises InvalidMintError before any I/O; upstream failures propagate."""
        parse_mint(mint)
        lamports = await self.bags.lifetime_fees(mint)
        sol = lamports / LAMPORTS_PER_SOL
        price = await self.oracle.get_exchange_rate()
        return {"feesLamports": lamports, "feesSOL": sol, "feesUSD": sol * price, "solPrice": price}

    async def details(self, mint: str) -> Dict[str, Any]:
        parse_mint(mint)
        lamports, metadata, socials, dex, bird, price = await asyncio.gather(
            self.bags.lifetime_fees(mint),
            self.bags.token_metadata(mint),
            self.bags.token_socials(mint),
            self.dex.fetch(mint),
            self.birdeye.token_overview(mint),
            self.oracle.get_exchange_rate(),
        )
        meta = (metadata or {}).get("data") or {}
        if not isinstance(meta, dict):
            meta = {}
        sol = lamports / LAMPORTS_PER_SOL
        websites, links = _links(meta, socials)
        return {
            "mint": mint,
            "name": meta.get("name") or (dex.name if dex and dex.name != UNKNOWN_NAME else None) or UNKNOWN_NAME,
            "symbol": meta.get("symbol") or (dex.symbol if dex and dex.symbol != UNKNOWN_SYMBOL else None) or "UNKNOWN",
            "description": meta.get("description"),
            "image": meta.get("image") or f"https://cdn.bags.fm/tokens/{mint}/icon",
            "bannerImage": meta.get("banner") or f"https://cdn.bags.fm/tokens/{mint}/banner",
            "creator": _creator(meta),
            "websites": websites,
            "socials": links,
            "trading": _trading(dex, bird),
            "fees": {"lamports": lamports, "sol": sol, "usd": sol * price},
            "solPrice": price,
            "dexscreenerUrl": (dex.url if dex else None) or f"https://dexscreener.com/solana/{mint}",
            "birdeyeUrl": f"https://birdeye.so/token/{mint}?chain=solana",
            "bagsUrl": f"https://bags.fm/token/{mint}",
            "verified": bool(meta.get("verified", False)),
            "createdAt": meta.get("createdAt"),
            "updatedAt": meta.get("updatedAt"),
        }
