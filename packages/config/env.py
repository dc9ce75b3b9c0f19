# config environment
import os
from typing import Literal, Optional
from dotenv import load_dotenv
from pydantic import BaseModel
from .constants import (DEFAULT_TOKENS_FILE, POLL_INTERVAL_SEC, STAGGER_SEC,
                        SOL_PRICE_TTL_SEC, SOL_PRICE_FALLBACK, TOKEN_LIST_TTL_SEC)

class Cfg(BaseModel):
    bags_api_key: str = ""
    bags_api_base: str = "https://public-api-v2.bags.fm/api/v1"
    bags_api_fallback_base: str = "https://api.bags.fm/api/v1"
    dexscreener_api: str = "https://api.dexscreener.com/latest/dex"
    coingecko_api: str = "https://api.coingecko.com/api/v3"
    birdeye_api: str = "https://public-api.birdeye.so/public"
    birdeye_api_key: str = ""
    earnings_mode: Literal["direct", "proxy"] = "direct"
    proxy_base_url: str = "http://127.0.0.1:8000"
    tokens_file: str = DEFAULT_TOKENS_FILE
    poll_interval_sec: float = POLL_INTERVAL_SEC
    stagger_sec: float = STAGGER_SEC
    http_timeout_sec: float = 15.0
    sol_price_ttl_sec: float = SOL_PRICE_TTL_SEC
    sol_price_fallback: float = SOL_PRICE_FALLBACK
    token_list_ttl_sec: float = TOKEN_LIST_TTL_SEC
    refresh_retries: int = 3
    refresh_backoff_base_sec: float = 1.0
    refresh_backoff_cap_sec: float = 30.0

# env var -> Cfg field; pydantic does the type coercion
_ENV_FIELDS = {
    "BAGS_API_KEY": "bags_api_key",
    "BAGS_API_BASE": "bags_api_base",
    "BAGS_API_FALLBACK_BASE": "bags_api_fallback_base",
    "DEXSCREENER_API": "dexscreener_api",
    "COINGECKO_API": "coingecko_api",
    "BIRDEYE_API": "birdeye_api",
    "BIRDEYE_API_KEY": "birdeye_api_key",
    "EARNINGS_MODE": "earnings_mode",
    "PROXY_BASE_URL": "proxy_base_url",
    "TOKENS_FILE": "tokens_file",
    "POLL_INTERVAL_SEC": "poll_interval_sec",
    "STAGGER_SEC": "stagger_sec",
    "HTTP_TIMEOUT_SEC": "http_timeout_sec",
    "SOL_PRICE_TTL_SEC": "sol_price_ttl_sec",
    "SOL_PRICE_FALLBACK": "sol_price_fallback",
    "TOKEN_LIST_TTL_SEC": "token_list_ttl_sec",
    "REFRESH_RETRIES": "refresh_retries",
    "REFRESH_BACKOFF_BASE_SEC": "refresh_backoff_base_sec",
    "REFRESH_BACKOFF_CAP_SEC": "refresh_backoff_cap_sec",
}

def load_cfg(env_file: Optional[str] = None) -> Cfg:
    if env_file:
        load_dotenv(env_file)
    values = {field: os.environ[var] for var, field in _ENV_FIELDS.items() if os.environ.get(var)}
    return Cfg(**values)
