# shared constants
DEFAULT_ENV = "configs/.env"
DEFAULT_TOKENS_FILE = "configs/tokens.yml"

LAMPORTS_PER_SOL = 1_000_000_000

# placeholder USD rate served only when no SOL price was ever fetched
SOL_PRICE_FALLBACK = 200.0
SOL_PRICE_TTL_SEC = 60.0
TOKEN_LIST_TTL_SEC = 3600.0

POLL_INTERVAL_SEC = 300
STAGGER_SEC = 0.05

UNKNOWN_NAME = "Unknown"
UNKNOWN_SYMBOL = "UNK"

PODIUM_SIZE = 3
