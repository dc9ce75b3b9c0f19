# mint identifier validation
from solders.pubkey import Pubkey
from .errors import InvalidMintError


def parse_mint(mint: str) -> Pubkey:
    try:
        return Pubkey.from_string(mint)
    except Exception as e:
        raise InvalidMintError(mint) from e


def is_valid_mint(mint: str) -> bool:
    try:
        parse_mint(mint)
    except InvalidMintError:
        return False
    return True
