# static token list
from typing import List
import yaml

def load_token_list(path: str) -> List[str]:
    """Read the configured mints from YAML.

    Accepts either a bare list or {"tokens": [...]}; duplicates are dropped,
    first occurrence wins.
    """
    with open(path, "r", encoding="utf-8") as f:
        raw = yaml.safe_load(f) or []
    if isinstance(raw, dict):
        raw = raw.get("tokens") or []
    out: List[str] = []
    for m in raw:
        m = str(m).strip()
        if m and m not in out:
            out.append(m)
    return out
