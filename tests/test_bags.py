"""Bags REST adapter: token list, lifetime fees, metadata helpers."""
import pytest

from packages.core.errors import EmptyUpstream, UpstreamError
from packages.sources.bags import BagsClient, pick_number

BASE = "https://public-api-v2.bags.fm/api/v1"


@pytest.fixture
def bags(http):
    return BagsClient(http, "test-key", BASE)


async def test_list_tokens_accepts_mint_or_address(router, bags):
    router.add(f"{BASE}/analytics/tokens", json={"tokens": [
        {"mint": "MintA"}, {"address": "MintB"}, {"name": "no id"}, "junk"]})
    assert await bags.list_tokens() == ["MintA", "MintB"]
    req = router.calls[0]
    assert req.headers["authorization"] == "Bearer test-key"
    assert req.headers["x-api-key"] == "test-key"


async def test_list_tokens_reads_data_key(router, bags):
    router.add(f"{BASE}/analytics/tokens", json={"data": [{"mint": "MintC"}]})
    assert await bags.list_tokens() == ["MintC"]


async def test_list_tokens_empty_raises(router, bags):
    router.add(f"{BASE}/analytics/tokens", json={"tokens": []})
    with pytest.raises(EmptyUpstream):
        await bags.list_tokens()


async def test_list_tokens_non_200_raises(router, bags):
    router.add(f"{BASE}/analytics/tokens", status=401, json={"error": "bad key"})
    with pytest.raises(UpstreamError) as e:
        await bags.list_tokens()
    assert e.value.status == 401


@pytest.mark.parametrize("payload", [
    {"success": True, "response": "2500000000"},
    {"success": True, "response": 2500000000},
    {"data": {"lifetimeFees": 2500000000}},
    {"lifetimeFees": "2500000000"},
])
async def test_lifetime_fees_shapes(router, bags, payload):
    router.add(f"{BASE}/token-launch/lifetime-fees?tokenMint=MintA", json=payload)
    assert await bags.lifetime_fees("MintA") == 2_500_000_000


async def test_lifetime_fees_missing_raises(router, bags):
    router.add(f"{BASE}/token-launch/lifetime-fees?tokenMint=MintA", json={"success": False})
    with pytest.raises(UpstreamError):
        await bags.lifetime_fees("MintA")


async def test_metadata_and_socials_degrade(router, bags):
    router.add(f"{BASE}/analytics/tokens/MintA", status=500, json={})
    router.add(f"{BASE}/token/socials/MintA", json={"links": [{"type": "twitter", "url": "https://x.com/a"}, "x"]})
    assert await bags.token_metadata("MintA") is None
    assert await bags.token_socials("MintA") == [{"type": "twitter", "url": "https://x.com/a"}]


def test_pick_number_prefers_flat_then_nested():
    assert pick_number({"totalClaimed": 1, "data": {"totalClaimed": 2}}, "totalClaimed") == 1
    assert pick_number({"data": {"totalClaimed": 2}}, "totalClaimed") == 2
    assert pick_number({"totalClaimed": True}, "totalClaimed") is None
    assert pick_number({"totalClaimed": "abc"}, "totalClaimed") is None


def test_pick_number_rejects_non_finite():
    for bad in ("NaN", "Infinity", "-inf", float("nan"), float("inf")):
        assert pick_number({"totalClaimed": bad}, "totalClaimed") is None
    assert pick_number({"totalClaimed": "NaN", "data": {"totalClaimed": 3}}, "totalClaimed") == 3


async def test_lifetime_fees_infinite_raises_upstream_error(router, bags):
    router.add(f"{BASE}/token-launch/lifetime-fees?tokenMint=MintA", json={"success": True, "response": "Infinity"})
    with pytest.raises(UpstreamError):
        await bags.lifetime_fees("MintA")
