"""Ranking by market cap / earnings and podium split."""
from packages.leaderboard.models import Metric, TokenRecord
from packages.leaderboard.ranker import rank, split_podium, standings


def token(mint, cap, earned):
    return TokenRecord(mint=mint, symbol=mint.upper(), market_cap_usd=cap, total_earnings_usd=earned, loaded=True)


FIXTURE = [
    token("a", cap=4_000_000, earned=10),
    token("b", cap=3_000_000, earned=20),
    token("c", cap=2_000_000, earned=9_000),
    token("d", cap=1_000_000, earned=8_000),
]


def test_rank_by_market_cap_descending():
    assert [t.mint for t in rank(FIXTURE, Metric.MARKET_CAP)] == ["a", "b", "c", "d"]


def test_rank_by_earnings_descending():
    assert [t.mint for t in rank(FIXTURE, "earnings")] == ["c", "d", "b", "a"]


def test_podium_membership_differs_between_metrics():
    cap_podium, _ = split_podium(rank(FIXTURE, Metric.MARKET_CAP))
    earn_podium, _ = split_podium(rank(FIXTURE, Metric.EARNINGS))
    assert {t.mint for t in cap_podium} == {"a", "b", "c"}
    assert {t.mint for t in earn_podium} == {"b", "c", "d"}


def test_ties_keep_input_order():
    tied = [token("x", 5, 0), token("y", 5, 0), token("z", 9, 0), token("w", 5, 0)]
    assert [t.mint for t in rank(tied, Metric.MARKET_CAP)] == ["z", "x", "y", "w"]


def test_ranking_is_idempotent():
    tied = [token("x", 5, 1), token("y", 5, 1), token("z", 5, 1)]
    once = rank(tied, Metric.EARNINGS)
    assert rank(once, Metric.EARNINGS) == once


def test_rank_does_not_mutate_input():
    before = list(FIXTURE)
    rank(FIXTURE, Metric.EARNINGS)
    assert FIXTURE == before


def test_podium_is_positional():
    podium, rest = split_podium(rank(FIXTURE, Metric.MARKET_CAP))
    assert len(podium) == 3
    assert [t.mint for t in rest] == ["d"]
    podium, rest = split_podium(FIXTURE[:2])
    assert len(podium) == 2 and rest == []


def test_standings_assign_one_based_ranks():
    table = standings(FIXTURE, Metric.EARNINGS)
    assert [e.rank for e in table.podium] == [1, 2, 3]
    assert table.rest[0].rank == 4
    body = table.model_dump(mode="json", by_alias=True)
    assert body["metric"] == "earnings"
    assert body["list"][0]["token"]["totalEarningsUsd"] == 10
