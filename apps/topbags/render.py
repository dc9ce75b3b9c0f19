# plain-text podium and list
from typing import Optional
from packages.leaderboard.models import Metric, RankedToken, Standings

MEDALS = {1: "1st", 2: "2nd", 3: "3rd"}


def fmt_usd(v: Optional[float]) -> str:
    if not v:
        return "N/A"
    for div, suffix in ((1e9, "B"), (1e6, "M"), (1e3, "K")):
        if abs(v) >= div:
            return f"${v / div:.2f}{suffix}"
    return f"${v:,.2f}"


def _row(e: RankedToken, metric: Metric) -> str:
    t = e.token
    primary = t.metric_value(metric)
    other = t.total_earnings_usd if metric == Metric.MARKET_CAP else t.market_cap_usd
    return f"{e.rank:>3}. {t.symbol:<10} {t.name[:24]:<24} {fmt_usd(primary):>12} {fmt_usd(other):>12}  {t.mint}"


def print_podium(table: Standings) -> None:
    label = "MARKET CAP" if table.metric == Metric.MARKET_CAP else "TOTAL EARNINGS"
    print(f"\n=== TOP BAGS by {label} ===")
    if not table.podium:
        print("(no tokens)")
        return
    for e in table.podium:
        print(f"[{MEDALS.get(e.rank, e.rank)}] {e.token.symbol} ({e.token.name}) {fmt_usd(e.token.metric_value(table.metric))}")


def print_standings(table: Standings) -> None:
    print_podium(table)
    print("\n=== ALL TOKENS ===")
    for e in table.podium + table.rest:
        print(_row(e, table.metric))
