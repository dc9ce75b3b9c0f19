# background loop: refresh -> rank -> print podium
from packages.config.env import Cfg
from packages.leaderboard.models import LeaderboardSnapshot, Metric
from packages.leaderboard.ranker import standings
from apps.topbags.render import print_podium
from apps.topbags.services import build_services, make_http


async def run(cfg: Cfg, metric: Metric = Metric.MARKET_CAP, discover: bool = False, max_cycles=None):
    async with make_http(cfg) as http:
        svc = build_services(cfg, http, discover=discover)

        def on_refresh(snap: LeaderboardSnapshot):
            if snap.error:
                print("[refresh error]", snap.error)
            print_podium(standings(snap.records, metric))

        svc.poller.subscribe(on_refresh)
        await svc.poller.run(max_cycles=max_cycles)
