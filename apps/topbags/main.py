import argparse, asyncio, json
import uvicorn
from packages.config.constants import DEFAULT_ENV
from packages.config.env import load_cfg
from packages.config.logging import setup_logging
from packages.leaderboard.models import Metric
from packages.leaderboard.ranker import standings
from apps.topbags.api import create_app
from apps.topbags.render import print_standings
from apps.topbags.services import build_services, make_http
from apps.topbags.tasks.refresh_watch import run as run_refresh_watch


log = setup_logging()

async def run_rank(args):
    log.info("=== RANK ===", metric=args.metric, discover=args.discover)
    cfg = load_cfg(args.env)
    async with make_http(cfg) as http:
        svc = build_services(cfg, http, discover=args.discover)
        snap = await svc.poller.refresh()
    if snap.error:
        log.error("Leaderboard refresh failed", error=snap.error)
        print(f"Unable to retrieve token data: {snap.error}")
        return
    table = standings(snap.records, args.metric)
    if args.json:
        print(json.dumps(table.model_dump(mode="json", by_alias=True), indent=2))
        return
    print_standings(table)

async def run_watch(args):
    log.info("=== WATCH ===", metric=args.metric)
    cfg = load_cfg(args.env)
    await run_refresh_watch(cfg, Metric(args.metric), discover=args.discover)

async def run_fees(args):
    log.info("=== TOKEN FEES ===", mint=args.mint)
    cfg = load_cfg(args.env)
    async with make_http(cfg) as http:
        svc = build_services(cfg, http)
        fees = await svc.details.fees(args.mint)
    print(json.dumps(fees, indent=2))

async def run_details(args):
    log.info("=== TOKEN DETAILS ===", mint=args.mint)
    cfg = load_cfg(args.env)
    async with make_http(cfg) as http:
        svc = build_services(cfg, http)
        data = await svc.details.details(args.mint)
    print(json.dumps(data, indent=2))

def run_serve(args):
    log.info("=== SERVE ===", host=args.host, port=args.port)
    cfg = load_cfg(args.env)
    uvicorn.run(create_app(cfg, poll=not args.no_poll, discover=args.discover), host=args.host, port=args.port)

def main():
    ap = argparse.ArgumentParser(prog="topbags")
    ap.add_argument("--env", default=DEFAULT_ENV, help="dotenv file with API keys")
    sub = ap.add_subparsers(dest="cmd")
    metrics = [m.value for m in Metric]

    r = sub.add_parser("rank")
    r.add_argument("--metric", default=Metric.MARKET_CAP.value, choices=metrics)
    r.add_argument("--discover", action="store_true", help="rank every token from the Bags token list")
    r.add_argument("--json", action="store_true", help="print raw JSON payload")
    r.set_defaults(func=run_rank)

    w = sub.add_parser("watch")
    w.add_argument("--metric", default=Metric.MARKET_CAP.value, choices=metrics)
    w.add_argument("--discover", action="store_true")
    w.set_defaults(func=run_watch)

    f = sub.add_parser("fees")
    f.add_argument("--mint", required=True)
    f.set_defaults(func=run_fees)

    d = sub.add_parser("details")
    d.add_argument("--mint", required=True)
    d.set_defaults(func=run_details)

    s = sub.add_parser("serve")
    s.add_argument("--host", default="127.0.0.1")
    s.add_argument("--port", type=int, default=8000)
    s.add_argument("--discover", action="store_true")
    s.add_argument("--no-poll", action="store_true", help="do not refresh the leaderboard in the background")
    s.set_defaults(func=run_serve)

    args = ap.parse_args()
    if not getattr(args, "func", None):
        ap.print_help(); return
    res = args.func(args)
    if asyncio.iscoroutine(res):
        asyncio.run(res)

if __name__ == "__main__":
    main()
