# backend proxy: token fees, token details, token list, leaderboard
import asyncio
from contextlib import asynccontextmanager
from typing import Optional
import structlog
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from packages.config.env import Cfg
from packages.core.errors import EmptyUpstream, InvalidMintError
from packages.leaderboard.models import Metric
from packages.leaderboard.ranker import standings
from .services import Services, build_services, make_http

log = structlog.get_logger()


def create_app(cfg: Optional[Cfg] = None, services: Optional[Services] = None, *,
               poll: bool = True, discover: bool = False) -> FastAPI:
    """Pass `services` to reuse prebuilt wiring (tests); otherwise it is built from cfg."""

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if services is not None:
            app.state.services = services
            yield
            return
        http = make_http(cfg or Cfg())
        svc = build_services(cfg or Cfg(), http, discover=discover)
        app.state.services = svc
        task = asyncio.create_task(svc.poller.run()) if poll else None
        try:
            yield
        finally:
            if task is not None:
                task.cancel()
                try:
                    await task
                except asyncio.CancelledError:
                    pass
            await http.aclose()

    app = FastAPI(title="TopBags API", lifespan=lifespan)
    app.add_middleware(CORSMiddleware, allow_origins=["*"], allow_methods=["GET"], allow_headers=["*"])

    def svc(request: Request) -> Services:
        return request.app.state.services

    @app.get("/health")
    async def health(request: Request):
        snap = svc(request).poller.snapshot
        return {"status": "ok", "tokens": len(snap.records), "refreshedAt": snap.refreshed_at, "error": snap.error}

    @app.get("/api/all-tokens")
    async def all_tokens(request: Request):
        try:
            tokens = await svc(request).token_list.get()
        except EmptyUpstream:
            return {"tokens": []}
        except Exception as e:
            log.error("api.all_tokens_failed", err=str(e))
            return JSONResponse(status_code=500, content={"error": "Failed to fetch tokens", "details": str(e)})
        return {"tokens": tokens}

    @app.get("/api/token-fees/{mint}")
    async def token_fees(mint: str, request: Request):
        try:
            return await svc(request).details.fees(mint)
        except InvalidMintError:
            return JSONResponse(status_code=400, content={"error": "Invalid token mint address"})
        except Exception as e:
            log.error("api.token_fees_failed", mint=mint, err=str(e))
            return JSONResponse(status_code=500, content={"error": "Failed to fetch token fees", "details": str(e)})

    @app.get("/api/token-details/{mint}")
    async def token_details(mint: str, request: Request):
        try:
            data = await svc(request).details.details(mint)
        except Exception as e:
            log.error("api.token_details_failed", mint=mint, err=str(e))
            return {"success": False, "error": "Failed to fetch token details", "details": str(e)}
        return {"success": True, "data": data}

    @app.get("/api/leaderboard")
    async def leaderboard(request: Request, metric: Metric = Metric.MARKET_CAP):
        snap = svc(request).poller.snapshot
        table = standings(snap.records, metric)
        body = table.model_dump(mode="json", by_alias=True)
        body.update(refreshedAt=snap.refreshed_at, error=snap.error)
        return body

    return app
