from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from datetime import timedelta
from pathlib import Path

import uvicorn
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import FileResponse, JSONResponse
from fastapi.staticfiles import StaticFiles
from starlette.exceptions import HTTPException as StarletteHTTPException

from backend.api.routes import bind_login_route, router
from backend.auth import AccessGate, LoginPathStore, TokenService
from backend.collectors import MetricsProvider, PsutilProvider
from backend.config import Settings, settings
from backend.engine import NetworkRateEngine, ProcessCache, SnapshotComposer
from backend.engine.process_cache import Clock, now_ms
from backend.errors import DashboardError, NotFound, ValidationError

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # ── startup ───────────────────────────────────────
    cfg: Settings = app.state.settings
    if cfg.jwt_secret == Settings.model_fields["jwt_secret"].default:
        logger.warning("JWT_SECRET is the development default; override it in production")
    logger.info(
        "Server monitor started (provider=%s), login path: http://localhost:%d%s",
        app.state.provider.name,
        cfg.port,
        app.state.access_gate.login_path,
    )

    yield

    # ── shutdown ──────────────────────────────────────
    logger.info("Server monitor shut down")


# ── error rendering ───────────────────────────────────


async def _dashboard_error(request: Request, exc: DashboardError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    return JSONResponse({"error": exc.message}, status_code=exc.status_code)


async def _http_error(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    message = NotFound.default_message if exc.status_code == 404 else str(exc.detail)
    return JSONResponse(
        {"error": message},
        status_code=exc.status_code,
        headers=getattr(exc, "headers", None),
    )


async def _validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
    return JSONResponse({"error": ValidationError.default_message}, status_code=400)


async def _unhandled_error(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("%s %s failed", request.method, request.url.path)
    return JSONResponse({"error": str(exc) or type(exc).__name__}, status_code=500)


# ── factory ───────────────────────────────────────────


def create_app(
    app_settings: Settings | None = None,
    provider: MetricsProvider | None = None,
    clock: Clock = now_ms,
) -> FastAPI:
    """Build the application and its long-lived services.

    The login route is bound here, once, at whatever path the login path
    store yields on boot.
    """
    cfg = app_settings or settings
    provider = provider or PsutilProvider()

    process_cache = ProcessCache(
        provider,
        window_ms=cfg.process_cache_window_ms,
        limit=cfg.process_list_limit,
        clock=clock,
    )
    rate_engine = NetworkRateEngine()
    composer = SnapshotComposer(provider, process_cache, rate_engine, clock=clock)
    access_gate = AccessGate(
        LoginPathStore(cfg.login_path_file, override=cfg.login_path),
        TokenService(
            cfg.jwt_secret,
            algorithm=cfg.jwt_algorithm,
            ttl=timedelta(hours=cfg.token_ttl_hours),
        ),
        username=cfg.admin_username,
        password_hash=cfg.admin_password_hash,
    )

    app = FastAPI(title=cfg.app_name, debug=cfg.debug, lifespan=lifespan)

    # Store on app.state for route access
    app.state.settings = cfg
    app.state.provider = provider
    app.state.process_cache = process_cache
    app.state.rate_engine = rate_engine
    app.state.composer = composer
    app.state.access_gate = access_gate

    app.add_middleware(
        CORSMiddleware,
        allow_origins=cfg.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_exception_handler(DashboardError, _dashboard_error)
    app.add_exception_handler(StarletteHTTPException, _http_error)
    app.add_exception_handler(RequestValidationError, _validation_error)
    app.add_exception_handler(Exception, _unhandled_error)

    app.include_router(router)
    bind_login_route(app, access_gate.login_path)

    _mount_frontend(app, Path(cfg.frontend_dist))
    return app


def _mount_frontend(app: FastAPI, dist: Path) -> None:
    """Serve the built SPA when present. API routes are registered first."""
    if not dist.is_dir():
        return

    if (dist / "assets").is_dir():
        app.mount("/assets", StaticFiles(directory=str(dist / "assets")), name="static-assets")

    # SPA catch-all: any non-API route returns index.html
    @app.get("/{full_path:path}", include_in_schema=False)
    async def serve_spa(full_path: str):
        file_path = (dist / full_path).resolve()
        if full_path and file_path.is_relative_to(dist.resolve()) and file_path.is_file():
            return FileResponse(str(file_path))
        index = dist / "index.html"
        if not index.is_file():
            raise NotFound()
        return FileResponse(str(index))


def run() -> None:
    uvicorn.run(
        "backend.main:create_app",
        factory=True,
        host=settings.host,
        port=settings.port,
        log_level="debug" if settings.debug else "info",
    )


if __name__ == "__main__":
    run()
