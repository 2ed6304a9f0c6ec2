"""FastAPI application exposing host statistics and request telemetry."""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

from fastapi import APIRouter, FastAPI, HTTPException, Request
from fastapi.responses import HTMLResponse, JSONResponse, Response
from fastapi.staticfiles import StaticFiles
from fastapi.templating import Jinja2Templates

from . import hostinfo
from .config import Settings, get_settings, normalize_prefix
from .exposition import build_registry, render_latest
from .middleware import RequestObserver
from .reporting import metrics_payload, server_uptime_payload
from .telemetry import RequestTelemetry

logger = logging.getLogger(__name__)

PACKAGE_DIR = Path(__file__).resolve().parent
templates = Jinja2Templates(directory=str(PACKAGE_DIR / "templates"))


def create_app(
    settings: Optional[Settings] = None,
    telemetry: Optional[RequestTelemetry] = None,
) -> FastAPI:
    settings = settings or get_settings()
    telemetry = telemetry or RequestTelemetry()
    prefix = normalize_prefix(settings.prefix)
    registry = build_registry(telemetry)

    app = FastAPI(
        title="OS Info Service",
        description="Host telemetry and request statistics for a running service.",
        version="0.1.0",
    )
    app.state.settings = settings
    app.state.telemetry = telemetry

    observer = RequestObserver(telemetry)
    app.middleware("http")(observer.dispatch)

    @app.exception_handler(hostinfo.HostInfoError)
    async def host_info_error(request: Request, exc: hostinfo.HostInfoError):
        logger.warning("%s %s failed: %s", request.method, request.url.path, exc)
        return JSONResponse(status_code=500, content={"error": str(exc)})

    router = APIRouter(prefix=prefix)

    @router.get("/health", summary="Service health check", tags=["system"])
    async def health():
        return {"status": "ok"}

    @router.get("/info", summary="Host and platform facts", tags=["host"])
    def info():
        return hostinfo.host_info()

    @router.get("/uptime", summary="Host uptime", tags=["host"])
    def uptime():
        return hostinfo.host_uptime()

    @router.get("/mem", summary="Virtual memory usage", tags=["host"])
    def mem():
        return hostinfo.memory_stats()

    @router.get("/cpu", summary="CPU utilisation", tags=["host"])
    def cpu():
        return hostinfo.cpu_percent(settings.cpu_sample_seconds)

    @router.get("/disk", summary="Disk usage per partition", tags=["host"])
    def disk():
        return hostinfo.disk_usage(settings.all_partitions)

    @router.get("/env", summary="Process environment", tags=["host"])
    def env():
        if not settings.expose_env:
            raise HTTPException(status_code=404, detail="Not Found")
        return hostinfo.environment()

    @router.get("/metrics", summary="Request statistics", tags=["telemetry"])
    async def metrics():
        return metrics_payload(telemetry.snapshot())

    @router.get("/server-uptime", summary="Server uptime", tags=["telemetry"])
    async def server_uptime():
        return server_uptime_payload(telemetry.snapshot())

    @router.get("/gui-metrics", summary="Prometheus exposition", tags=["telemetry"])
    def gui_metrics():
        content, content_type = render_latest(registry)
        return Response(content=content, media_type=content_type)

    @router.get("/dashboard", response_class=HTMLResponse, include_in_schema=False)
    async def dashboard(request: Request):
        return templates.TemplateResponse(
            request,
            "dashboard.html",
            {"title": "OS Metrics Dashboard", "prefix": prefix},
        )

    app.include_router(router)
    app.mount(f"{prefix}/static", StaticFiles(directory=str(PACKAGE_DIR / "static")), name="static")

    logger.info("Routes mounted under %r", prefix or "/")
    return app


app = create_app()
