# type: ignore
# pyright: reportGeneralTypeIssues=false
"""
IBP Member Metrics Exporter
===========================
Turns the IBP dashboard's member registry, downtime-event log and service-tier
requirements into a Prometheus exposition of member and service status.

    GET /{member}/metrics   one member (404 if unknown upstream)
    GET /api/v1/metrics     every member; unreachable members are left out
    GET /metrics            the exporter's own operational metrics

Port: 3000
"""
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from ibp_metrics.controllers import cache_controller, metrics_controller, system_controller
from ibp_metrics.core.config import settings
from ibp_metrics.core.dependencies import get_member_cache
from ibp_metrics.core.logging import get_logger
from ibp_metrics.middleware import MetricsMiddleware, RequestIDMiddleware

logger = get_logger("ibp-metrics-exporter")


# ── Lifespan ──────────────────────────────────────────────────────────────
@asynccontextmanager
async def lifespan(application: FastAPI):
    logger.info(
        "Starting %s v%s — upstream=%s, cache_ttl=%ss",
        settings.SERVICE_NAME,
        settings.SERVICE_VERSION,
        settings.IBP_API_URL,
        settings.CACHE_TTL_SECONDS,
    )
    yield
    evicted = get_member_cache().clear()
    logger.info("Shutting down — %d cached members dropped", evicted)


# ── FastAPI App ───────────────────────────────────────────────────────────
app = FastAPI(
    title="IBP Member Metrics Exporter",
    description="Prometheus exposition of IBP member and service status.",
    version=settings.SERVICE_VERSION,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.add_middleware(MetricsMiddleware)
app.add_middleware(RequestIDMiddleware)


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    logger.exception("Unhandled exception")
    return JSONResponse(status_code=500, content={"error": "internal_server_error", "detail": str(exc)})


# System routes first so /metrics is never read as a member name.
app.include_router(system_controller.router)
app.include_router(cache_controller.router)
app.include_router(metrics_controller.router)


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=settings.SERVICE_PORT, log_level="info")
