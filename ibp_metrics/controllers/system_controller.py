# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Controller: System endpoints — health, readiness, exporter self-metrics.
Pure HTTP layer — no business logic.
"""

from datetime import datetime, timezone

from fastapi import APIRouter, Depends
from prometheus_client import generate_latest, CONTENT_TYPE_LATEST
from starlette.responses import Response

from ibp_metrics.core.config import settings
from ibp_metrics.core.dependencies import get_ibp_client, get_member_cache
from ibp_metrics.services.ibp_client import IBPClient
from ibp_metrics.services.member_cache import MemberCache

router = APIRouter(tags=["System"])


@router.get("/health")
def health_check(cache: MemberCache = Depends(get_member_cache)):
    """Liveness probe for Docker and orchestration."""
    return {
        "status": "ok",
        "service": settings.SERVICE_NAME,
        "version": settings.SERVICE_VERSION,
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "cached_members": cache.size(),
    }


@router.get("/health/ready")
def readiness_check(
    client: IBPClient = Depends(get_ibp_client),
    cache: MemberCache = Depends(get_member_cache),
):
    """Readiness probe — reports the upstream and cache configuration in use."""
    return {
        "status": "ready",
        "service": settings.SERVICE_NAME,
        "upstream": client.base_url,
        "service_tiers": client.tiers_file or client.tiers_url,
        "cache_ttl_seconds": cache.ttl,
    }


@router.get("/metrics")
def exporter_metrics():
    """The exporter's own operational metrics (default registry)."""
    return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)
