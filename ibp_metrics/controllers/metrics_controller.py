# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Controller: IBP member/service exposition endpoints.
Thin HTTP layer — delegates ALL logic to MetricsAggregator.
"""

from fastapi import APIRouter, Depends, HTTPException
from starlette.responses import Response

from ibp_metrics.core.dependencies import get_aggregator
from ibp_metrics.core.exceptions import MemberNotFoundError
from ibp_metrics.core.logging import get_logger
from ibp_metrics.metrics.registry import CONTENT_TYPE
from ibp_metrics.services.aggregator import MetricsAggregator

logger = get_logger(__name__)

router = APIRouter(tags=["IBP Metrics"])


@router.get("/api/v1/metrics")
def get_all_members_metrics(
    aggregator: MetricsAggregator = Depends(get_aggregator),
):
    """Exposition for every member in the registry; unreachable members are left out."""
    try:
        text = aggregator.collect_all()
    except Exception as e:
        logger.exception("All-members refresh failed")
        raise HTTPException(status_code=500, detail=f"Error fetching metrics: {e}")
    return Response(content=text, media_type=CONTENT_TYPE)


@router.get("/{member_name}/metrics")
def get_member_metrics(
    member_name: str,
    aggregator: MetricsAggregator = Depends(get_aggregator),
):
    """Exposition for a single member."""
    try:
        text = aggregator.collect_one(member_name)
    except MemberNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except Exception as e:
        logger.exception("Refresh failed for member %s", member_name)
        raise HTTPException(status_code=500, detail=f"Error fetching metrics: {e}")
    return Response(content=text, media_type=CONTENT_TYPE)
