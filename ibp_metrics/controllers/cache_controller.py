# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Controller: Member cache administration.
"""

from fastapi import APIRouter, Depends, HTTPException

from ibp_metrics.core.dependencies import get_member_cache
from ibp_metrics.services.member_cache import MemberCache

router = APIRouter(prefix="/api/v1", tags=["Cache"])


@router.delete("/cache")
def clear_cache(cache: MemberCache = Depends(get_member_cache)):
    """Drop every cached member so the next scrape refetches from upstream."""
    return {"status": "cleared", "evicted": cache.clear()}


@router.delete("/cache/{member_name}")
def invalidate_member(
    member_name: str,
    cache: MemberCache = Depends(get_member_cache),
):
    """Drop one member's cached data."""
    if not cache.invalidate(member_name):
        raise HTTPException(status_code=404, detail=f"Member {member_name} is not cached")
    return {"status": "invalidated", "member": member_name}
