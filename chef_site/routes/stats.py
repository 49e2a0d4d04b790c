"""
Dashboard statistics route.
"""
from fastapi import APIRouter, Depends

from chef_site.deps import get_stats_service, require_login
from chef_site.schemas import SessionUser, StatsResponse
from chef_site.services.stats import StatsService

router = APIRouter()


@router.get("/stats", response_model=StatsResponse)
async def get_stats(
    stats: StatsService = Depends(get_stats_service),
    user: SessionUser = Depends(require_login),
):
    """Row counts for categories, menu items, gallery images, users and bookings."""
    return await stats.summary()
