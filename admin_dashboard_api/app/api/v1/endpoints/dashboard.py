"""
Dashboard endpoints for API v1.

Summary figures and chart series are admin-only.  The activity feed is
available to every authenticated account.
"""

from typing import Any, Dict

from fastapi import APIRouter, Depends, Query

from admin_dashboard_api.app.core.auth import get_current_user, require_admin
from admin_dashboard_api.app.dependencies import get_statistics_service
from admin_dashboard_api.app.services.statistics_service import StatisticsService

router = APIRouter()


@router.get("/stats")
async def dashboard_stats(
    current_user: Dict[str, Any] = Depends(require_admin),
    statistics: StatisticsService = Depends(get_statistics_service),
) -> Dict[str, Any]:
    return {"success": True, "data": await statistics.overview()}


@router.get("/charts")
async def dashboard_charts(
    current_user: Dict[str, Any] = Depends(require_admin),
    statistics: StatisticsService = Depends(get_statistics_service),
) -> Dict[str, Any]:
    return {"success": True, "data": await statistics.charts()}


@router.get("/activities")
async def recent_activities(
    limit: int = Query(20, ge=1, le=1000),
    current_user: Dict[str, Any] = Depends(get_current_user),
    statistics: StatisticsService = Depends(get_statistics_service),
) -> Dict[str, Any]:
    """Most recent activity entries, newest first."""
    return {"success": True, "data": await statistics.activities(limit)}
