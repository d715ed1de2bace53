"""
Dashboard statistics endpoint
"""

from typing import Any, Dict
from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import get_session
from app.core.security import require_admin
from app.schemas.stats import StatsResponse
from app.services.analytics_service import AnalyticsService, DEFAULT_WINDOW_DAYS

router = APIRouter()


@router.get("", response_model=StatsResponse)
async def get_stats(
    days: int = Query(DEFAULT_WINDOW_DAYS, ge=1, le=3650),
    admin: Dict = Depends(require_admin),
    db: AsyncSession = Depends(get_session)
) -> Any:
    """
    Daily breakdown, totals, top cities and sources for the last ``days`` days
    """
    return await AnalyticsService.get_stats(db, days)
