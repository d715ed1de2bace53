"""
Visit and click tracking endpoint
"""

from typing import Any
from fastapi import APIRouter, Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import get_session
from app.dependencies import get_tracking_service
from app.schemas.track import TrackRequest, TrackResponse
from app.services.tracking_service import TrackingService

router = APIRouter()


@router.post("", response_model=TrackResponse)
async def track_event(
    payload: TrackRequest,
    request: Request,
    db: AsyncSession = Depends(get_session),
    tracking: TrackingService = Depends(get_tracking_service)
) -> Any:
    """
    Record a visit or call-to-action click
    """
    event = await tracking.record(db, payload, request.headers)
    return {"success": True, "city": event.city}
