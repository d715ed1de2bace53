"""
Main API Router
Aggregates all /api endpoints
"""

from fastapi import APIRouter
from app.api.endpoints import (
    auth,
    track,
    stats,
    content,
    integrations
)

api_router = APIRouter()

api_router.include_router(auth.router, prefix="/auth", tags=["Authentication"])
api_router.include_router(track.router, prefix="/track", tags=["Tracking"])
api_router.include_router(stats.router, prefix="/stats", tags=["Statistics"])
api_router.include_router(content.router, prefix="/content", tags=["Content"])
api_router.include_router(integrations.router, prefix="/integrations", tags=["Integrations"])
