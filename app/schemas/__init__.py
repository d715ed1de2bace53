"""
Pydantic schemas for request and response validation
"""

from app.schemas.auth import LoginRequest, LoginResponse
from app.schemas.track import TrackRequest, TrackResponse
from app.schemas.stats import StatsResponse
from app.schemas.content import ContentUpsert, ContentResponse
from app.schemas.integration import IntegrationUpsert, IntegrationResponse
from app.schemas.response import SuccessFlag, ServiceStatus

__all__ = [
    "LoginRequest",
    "LoginResponse",
    "TrackRequest",
    "TrackResponse",
    "StatsResponse",
    "ContentUpsert",
    "ContentResponse",
    "IntegrationUpsert",
    "IntegrationResponse",
    "SuccessFlag",
    "ServiceStatus"
]
