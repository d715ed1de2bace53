"""
Database models
"""

from app.models.analytics import AnalyticsEvent, EventType
from app.models.content import SiteContent
from app.models.integration import IntegrationConfig, IntegrationKey

__all__ = [
    "AnalyticsEvent",
    "EventType",
    "SiteContent",
    "IntegrationConfig",
    "IntegrationKey"
]
