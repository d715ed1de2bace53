"""
Event tracking schemas
"""

from typing import Optional
from pydantic import ConfigDict

from app.schemas.base import BaseSchema
from app.models.analytics import EventType


class TrackRequest(BaseSchema):
    """Body of POST /api/track"""
    type: EventType
    utm_source: Optional[str] = None
    utm_medium: Optional[str] = None
    utm_campaign: Optional[str] = None

    # `type` stays an EventType; BaseSchema would store the raw value
    model_config = ConfigDict(
        use_enum_values=False,
        json_schema_extra={
            "example": {
                "type": "click_whatsapp",
                "utm_source": "instagram",
                "utm_medium": "social",
                "utm_campaign": "launch"
            }
        },
    )


class TrackResponse(BaseSchema):
    success: bool = True
    city: Optional[str] = None
