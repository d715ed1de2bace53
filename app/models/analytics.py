"""
Analytics event model
"""

from sqlalchemy import Column, Text, DateTime, Enum, Uuid
import enum
import uuid

from app.core.database import Base
from app.models.base import utcnow


class EventType(str, enum.Enum):
    VISIT = "visit"
    CLICK_PLAYSTORE = "click_playstore"
    CLICK_APPSTORE = "click_appstore"
    CLICK_WHATSAPP = "click_whatsapp"

    @property
    def is_conversion(self) -> bool:
        return self is not EventType.VISIT


class AnalyticsEvent(Base):
    """
    One row per tracked visit or click. Rows are never updated or deleted.
    """
    __tablename__ = "analytics_events"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4, nullable=False)
    type = Column(
        Enum(
            EventType,
            name="analytics_event_type",
            values_callable=lambda enum_cls: [member.value for member in enum_cls]
        ),
        nullable=False,
        index=True
    )
    date = Column(DateTime(timezone=True), default=utcnow, nullable=False, index=True)
    user_agent = Column(Text)
    referer = Column(Text)

    # Best-effort geolocation
    city = Column(Text)
    region = Column(Text)
    country = Column(Text)

    # Client-supplied attribution, unbounded
    utm_source = Column(Text)
    utm_medium = Column(Text)
    utm_campaign = Column(Text)

    def __repr__(self):
        return f"<AnalyticsEvent(id={self.id}, type={self.type}, date={self.date})>"
