"""
Ad platform integration config model
"""

from sqlalchemy import Column, String, DateTime, JSON
import enum

from app.core.database import Base
from app.models.base import utcnow


class IntegrationKey(str, enum.Enum):
    FACEBOOK = "facebook"
    GOOGLE = "google"
    TIKTOK = "tiktok"


class IntegrationConfig(Base):
    """
    Credential blob per ad platform, one row per key
    """
    __tablename__ = "integration_configs"

    key = Column(String(20), primary_key=True)
    data = Column(JSON, nullable=False, default=dict)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False)

    def __repr__(self):
        return f"<IntegrationConfig(key={self.key})>"
