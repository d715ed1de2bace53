"""
Landing page content model
"""

from sqlalchemy import Column, String, Text, Boolean, Integer

from app.models.base import BaseModel


class SiteContent(BaseModel):
    """
    Editable landing page section item (text block, embedded video, ...)
    """
    __tablename__ = "site_content"

    section = Column(String(100), nullable=False, index=True)
    type = Column(String(50), nullable=False, default="text")
    title = Column(String(255))
    url = Column(String(2048))
    content = Column(Text)
    is_active = Column(Boolean, default=True, nullable=False, index=True)
    order = Column(Integer, default=0, nullable=False)

    def __repr__(self):
        return f"<SiteContent(id={self.id}, section={self.section}, type={self.type}, order={self.order})>"
