"""
Site content schemas
"""

from datetime import datetime
from typing import Optional
from uuid import UUID
from pydantic import Field

from app.schemas.base import CamelSchema


class ContentBase(CamelSchema):
    section: str = Field(..., min_length=1, max_length=100)
    type: str = Field("text", min_length=1, max_length=50)
    title: Optional[str] = Field(None, max_length=255)
    url: Optional[str] = Field(None, max_length=2048)
    content: Optional[str] = None
    is_active: bool = True
    order: int = 0


class ContentUpsert(ContentBase):
    """POST /api/content body; an existing ``id`` updates that row"""
    id: Optional[UUID] = None


class ContentResponse(ContentBase):
    id: UUID
    created_at: datetime
    updated_at: datetime
