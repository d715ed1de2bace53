"""
Landing page content management
"""

from typing import List, Optional
from uuid import UUID
import logging
import re

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import NotFoundError
from app.models.content import SiteContent
from app.schemas.content import ContentUpsert

logger = logging.getLogger(__name__)

VIDEO_CONTENT_TYPE = "youtube"

# Tried in order; the first match wins
VIDEO_ID_PATTERNS = [
    re.compile(r"youtu\.be/([A-Za-z0-9_-]+)"),
    re.compile(r"youtube\.com/watch\?(?:[^#]*&)?v=([A-Za-z0-9_-]+)"),
    re.compile(r"/embed/([A-Za-z0-9_-]+)"),
]


def extract_video_id(url: Optional[str]) -> Optional[str]:
    """
    Reduce a pasted YouTube URL to its video id.
    Unrecognised values (including bare ids) are returned unchanged.
    """
    if not url:
        return url
    for pattern in VIDEO_ID_PATTERNS:
        match = pattern.search(url)
        if match:
            return match.group(1)
    return url


class ContentService:
    """CRUD for SiteContent rows"""

    @staticmethod
    async def list_content(db: AsyncSession, active_only: bool = False) -> List[SiteContent]:
        stmt = select(SiteContent).order_by(SiteContent.order, SiteContent.created_at)
        if active_only:
            stmt = stmt.where(SiteContent.is_active.is_(True))
        result = await db.execute(stmt)
        return list(result.scalars().all())

    @staticmethod
    async def upsert(db: AsyncSession, payload: ContentUpsert) -> SiteContent:
        """Update the row named by ``payload.id`` or insert a new one"""
        values = payload.model_dump(exclude={"id"})
        if values.get("type") == VIDEO_CONTENT_TYPE:
            values["url"] = extract_video_id(values.get("url"))

        item = None
        if payload.id is not None:
            item = await db.get(SiteContent, payload.id)

        if item is None:
            item = SiteContent(**values)
            if payload.id is not None:
                item.id = payload.id
            db.add(item)
            action = "Created"
        else:
            for field, value in values.items():
                setattr(item, field, value)
            action = "Updated"

        await db.commit()
        await db.refresh(item)
        logger.info(f"{action} content {item.id} in section {item.section}")
        return item

    @staticmethod
    async def delete(db: AsyncSession, content_id: UUID) -> None:
        item = await db.get(SiteContent, content_id)
        if item is None:
            raise NotFoundError("Content", content_id)
        await db.delete(item)
        await db.commit()
        logger.info(f"Deleted content {content_id}")
