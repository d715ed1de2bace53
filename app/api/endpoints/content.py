"""
Landing page content endpoints
"""

from typing import Any, Dict, List
from uuid import UUID
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import get_session
from app.core.security import require_admin
from app.schemas.content import ContentResponse, ContentUpsert
from app.schemas.response import SuccessFlag
from app.services.content_service import ContentService

router = APIRouter()


@router.get("/public", response_model=List[ContentResponse])
async def list_public_content(
    db: AsyncSession = Depends(get_session)
) -> Any:
    """
    Active content, in display order
    """
    return await ContentService.list_content(db, active_only=True)


@router.get("", response_model=List[ContentResponse])
async def list_content(
    admin: Dict = Depends(require_admin),
    db: AsyncSession = Depends(get_session)
) -> Any:
    return await ContentService.list_content(db)


@router.post("", response_model=ContentResponse)
async def upsert_content(
    payload: ContentUpsert,
    admin: Dict = Depends(require_admin),
    db: AsyncSession = Depends(get_session)
) -> Any:
    """
    Create a content item, or update it when ``id`` names an existing one
    """
    return await ContentService.upsert(db, payload)


@router.delete("/{content_id}", response_model=SuccessFlag)
async def delete_content(
    content_id: UUID,
    admin: Dict = Depends(require_admin),
    db: AsyncSession = Depends(get_session)
) -> Any:
    await ContentService.delete(db, content_id)
    return {"success": True}
