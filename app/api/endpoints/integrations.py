"""
Ad platform credential endpoints
"""

from typing import Any, Dict
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import get_session
from app.core.security import require_admin
from app.schemas.integration import IntegrationResponse, IntegrationUpsert
from app.services.integration_service import IntegrationService

router = APIRouter()


@router.get("", response_model=Dict[str, Dict[str, Any]])
async def list_integrations(
    admin: Dict = Depends(require_admin),
    db: AsyncSession = Depends(get_session)
) -> Any:
    """
    Stored credentials keyed by platform
    """
    return await IntegrationService.get_all(db)


@router.post("", response_model=IntegrationResponse)
async def upsert_integration(
    payload: IntegrationUpsert,
    admin: Dict = Depends(require_admin),
    db: AsyncSession = Depends(get_session)
) -> Any:
    return await IntegrationService.upsert(db, payload.key, payload.data)
