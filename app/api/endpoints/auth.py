"""
Authentication endpoints
"""

from typing import Any
from fastapi import APIRouter, HTTPException, status
import logging

from app.core.security import create_admin_token, security_manager
from app.schemas.auth import LoginRequest, LoginResponse

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/login", response_model=LoginResponse)
async def login(credentials: LoginRequest) -> Any:
    """
    Exchange the admin password for a 24h bearer token
    """
    if not security_manager.verify_admin_password(credentials.password):
        logger.warning("Rejected admin login attempt")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid password"
        )

    return {"success": True, "token": create_admin_token()}
