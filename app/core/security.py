"""
Security utilities for authentication and authorization
"""

from datetime import datetime, timedelta, timezone
from typing import Optional, Dict, Any
from jose import JWTError, jwt
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
import hmac
import logging

from app.config import settings

logger = logging.getLogger(__name__)

ADMIN_SUBJECT = "admin"
ADMIN_ROLE = "admin"

# Missing or non-Bearer Authorization headers are rejected in require_admin with 401
bearer_scheme = HTTPBearer(auto_error=False)


def _credentials_exception(detail: str = "Could not validate credentials") -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


class SecurityManager:
    """
    Security manager for the single shared-secret admin identity
    """

    @staticmethod
    def verify_admin_password(password: str) -> bool:
        """
        Constant-time comparison against the configured admin password
        """
        return hmac.compare_digest(
            password.encode("utf-8"),
            settings.ADMIN_PASSWORD.encode("utf-8")
        )

    @staticmethod
    def create_access_token(
        data: Dict[str, Any],
        expires_delta: Optional[timedelta] = None
    ) -> str:
        """
        Create a signed JWT access token
        """
        to_encode = data.copy()
        now = datetime.now(timezone.utc)
        if expires_delta is None:
            expires_delta = timedelta(hours=settings.JWT_EXPIRE_HOURS)

        to_encode.update({
            "exp": now + expires_delta,
            "iat": now,
        })

        return jwt.encode(
            to_encode,
            settings.JWT_SECRET,
            algorithm=settings.JWT_ALGORITHM
        )

    @staticmethod
    def decode_token(token: str) -> Dict[str, Any]:
        """
        Decode and verify a JWT token (signature and expiry)
        """
        try:
            return jwt.decode(
                token,
                settings.JWT_SECRET,
                algorithms=[settings.JWT_ALGORITHM]
            )
        except JWTError as e:
            logger.info(f"Rejected bearer token: {e}")
            raise _credentials_exception()


# Create global security manager
security_manager = SecurityManager()


def create_admin_token(expires_delta: Optional[timedelta] = None) -> str:
    """
    Issue the admin bearer token returned by login
    """
    return security_manager.create_access_token(
        {"sub": ADMIN_SUBJECT, "role": ADMIN_ROLE},
        expires_delta
    )


async def require_admin(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme)
) -> Dict[str, Any]:
    """
    Require a valid admin bearer token for endpoint
    """
    if credentials is None:
        raise _credentials_exception("Not authenticated")
    payload = security_manager.decode_token(credentials.credentials)
    if payload.get("role") != ADMIN_ROLE:
        raise _credentials_exception()
    return payload
