"""
Admin authentication schemas
"""

from pydantic import ConfigDict, Field

from app.schemas.base import BaseSchema


class LoginRequest(BaseSchema):
    """Admin login body"""
    password: str = Field(..., min_length=1)

    model_config = ConfigDict(json_schema_extra={"example": {"password": "change-me"}})


class LoginResponse(BaseSchema):
    success: bool = True
    token: str
