"""
Ad platform integration schemas
Each platform has an explicit credential record validated on write.
"""

from datetime import datetime
from typing import Any, Dict, Optional, Type
from pydantic import BaseModel, ConfigDict, Field

from app.models.integration import IntegrationKey
from app.schemas.base import BaseSchema, CamelSchema


class PlatformCredentials(BaseModel):
    """Credentials stored as a JSON blob; unknown keys are preserved"""
    model_config = ConfigDict(extra="allow", populate_by_name=True)


class FacebookCredentials(PlatformCredentials):
    pixel_id: str = Field(..., alias="pixelId", min_length=1)
    access_token: str = Field(..., alias="accessToken", min_length=1)


class GoogleCredentials(PlatformCredentials):
    measurement_id: str = Field(..., alias="measurementId", min_length=1)
    api_secret: str = Field(..., alias="apiSecret", min_length=1)


class TikTokCredentials(PlatformCredentials):
    pixel_id: str = Field(..., alias="pixelId", min_length=1)
    access_token: str = Field(..., alias="accessToken", min_length=1)


CREDENTIAL_MODELS: Dict[IntegrationKey, Type[PlatformCredentials]] = {
    IntegrationKey.FACEBOOK: FacebookCredentials,
    IntegrationKey.GOOGLE: GoogleCredentials,
    IntegrationKey.TIKTOK: TikTokCredentials,
}


class IntegrationUpsert(BaseSchema):
    """POST /api/integrations body"""
    key: IntegrationKey
    data: Dict[str, Any]

    model_config = ConfigDict(
        use_enum_values=False,
        json_schema_extra={
            "example": {
                "key": "facebook",
                "data": {"pixelId": "1234567890", "accessToken": "EAAB..."}
            }
        }
    )


class IntegrationResponse(CamelSchema):
    key: str
    data: Dict[str, Any]
    updated_at: Optional[datetime] = None
