"""
Ad platform credential storage
"""

from typing import Any, Dict, List
import logging

from pydantic import ValidationError as PydanticValidationError
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import ValidationError
from app.models.base import utcnow
from app.models.integration import IntegrationConfig, IntegrationKey
from app.schemas.integration import CREDENTIAL_MODELS

logger = logging.getLogger(__name__)


class IntegrationService:
    """Upsert-by-key storage of per-platform credential blobs"""

    @staticmethod
    async def get_all(db: AsyncSession) -> Dict[str, Dict[str, Any]]:
        """Stored blobs keyed by platform"""
        result = await db.execute(select(IntegrationConfig).order_by(IntegrationConfig.key))
        return {config.key: config.data for config in result.scalars().all()}

    @staticmethod
    def validate_credentials(key: IntegrationKey, data: Dict[str, Any]) -> Dict[str, Any]:
        """
        Check ``data`` against the platform's credential record.
        Returns the blob to store, keyed by the camelCase wire names.
        """
        try:
            credentials = CREDENTIAL_MODELS[key].model_validate(data)
        except PydanticValidationError as e:
            missing: List[str] = [
                str(error["loc"][0]) for error in e.errors() if error.get("loc")
            ]
            raise ValidationError(
                f"Invalid credentials for {key.value}",
                field="data",
                details={"invalid": missing}
            )
        return credentials.model_dump(by_alias=True)

    @staticmethod
    async def upsert(db: AsyncSession, key: IntegrationKey, data: Dict[str, Any]) -> IntegrationConfig:
        """Create or replace the credentials for ``key``"""
        blob = IntegrationService.validate_credentials(key, data)

        config = await db.get(IntegrationConfig, key.value)
        if config is None:
            config = IntegrationConfig(key=key.value, data=blob)
            db.add(config)
        else:
            config.data = blob
            config.updated_at = utcnow()

        await db.commit()
        await db.refresh(config)
        logger.info(f"Stored integration config for {key.value}")
        return config
