"""
Fan-out of conversion events to the ad platforms
Dispatch is fire-and-forget: sends run as detached background tasks and
their outcome never reaches the request that triggered them.
"""

from typing import Any, Dict, List, Mapping, Optional
import logging

import httpx
from pydantic import ValidationError as PydanticValidationError

from app.config import settings
from app.core.background import BackgroundRunner
from app.models.analytics import EventType
from app.models.integration import IntegrationKey
from app.schemas.integration import CREDENTIAL_MODELS, PlatformCredentials
from app.services.facebook_service import FacebookConversionsClient
from app.services.google_service import GoogleAnalyticsClient
from app.services.platform_base import ConversionContext, PlatformClient
from app.services.tiktok_service import TikTokEventsClient

logger = logging.getLogger(__name__)


def parse_credentials(key: IntegrationKey, data: Optional[Mapping[str, Any]]) -> Optional[PlatformCredentials]:
    """Typed credentials for ``key``, or None when required fields are missing"""
    if not data:
        return None
    try:
        return CREDENTIAL_MODELS[key].model_validate(dict(data))
    except PydanticValidationError:
        return None


class AdDispatcher:
    """Sends conversion events to every configured ad platform"""

    def __init__(
        self,
        client: Optional[httpx.AsyncClient] = None,
        runner: Optional[BackgroundRunner] = None
    ):
        self._http = client or httpx.AsyncClient(timeout=settings.AD_PLATFORM_TIMEOUT_SECONDS)
        self.runner = runner or BackgroundRunner(max_pending=settings.DISPATCH_MAX_PENDING)
        self.clients: Dict[IntegrationKey, PlatformClient] = {
            IntegrationKey.FACEBOOK: FacebookConversionsClient(self._http),
            IntegrationKey.GOOGLE: GoogleAnalyticsClient(self._http),
            IntegrationKey.TIKTOK: TikTokEventsClient(self._http),
        }

    def dispatch(
        self,
        event_type: EventType,
        context: ConversionContext,
        configs: Mapping[str, Mapping[str, Any]]
    ) -> List[str]:
        """
        Schedule one send per configured platform. Returns the platforms scheduled.
        Visits are never forwarded.
        """
        if not event_type.is_conversion:
            return []

        scheduled = []
        for key, platform_client in self.clients.items():
            credentials = parse_credentials(key, configs.get(key.value))
            if credentials is None:
                logger.debug(f"Skipping {key.value}: credentials not configured")
                continue

            task = self.runner.submit(
                platform_client.send(event_type, context, credentials),
                name=f"{key.value}:{event_type.value}"
            )
            if task is not None:
                scheduled.append(key.value)

        return scheduled

    async def close(self, timeout: Optional[float] = None):
        """Wait for pending sends, then release the HTTP client"""
        await self.runner.drain(timeout=timeout)
        await self._http.aclose()
