"""
Shared pieces of the ad platform conversion clients
"""

from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional
import logging
import time

import httpx

from app.core.exceptions import ExternalServiceError
from app.models.analytics import EventType

logger = logging.getLogger(__name__)

GENERIC_EVENT_NAME = "CustomEvent"

# Human readable label of the clicked call-to-action
BUTTON_LABELS: Dict[EventType, str] = {
    EventType.CLICK_PLAYSTORE: "playstore",
    EventType.CLICK_APPSTORE: "appstore",
    EventType.CLICK_WHATSAPP: "whatsapp",
}


@dataclass(frozen=True)
class ConversionContext:
    """Request and attribution data forwarded to every platform"""
    ip: str
    user_agent: Optional[str] = None
    referer: Optional[str] = None
    fbc: Optional[str] = None
    fbp: Optional[str] = None
    ttclid: Optional[str] = None
    ga_client_id: Optional[str] = None
    city: Optional[str] = None
    region: Optional[str] = None
    country: Optional[str] = None
    utm_source: Optional[str] = None
    utm_medium: Optional[str] = None
    utm_campaign: Optional[str] = None

    @classmethod
    def from_headers(cls, headers: Mapping[str, str], ip: str, **fields) -> "ConversionContext":
        return cls(
            ip=ip,
            user_agent=headers.get("user-agent") or None,
            referer=headers.get("referer") or None,
            fbc=headers.get("fbc") or None,
            fbp=headers.get("fbp") or None,
            ttclid=headers.get("ttclid") or None,
            ga_client_id=headers.get("x-ga-client-id") or None,
            **fields
        )


def compact(values: Dict[str, Any]) -> Dict[str, Any]:
    """Drop keys whose value is None"""
    return {key: value for key, value in values.items() if value is not None}


def unix_now() -> int:
    return int(time.time())


class PlatformClient:
    """
    Base class for a conversion API client.

    Subclasses define ``platform``, ``event_names`` and ``build_request``.
    ``send`` raises ExternalServiceError on any failure; callers decide
    whether to swallow it.
    """

    platform: str = ""
    event_names: Dict[EventType, str] = {}
    fallback_event_name: str = GENERIC_EVENT_NAME

    def __init__(self, client: httpx.AsyncClient):
        self._client = client

    def event_name(self, event_type: EventType) -> str:
        return self.event_names.get(event_type, self.fallback_event_name)

    def build_request(self, event_type: EventType, context: ConversionContext, credentials) -> Dict[str, Any]:
        """Return keyword arguments for ``httpx.AsyncClient.request``"""
        raise NotImplementedError

    async def send(self, event_type: EventType, context: ConversionContext, credentials) -> httpx.Response:
        request_kwargs = self.build_request(event_type, context, credentials)
        try:
            response = await self._client.request(**request_kwargs)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise ExternalServiceError(
                self.platform,
                f"{self.platform} rejected event: HTTP {e.response.status_code} {e.response.text[:200]}"
            ) from e
        except httpx.HTTPError as e:
            raise ExternalServiceError(self.platform, f"{self.platform} request failed: {e!r}") from e

        logger.info(f"Sent {self.event_name(event_type)} to {self.platform}")
        return response
