"""
TikTok Events API client
"""

from typing import Any, Dict

from app.config import settings
from app.models.analytics import EventType
from app.schemas.integration import TikTokCredentials
from app.services.platform_base import (
    BUTTON_LABELS,
    ConversionContext,
    PlatformClient,
    compact,
    unix_now,
)


class TikTokEventsClient(PlatformClient):
    platform = "tiktok"
    event_names = {
        EventType.CLICK_WHATSAPP: "Contact",
        EventType.CLICK_PLAYSTORE: "ClickButton",
        EventType.CLICK_APPSTORE: "ClickButton",
    }
    fallback_event_name = "ClickButton"

    def build_request(
        self,
        event_type: EventType,
        context: ConversionContext,
        credentials: TikTokCredentials
    ) -> Dict[str, Any]:
        page = compact({"referrer": context.referer})
        payload_context = compact({
            "user_agent": context.user_agent,
            "ip": context.ip,
            "ad": {"callback": context.ttclid} if context.ttclid else None,
            "page": page or None,
        })
        properties = compact({
            "content_name": BUTTON_LABELS.get(event_type, event_type.value),
            "city": context.city,
            "region": context.region,
            "utm_source": context.utm_source,
            "utm_medium": context.utm_medium,
            "utm_campaign": context.utm_campaign,
        })

        return {
            "method": "POST",
            "url": settings.TIKTOK_EVENTS_URL,
            "headers": {"Access-Token": credentials.access_token},
            "json": {
                "pixel_code": credentials.pixel_id,
                "event": self.event_name(event_type),
                "event_time": unix_now(),
                "context": payload_context,
                "properties": properties,
            },
        }
