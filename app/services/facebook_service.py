"""
Meta (Facebook) Conversions API client
"""

from typing import Any, Dict

from app.config import settings
from app.models.analytics import EventType
from app.schemas.integration import FacebookCredentials
from app.services.platform_base import (
    BUTTON_LABELS,
    ConversionContext,
    PlatformClient,
    compact,
    unix_now,
)


class FacebookConversionsClient(PlatformClient):
    platform = "facebook"
    event_names = {
        EventType.CLICK_WHATSAPP: "Lead",
        EventType.CLICK_PLAYSTORE: "Lead",
        EventType.CLICK_APPSTORE: "Lead",
    }

    def build_request(
        self,
        event_type: EventType,
        context: ConversionContext,
        credentials: FacebookCredentials
    ) -> Dict[str, Any]:
        user_data = compact({
            "client_ip_address": context.ip,
            "client_user_agent": context.user_agent,
            "fbc": context.fbc,
            "fbp": context.fbp,
        })
        custom_data = compact({
            "content_name": BUTTON_LABELS.get(event_type, event_type.value),
            "city": context.city,
            "region": context.region,
            "country": context.country,
            "utm_source": context.utm_source,
            "utm_medium": context.utm_medium,
            "utm_campaign": context.utm_campaign,
        })
        server_event = compact({
            "event_name": self.event_name(event_type),
            "event_time": unix_now(),
            "action_source": "website",
            "event_source_url": context.referer,
            "user_data": user_data,
            "custom_data": custom_data,
        })

        return {
            "method": "POST",
            "url": f"https://graph.facebook.com/{settings.FACEBOOK_GRAPH_VERSION}/{credentials.pixel_id}/events",
            "params": {"access_token": credentials.access_token},
            "json": {"data": [server_event]},
        }
