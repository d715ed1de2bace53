"""
Google Analytics 4 Measurement Protocol client
"""

from typing import Any, Dict

from app.config import settings
from app.models.analytics import EventType
from app.schemas.integration import GoogleCredentials
from app.services.platform_base import (
    BUTTON_LABELS,
    ConversionContext,
    PlatformClient,
    compact,
)

# Used when the frontend did not forward its _ga client id
DEFAULT_CLIENT_ID = "backend-client"


class GoogleAnalyticsClient(PlatformClient):
    platform = "google"
    event_names = {
        EventType.CLICK_WHATSAPP: "generate_lead",
        EventType.CLICK_PLAYSTORE: "app_download_click",
        EventType.CLICK_APPSTORE: "app_download_click",
    }
    fallback_event_name = "cta_click"

    def build_request(
        self,
        event_type: EventType,
        context: ConversionContext,
        credentials: GoogleCredentials
    ) -> Dict[str, Any]:
        params = compact({
            "engagement_time_msec": "100",
            "button": BUTTON_LABELS.get(event_type, event_type.value),
            "city": context.city,
            "region": context.region,
            "country": context.country,
            "source": context.utm_source,
            "medium": context.utm_medium,
            "campaign": context.utm_campaign,
        })

        return {
            "method": "POST",
            "url": settings.GA4_COLLECT_URL,
            "params": {
                "measurement_id": credentials.measurement_id,
                "api_secret": credentials.api_secret,
            },
            "json": {
                "client_id": context.ga_client_id or DEFAULT_CLIENT_ID,
                "events": [{"name": self.event_name(event_type), "params": params}],
            },
        }
