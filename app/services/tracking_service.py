"""
Event ingestion pipeline behind POST /api/track
Enrich (best effort) -> persist -> fan out to ad platforms (fire-and-forget).
Only persistence can fail the request.
"""

from typing import Mapping
import logging

from sqlalchemy.ext.asyncio import AsyncSession

from app.models.analytics import AnalyticsEvent
from app.schemas.track import TrackRequest
from app.services.dispatch_service import AdDispatcher
from app.services.geolocation_service import GeoLocation, GeoLocator, resolve_client_ip
from app.services.integration_service import IntegrationService
from app.services.platform_base import ConversionContext

logger = logging.getLogger(__name__)


class TrackingService:
    """Records visits and clicks"""

    def __init__(self, geo_locator: GeoLocator, dispatcher: AdDispatcher):
        self.geo_locator = geo_locator
        self.dispatcher = dispatcher

    async def record(
        self,
        db: AsyncSession,
        payload: TrackRequest,
        headers: Mapping[str, str]
    ) -> AnalyticsEvent:
        ip = resolve_client_ip(headers)
        location = await self.geo_locator.lookup(ip)

        event = AnalyticsEvent(
            type=payload.type,
            user_agent=headers.get("user-agent") or None,
            referer=headers.get("referer") or None,
            city=location.city,
            region=location.region,
            country=location.country,
            utm_source=payload.utm_source,
            utm_medium=payload.utm_medium,
            utm_campaign=payload.utm_campaign,
        )

        try:
            db.add(event)
            await db.commit()
        except Exception:
            await db.rollback()
            raise

        logger.info(f"Tracked {payload.type.value} from {location.city or 'unknown location'}")

        if payload.type.is_conversion:
            await self._forward(db, payload, headers, ip, location)

        return event

    async def _forward(
        self,
        db: AsyncSession,
        payload: TrackRequest,
        headers: Mapping[str, str],
        ip: str,
        location: GeoLocation
    ) -> None:
        """Hand the conversion to the dispatcher; failures here are only logged"""
        try:
            configs = await IntegrationService.get_all(db)
            context = ConversionContext.from_headers(
                headers,
                ip,
                city=location.city,
                region=location.region,
                country=location.country,
                utm_source=payload.utm_source,
                utm_medium=payload.utm_medium,
                utm_campaign=payload.utm_campaign,
            )
            scheduled = self.dispatcher.dispatch(payload.type, context, configs)
        except Exception as e:
            logger.error(f"Failed to schedule ad platform dispatch: {type(e).__name__}: {e}", exc_info=True)
            return

        if scheduled:
            logger.debug(f"Scheduled {payload.type.value} for {', '.join(scheduled)}")
