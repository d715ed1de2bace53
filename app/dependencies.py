"""
Shared service dependencies
Outbound clients are created once in the application lifespan and kept on
``app.state``; endpoints receive them through these dependencies.
"""

import logging
from fastapi import Depends, HTTPException, Request, status

from app.services.dispatch_service import AdDispatcher
from app.services.geolocation_service import GeoLocator
from app.services.tracking_service import TrackingService

logger = logging.getLogger(__name__)


def _state_service(request: Request, name: str, expected: type):
    service = getattr(request.app.state, name, None)
    if not isinstance(service, expected):
        logger.error(f"Service {name} is not initialised")
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Service temporarily unavailable"
        )
    return service


async def get_geo_locator(request: Request) -> GeoLocator:
    return _state_service(request, "geo_locator", GeoLocator)


async def get_dispatcher(request: Request) -> AdDispatcher:
    return _state_service(request, "ad_dispatcher", AdDispatcher)


async def get_tracking_service(
    geo_locator: GeoLocator = Depends(get_geo_locator),
    dispatcher: AdDispatcher = Depends(get_dispatcher)
) -> TrackingService:
    return TrackingService(geo_locator, dispatcher)
