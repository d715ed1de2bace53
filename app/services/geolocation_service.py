"""
Best-effort IP geolocation
Resolves the client address from proxy headers and looks it up against a
public geo-IP service. Lookups never raise: any failure yields an empty location.
"""

from dataclasses import dataclass
from typing import Mapping, Optional
import asyncio
import ipaddress
import logging

import httpx

from app.config import settings
from app.core.exceptions import ExternalServiceError

logger = logging.getLogger(__name__)

LOOPBACK_PLACEHOLDER = "127.0.0.1"


@dataclass(frozen=True)
class GeoLocation:
    city: Optional[str] = None
    region: Optional[str] = None
    country: Optional[str] = None


EMPTY_LOCATION = GeoLocation()


def resolve_client_ip(headers: Mapping[str, str]) -> str:
    """
    Client IP from X-Forwarded-For (first hop), then the Cloudflare header,
    then a loopback placeholder
    """
    forwarded = headers.get("x-forwarded-for")
    if forwarded:
        first = forwarded.split(",")[0].strip()
        if first:
            return first

    cdn_ip = headers.get("cf-connecting-ip")
    if cdn_ip and cdn_ip.strip():
        return cdn_ip.strip()

    return LOOPBACK_PLACEHOLDER


def is_public_ip(ip: str) -> bool:
    """False for loopback, private, link-local, reserved and unparsable addresses"""
    try:
        address = ipaddress.ip_address(ip)
    except ValueError:
        return False
    return not (
        address.is_loopback
        or address.is_private
        or address.is_link_local
        or address.is_reserved
        or address.is_unspecified
        or address.is_multicast
    )


class GeoLocator:
    """Geo-IP lookups against an ip-api.com compatible endpoint"""

    def __init__(
        self,
        client: Optional[httpx.AsyncClient] = None,
        url_template: str = None,
        timeout: float = None
    ):
        self.url_template = url_template or settings.GEOIP_URL
        self.timeout = timeout if timeout is not None else settings.GEOIP_TIMEOUT_SECONDS
        self._client = client or httpx.AsyncClient(timeout=self.timeout)

    async def close(self):
        await self._client.aclose()

    async def _fetch(self, ip: str) -> GeoLocation:
        url = self.url_template.format(ip=ip)
        try:
            response = await asyncio.wait_for(self._client.get(url), timeout=self.timeout)
            response.raise_for_status()
            body = response.json()
        except (asyncio.TimeoutError, httpx.TimeoutException) as e:
            raise ExternalServiceError("geoip", f"Geo-IP lookup timed out after {self.timeout}s") from e
        except (httpx.HTTPError, ValueError) as e:
            raise ExternalServiceError("geoip", f"Geo-IP lookup failed: {e}") from e

        if not isinstance(body, dict) or body.get("status") != "success":
            message = body.get("message") if isinstance(body, dict) else None
            raise ExternalServiceError("geoip", f"Geo-IP lookup unsuccessful: {message or 'unknown'}")

        return GeoLocation(
            city=body.get("city") or None,
            region=body.get("region") or body.get("regionName") or None,
            country=body.get("country") or None,
        )

    async def lookup(self, ip: str) -> GeoLocation:
        """
        Location for ``ip``; empty for non-public addresses or on any failure
        """
        if not is_public_ip(ip):
            return EMPTY_LOCATION

        try:
            return await self._fetch(ip)
        except ExternalServiceError as e:
            logger.warning(e.message, extra={"context": {"ip": ip}})
            return EMPTY_LOCATION
