import ipaddress
import logging
from typing import Optional

import httpx
from pydantic import ValidationError

from src.app.services.geolocation import (
    IGeolocationResolver,
    Location,
    PRIVATE_LOCATION,
    UNKNOWN_LOCATION,
    is_private_ip,
)

logger = logging.getLogger(__name__)


def _parse_coordinates(loc) -> Optional[tuple]:
    """ipinfo returns coordinates as a "lat,lon" string"""
    if not isinstance(loc, str):
        return None
    try:
        lat, lon = loc.split(",", 1)
        latitude, longitude = float(lat), float(lon)
    except ValueError:
        return None
    if not (-90 <= latitude <= 90 and -180 <= longitude <= 180):
        return None
    return latitude, longitude


def _location_from_payload(payload: dict) -> Optional[Location]:
    city = payload.get("city")
    country = payload.get("country")
    if not isinstance(city, str) or not city.strip():
        return None
    if not isinstance(country, str) or not country.strip():
        return None

    coordinates = _parse_coordinates(payload.get("loc"))
    if coordinates is None:
        return None

    try:
        return Location(
            city=city.strip(),
            country=country.strip(),
            latitude=coordinates[0],
            longitude=coordinates[1],
        )
    except ValidationError:
        return None


class IpInfoGeolocationResolver(IGeolocationResolver):
    """
    Resolves IPs through an ipinfo.io compatible HTTP API.

    Private addresses never leave the process. Any transport error, non-200
    response or malformed payload resolves to UNKNOWN_LOCATION.
    """

    def __init__(
        self,
        base_url: str = "https://ipinfo.io",
        token: str = "",
        timeout_seconds: float = 3.0,
        client: Optional[httpx.AsyncClient] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.token = token
        self.timeout_seconds = timeout_seconds
        self.client = client

    async def resolve(self, ip: str) -> Location:
        try:
            ipaddress.ip_address(ip.strip())
        except ValueError:
            logger.warning(f"Cannot geolocate malformed IP {ip!r}")
            return UNKNOWN_LOCATION

        if is_private_ip(ip):
            return PRIVATE_LOCATION

        try:
            payload = await self._fetch(ip)
        except (httpx.HTTPError, ValueError) as e:
            logger.warning(f"Geolocation lookup failed for {ip}: {e}")
            return UNKNOWN_LOCATION

        if not isinstance(payload, dict):
            logger.warning(f"Geolocation lookup for {ip} returned an unexpected payload")
            return UNKNOWN_LOCATION

        location = _location_from_payload(payload)
        if location is None:
            logger.warning(f"Geolocation lookup for {ip} returned incomplete data")
            return UNKNOWN_LOCATION
        return location

    async def _fetch(self, ip: str):
        url = f"{self.base_url}/{ip}"
        params = {"token": self.token} if self.token else None

        if self.client is not None:
            response = await self.client.get(url, params=params, timeout=self.timeout_seconds)
        else:
            async with httpx.AsyncClient(timeout=self.timeout_seconds) as client:
                response = await client.get(url, params=params)

        response.raise_for_status()
        return response.json()
