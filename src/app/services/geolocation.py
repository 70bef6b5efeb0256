"""
Geolocation Resolver

Maps client IP addresses to an approximate location and computes
great-circle distances between locations.
"""

import ipaddress
import math
from abc import ABC, abstractmethod

from pydantic import BaseModel

EARTH_RADIUS_KM = 6371.0

UNKNOWN = "Unknown"


class Location(BaseModel):
    """Approximate location of a client IP"""

    city: str = UNKNOWN
    country: str = UNKNOWN
    latitude: float = 0.0
    longitude: float = 0.0


UNKNOWN_LOCATION = Location()
PRIVATE_LOCATION = Location(city="Local", country="Private Network")

_PRIVATE_NETWORKS = tuple(
    ipaddress.ip_network(cidr)
    for cidr in (
        "10.0.0.0/8",
        "172.16.0.0/12",
        "192.168.0.0/16",
        "127.0.0.0/8",
        "169.254.0.0/16",
        "::1/128",
        "fc00::/7",
        "fe80::/10",
    )
)


def is_private_ip(ip: str) -> bool:
    """RFC1918, loopback, link-local and IPv6 unique-local addresses"""
    try:
        address = ipaddress.ip_address(ip.strip())
    except ValueError:
        return False
    if isinstance(address, ipaddress.IPv6Address) and address.ipv4_mapped:
        address = address.ipv4_mapped
    return any(
        address.version == network.version and address in network
        for network in _PRIVATE_NETWORKS
    )


def haversine_km(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Great-circle distance in kilometres"""
    phi1 = math.radians(lat1)
    phi2 = math.radians(lat2)
    d_phi = math.radians(lat2 - lat1)
    d_lambda = math.radians(lon2 - lon1)

    a = (
        math.sin(d_phi / 2) ** 2
        + math.cos(phi1) * math.cos(phi2) * math.sin(d_lambda / 2) ** 2
    )
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
    return EARTH_RADIUS_KM * c


class IGeolocationResolver(ABC):
    """Geolocation resolver interface - application layer"""

    @abstractmethod
    async def resolve(self, ip: str) -> Location:
        """
        Resolve an IP address to a location.

        Must never raise: lookup failures resolve to UNKNOWN_LOCATION so
        geolocation can never block authentication.
        """
        pass
