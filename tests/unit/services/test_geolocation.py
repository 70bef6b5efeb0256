import httpx
import pytest

from src.adapter.services.ipinfo_geolocation import IpInfoGeolocationResolver
from src.app.services.geolocation import (
    PRIVATE_LOCATION,
    UNKNOWN_LOCATION,
    Location,
    haversine_km,
    is_private_ip,
)


def resolver_for(handler) -> IpInfoGeolocationResolver:
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return IpInfoGeolocationResolver(base_url="https://ipinfo.test", token="secret", client=client)


@pytest.mark.parametrize(
    "ip",
    ["10.1.2.3", "172.16.0.1", "172.31.255.255", "192.168.1.1", "127.0.0.1", "169.254.1.1", "::1", "fd00::1", "fe80::1", "::ffff:192.168.0.1"],
)
def test_private_ranges(ip):
    assert is_private_ip(ip) is True


@pytest.mark.parametrize("ip", ["8.8.8.8", "172.32.0.1", "2001:4860:4860::8888", "not-an-ip", ""])
def test_public_or_invalid_addresses_are_not_private(ip):
    assert is_private_ip(ip) is False


def test_haversine_known_distance():
    # London -> Paris is roughly 344 km
    assert haversine_km(51.5074, -0.1278, 48.8566, 2.3522) == pytest.approx(344, abs=5)
    assert haversine_km(10.0, 10.0, 10.0, 10.0) == 0


@pytest.mark.asyncio
async def test_private_ip_short_circuits_without_lookup():
    def handler(request):
        raise AssertionError("private IPs must not be looked up")

    location = await resolver_for(handler).resolve("192.168.0.10")

    assert location == PRIVATE_LOCATION
    assert location.city == "Local"
    assert location.country == "Private Network"


@pytest.mark.asyncio
async def test_public_ip_is_resolved():
    seen = {}

    def handler(request):
        seen["url"] = str(request.url)
        return httpx.Response(
            200, json={"ip": "8.8.8.8", "city": "Mountain View", "country": "US", "loc": "37.4056,-122.0775"}
        )

    location = await resolver_for(handler).resolve("8.8.8.8")

    assert location == Location(
        city="Mountain View", country="US", latitude=37.4056, longitude=-122.0775
    )
    assert seen["url"] == "https://ipinfo.test/8.8.8.8?token=secret"


@pytest.mark.asyncio
async def test_missing_fields_fall_back_to_unknown():
    def handler(request):
        return httpx.Response(200, json={"ip": "8.8.8.8"})

    location = await resolver_for(handler).resolve("8.8.8.8")

    assert location == UNKNOWN_LOCATION


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "payload",
    [
        {"city": "Paris", "country": "FR"},
        {"city": "Paris", "country": "FR", "loc": "garbage"},
        {"city": "Paris", "country": "FR", "loc": "48.85"},
        {"city": "Paris", "country": "FR", "loc": "95.0,2.35"},
        {"city": "Paris", "country": "FR", "loc": [48.85, 2.35]},
        {"country": "FR", "loc": "48.85,2.35"},
        {"city": "Paris", "country": "", "loc": "48.85,2.35"},
    ],
)
async def test_incomplete_payload_resolves_to_unknown(payload):
    location = await resolver_for(lambda request: httpx.Response(200, json=payload)).resolve("8.8.8.8")

    assert location == UNKNOWN_LOCATION


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "payload",
    [
        {"city": 123, "country": "US", "loc": "1,2"},
        {"city": "Paris", "country": {"code": "FR"}, "loc": "48.85,2.35"},
        {"city": None, "country": None, "loc": None},
    ],
)
async def test_wrongly_typed_payload_resolves_to_unknown(payload):
    location = await resolver_for(lambda request: httpx.Response(200, json=payload)).resolve("8.8.8.8")

    assert location == UNKNOWN_LOCATION


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "response",
    [
        httpx.Response(500, text="boom"),
        httpx.Response(429, json={"error": "rate limited"}),
        httpx.Response(200, text="<html>not json</html>"),
        httpx.Response(200, json=["not", "an", "object"]),
    ],
)
async def test_lookup_failures_resolve_to_unknown(response):
    location = await resolver_for(lambda request: response).resolve("8.8.8.8")

    assert location == UNKNOWN_LOCATION


@pytest.mark.asyncio
async def test_transport_error_resolves_to_unknown():
    def handler(request):
        raise httpx.ConnectTimeout("timed out", request=request)

    location = await resolver_for(handler).resolve("8.8.8.8")

    assert location == UNKNOWN_LOCATION


@pytest.mark.asyncio
@pytest.mark.parametrize("ip", ["not-an-ip", "", "999.1.1.1"])
async def test_malformed_ip_is_unknown_without_lookup(ip):
    def handler(request):
        raise AssertionError("malformed IPs must not be looked up")

    location = await resolver_for(handler).resolve(ip)

    assert location == UNKNOWN_LOCATION
