"""
Device Fingerprint Generator

Derives a device identity from request metadata.

The fingerprint is a heuristic: every input is client-controlled, so it can
be spoofed by replaying the same user agent, IP and accept-language. It
identifies "the same looking client", it does not authenticate a device.
"""

import hashlib
import logging

from pydantic import BaseModel
from user_agents import parse as parse_ua

logger = logging.getLogger(__name__)

UNKNOWN = "Unknown"


class DeviceInfo(BaseModel):
    """Parsed user agent details"""

    browser: str = UNKNOWN
    browser_version: str = UNKNOWN
    os: str = UNKNOWN
    os_version: str = UNKNOWN
    device_type: str = "desktop"
    device_name: str = "Desktop Device"


def _known(value: str) -> str:
    # ua-parser reports unmatched families as "Other"
    if not value or value == "Other":
        return UNKNOWN
    return value


def _device_type(ua) -> str:
    if ua.is_tablet:
        return "tablet"
    if ua.is_mobile:
        return "mobile"
    if ua.is_bot:
        return "bot"
    return "desktop"


def parse_user_agent(user_agent: str) -> DeviceInfo:
    """Parse a user agent string, falling back to Unknown for every field"""
    if not user_agent:
        return DeviceInfo()

    try:
        ua = parse_ua(user_agent)
    except Exception as e:
        logger.warning(f"Failed to parse user agent: {e}")
        return DeviceInfo()

    device_type = _device_type(ua)
    device_name = UNKNOWN
    if device_type == "desktop":
        device_name = "Desktop Device"
    else:
        brand = ua.device.brand or ""
        model = ua.device.model or ""
        device_name = _known(" ".join(p for p in (brand, model) if p))

    return DeviceInfo(
        browser=_known(ua.browser.family),
        browser_version=ua.browser.version_string or UNKNOWN,
        os=_known(ua.os.family),
        os_version=ua.os.version_string or UNKNOWN,
        device_type=device_type,
        device_name=device_name,
    )


def generate_fingerprint(user_agent: str, ip: str, accept_language: str) -> str:
    """SHA-256 hex digest of user agent + IP + accept-language, in that order"""
    raw = f"{user_agent or ''}{ip or ''}{accept_language or ''}"
    return hashlib.sha256(raw.encode("utf-8")).hexdigest()
