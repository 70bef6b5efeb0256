"""
Request Metadata

Network and device context captured from the HTTP request for the login
decision.
"""

import ipaddress
from typing import Iterable, Optional

from fastapi import Request
from pydantic import BaseModel

from config import ApplicationConfig

UNKNOWN_IP = "0.0.0.0"


class RequestMetadata(BaseModel):
    ip: str
    user_agent: str = ""
    accept_language: str = ""


def _valid_ip(value: Optional[str]) -> Optional[str]:
    if not value:
        return None
    value = value.strip()
    try:
        return str(ipaddress.ip_address(value))
    except ValueError:
        return None


def _is_trusted_proxy(host: str, trusted_proxies: Iterable[str]) -> bool:
    try:
        address = ipaddress.ip_address(host)
    except ValueError:
        return False
    for proxy in trusted_proxies:
        try:
            if address in ipaddress.ip_network(proxy, strict=False):
                return True
        except ValueError:
            continue
    return False


def client_ip(request: Request, trusted_proxies: Optional[Iterable[str]] = None) -> str:
    """
    Client IP: first X-Forwarded-For hop, then X-Real-IP, then the peer.

    Forwarding headers are only honoured when the peer itself is one of
    the trusted proxies, and values that are not IP addresses are ignored.
    """
    if trusted_proxies is None:
        trusted_proxies = ApplicationConfig.TRUSTED_PROXIES

    peer = _valid_ip(request.client.host if request.client else None)

    if peer is not None and _is_trusted_proxy(peer, trusted_proxies):
        forwarded_for = request.headers.get("x-forwarded-for")
        if forwarded_for:
            first = _valid_ip(forwarded_for.split(",")[0])
            if first:
                return first

        real_ip = _valid_ip(request.headers.get("x-real-ip"))
        if real_ip:
            return real_ip

    return peer or UNKNOWN_IP


def get_request_metadata(request: Request) -> RequestMetadata:
    return RequestMetadata(
        ip=client_ip(request),
        user_agent=request.headers.get("user-agent", ""),
        accept_language=request.headers.get("accept-language", ""),
    )
