"""
Admin Use Case DTOs (Data Transfer Objects)

Read models returned by the security administration use cases.
"""

import math
from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel

from src.domain.entities import Account, LoginAttempt, SuspiciousEvent


class Pagination(BaseModel):
    page: int
    limit: int
    total: int
    pages: int

    @classmethod
    def build(cls, page: int, limit: int, total: int) -> "Pagination":
        return cls(page=page, limit=limit, total=total, pages=math.ceil(total / limit) if limit else 0)


class LoginAttemptView(BaseModel):
    id: str
    account_id: Optional[str] = None
    email: str
    ip: str
    user_agent: str
    browser: Optional[str] = None
    os: Optional[str] = None
    device_type: Optional[str] = None
    device_name: Optional[str] = None
    city: str
    country: str
    latitude: float
    longitude: float
    risk_score: int
    risk_level: str
    reasons: List[str]
    is_new_device: bool
    is_new_location: bool
    is_impossible_travel: bool
    is_odd_login_time: bool
    status: str
    otp_sent: bool
    otp_verified: bool
    ip_rate_limited: bool
    user_rate_limited: bool
    timestamp: datetime
    login_time: str

    @classmethod
    def from_entity(cls, attempt: LoginAttempt) -> "LoginAttemptView":
        return cls(
            id=str(attempt.id),
            account_id=str(attempt.account_id) if attempt.account_id else None,
            email=attempt.email,
            ip=attempt.ip,
            user_agent=attempt.user_agent,
            browser=attempt.browser,
            os=attempt.os,
            device_type=attempt.device_type,
            device_name=attempt.device_name,
            city=attempt.city,
            country=attempt.country,
            latitude=attempt.latitude,
            longitude=attempt.longitude,
            risk_score=attempt.risk_score,
            risk_level=attempt.risk_level.value,
            reasons=list(attempt.reasons or []),
            is_new_device=attempt.is_new_device,
            is_new_location=attempt.is_new_location,
            is_impossible_travel=attempt.is_impossible_travel,
            is_odd_login_time=attempt.is_odd_login_time,
            status=attempt.status.value,
            otp_sent=attempt.otp_sent,
            otp_verified=attempt.otp_verified,
            ip_rate_limited=attempt.ip_rate_limited,
            user_rate_limited=attempt.user_rate_limited,
            timestamp=attempt.timestamp,
            login_time=attempt.login_time,
        )


class SuspiciousEventView(BaseModel):
    id: str
    account_id: Optional[str] = None
    email: Optional[str] = None
    type: str
    severity: str
    details: Dict[str, Any]
    ip: Optional[str] = None
    city: Optional[str] = None
    country: Optional[str] = None
    resolved: bool
    resolved_at: Optional[datetime] = None
    resolved_by: Optional[str] = None
    timestamp: datetime

    @classmethod
    def from_entity(cls, event: SuspiciousEvent) -> "SuspiciousEventView":
        return cls(
            id=str(event.id),
            account_id=str(event.account_id) if event.account_id else None,
            email=event.email,
            type=event.type.value,
            severity=event.severity.value,
            details=event.details or {},
            ip=event.ip,
            city=event.city,
            country=event.country,
            resolved=event.resolved,
            resolved_at=event.resolved_at,
            resolved_by=event.resolved_by,
            timestamp=event.timestamp,
        )


class AccountView(BaseModel):
    """Account as seen by an administrator (no credential material)"""

    id: str
    email: str
    first_name: str
    last_name: str
    is_locked: bool
    lock_until: Optional[datetime] = None
    lock_reason: Optional[str] = None
    failed_attempts: int
    last_login_at: Optional[datetime] = None
    last_login_ip: Optional[str] = None
    last_login_city: Optional[str] = None
    last_login_country: Optional[str] = None
    created_at: datetime

    @classmethod
    def from_entity(cls, account: Account) -> "AccountView":
        return cls(
            id=str(account.id),
            email=account.email,
            first_name=account.first_name,
            last_name=account.last_name,
            is_locked=account.is_locked,
            lock_until=account.lock_until,
            lock_reason=account.lock_reason,
            failed_attempts=account.failed_attempts,
            last_login_at=account.last_login_at,
            last_login_ip=account.last_login_ip,
            last_login_city=account.last_login_city,
            last_login_country=account.last_login_country,
            created_at=account.created_at,
        )


class LoginAttemptPage(BaseModel):
    data: List[LoginAttemptView]
    pagination: Pagination


class SuspiciousEventPage(BaseModel):
    data: List[SuspiciousEventView]
    pagination: Pagination


class AccountDetailsResponse(BaseModel):
    account: AccountView
    login_history: List[LoginAttemptView]
    suspicious_events: List[SuspiciousEventView]


class LoginAttemptCounts(BaseModel):
    total: int
    last_hour: int
    last_24_hours: int
    last_7_days: int


class SuspiciousEventCounts(BaseModel):
    total: int
    unresolved: int


class CountryCount(BaseModel):
    country: str
    count: int


class HourlyCount(BaseModel):
    hour: str  # "YYYY-MM-DD HH:00" (UTC)
    count: int


class DashboardStatsResponse(BaseModel):
    login_attempts: LoginAttemptCounts
    risk_distribution: Dict[str, int]
    status_distribution: Dict[str, int]
    top_countries: List[CountryCount]
    suspicious_events: SuspiciousEventCounts
    high_risk_attempts: int
    locked_accounts: int
    hourly_attempts: List[HourlyCount]


class LocationMarker(BaseModel):
    lat: float
    lng: float
    risk_level: str
    status: str
    email: str
    city: str
    country: str


class LocationDataResponse(BaseModel):
    markers: List[LocationMarker]
