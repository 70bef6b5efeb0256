"""
Risk Scoring Engine

Additive, deterministic scoring of a login attempt against the account's
login history. The engine performs no I/O; callers supply the history.

Risk Score: 0-30 (safe), 31-70 (warning), 71-100 (critical)
"""

from datetime import UTC, datetime, timedelta
from typing import List, Optional, Tuple
from zoneinfo import ZoneInfo

from pydantic import BaseModel, Field

from src.domain.entities import RiskLevel

from .geolocation import Location, PRIVATE_LOCATION, UNKNOWN, haversine_km

NEW_DEVICE_POINTS = 30
NEW_LOCATION_POINTS = 25
IMPOSSIBLE_TRAVEL_POINTS = 40
ODD_HOUR_POINTS = 10
FAILED_ATTEMPT_POINTS = 5
FAILED_ATTEMPTS_MAX_POINTS = 15
FLAGGED_IP_POINTS = 20
DEVICE_AND_LOCATION_POINTS = 15

MAX_SCORE = 100
SAFE_MAX = 30
WARNING_MAX = 70

ODD_HOURS = frozenset({2, 3, 4})
TRAVEL_MIN_MINUTES = 5
TRAVEL_MAX_MINUTES = 1440
MAX_TRAVEL_SPEED_KMH = 900
IP_REPUTATION_WINDOW = timedelta(days=30)

REASON_DESCRIPTIONS = {
    "new_device": "Login from a new or unrecognized device",
    "new_location": "Login from a new geographic location",
    "impossible_travel": "Impossible travel detected (too fast between locations)",
    "odd_login_time": "Login at unusual time of day",
    "flagged_ip": "IP address previously flagged as suspicious",
    "new_device_and_location_combination": "New device and location combination",
    "velocity_limit_exceeded": "Too many login attempts in short time",
    "brute_force": "Repeated failed logins from the same IP address",
}


class KnownDevice(BaseModel):
    device_fingerprint: str


class KnownLocation(BaseModel):
    ip: str
    city: str
    country: str
    latitude: float = 0.0
    longitude: float = 0.0
    seen_at: datetime


class LastLogin(BaseModel):
    timestamp: datetime
    ip: Optional[str] = None
    city: Optional[str] = None
    country: Optional[str] = None
    latitude: float = 0.0
    longitude: float = 0.0


class LoginHistory(BaseModel):
    """Account history the score is evaluated against"""

    last_login: Optional[LastLogin] = None
    device_history: List[KnownDevice] = Field(default_factory=list)
    location_history: List[KnownLocation] = Field(default_factory=list)


class RiskContext(BaseModel):
    """Signals captured from the current login request"""

    ip: str
    user_agent: str = ""
    device_fingerprint: str
    current_location: Location
    timestamp: datetime
    failed_attempts_before_success: int = 0


class RiskFactors(BaseModel):
    is_new_device: bool = False
    is_new_location: bool = False
    is_impossible_travel: bool = False
    is_odd_login_time: bool = False
    failed_attempts: int = 0
    is_ip_flagged: bool = False
    distance_km: Optional[float] = None
    speed_kmh: Optional[float] = None


class RiskAssessment(BaseModel):
    risk_score: int
    risk_level: RiskLevel
    reasons: List[str]
    factors: RiskFactors


def risk_level_for(score: int) -> RiskLevel:
    """Pure mapping from score to level"""
    if score <= SAFE_MAX:
        return RiskLevel.safe
    if score <= WARNING_MAX:
        return RiskLevel.warning
    return RiskLevel.critical


def describe_reason(reason: str) -> str:
    """Human-readable description of a reason tag"""
    if reason.startswith("failed_attempts_"):
        count = reason.rsplit("_", 1)[-1]
        return f"{count} failed login attempt(s) before success"
    return REASON_DESCRIPTIONS.get(reason, reason)


def _as_utc(value: datetime) -> datetime:
    # Naive timestamps are UTC throughout the service
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


def _has_coordinates(country: Optional[str]) -> bool:
    return country not in (None, UNKNOWN, PRIVATE_LOCATION.country)


class RiskEngine:
    """
    Scores a login attempt.

    Business Rules:
    - Each factor is evaluated independently, summed and capped at 100
    - New device / new location only count when the history is non-empty,
      so a first-ever login is not penalized
    - Impossible travel needs a previous login 5 to 1440 minutes ago and an
      implied speed above 900 km/h
    - Odd hours are evaluated in the configured time zone (UTC by default)
    - Locations match on (country, city) unless a match radius is configured
    """

    def __init__(
        self,
        timezone: str = "UTC",
        location_match_radius_km: Optional[float] = None,
    ):
        self.timezone = ZoneInfo(timezone)
        self.location_match_radius_km = location_match_radius_km

    def score(self, context: RiskContext, history: LoginHistory) -> RiskAssessment:
        score = 0
        reasons: List[str] = []
        factors = RiskFactors()

        # 1. New device (+30)
        factors.is_new_device = not any(
            d.device_fingerprint == context.device_fingerprint
            for d in history.device_history
        )
        if factors.is_new_device and history.device_history:
            score += NEW_DEVICE_POINTS
            reasons.append("new_device")

        # 2. New location (+25)
        factors.is_new_location = not self._is_known_location(
            context.current_location, history.location_history
        )
        if factors.is_new_location and history.location_history:
            score += NEW_LOCATION_POINTS
            reasons.append("new_location")

        # 3. Impossible travel (+40)
        travel = self._travel(history.last_login, context)
        if travel is not None:
            factors.distance_km, factors.speed_kmh = travel
            factors.is_impossible_travel = factors.speed_kmh > MAX_TRAVEL_SPEED_KMH
        if factors.is_impossible_travel:
            score += IMPOSSIBLE_TRAVEL_POINTS
            reasons.append("impossible_travel")

        # 4. Odd login time (+10)
        factors.is_odd_login_time = self.is_odd_hour(context.timestamp)
        if factors.is_odd_login_time:
            score += ODD_HOUR_POINTS
            reasons.append("odd_login_time")

        # 5. Failed attempts before success (+5 each, max 15)
        failed = max(context.failed_attempts_before_success, 0)
        factors.failed_attempts = failed
        if failed > 0:
            score += min(failed * FAILED_ATTEMPT_POINTS, FAILED_ATTEMPTS_MAX_POINTS)
            reasons.append(f"failed_attempts_{failed}")

        # 6. IP reputation (+20)
        factors.is_ip_flagged = self._is_ip_flagged(context, history.location_history)
        if factors.is_ip_flagged:
            score += FLAGGED_IP_POINTS
            reasons.append("flagged_ip")

        # 7. New device and new location together (+15)
        if "new_device" in reasons and "new_location" in reasons:
            score += DEVICE_AND_LOCATION_POINTS
            reasons.append("new_device_and_location_combination")

        score = max(0, min(score, MAX_SCORE))

        return RiskAssessment(
            risk_score=score,
            risk_level=risk_level_for(score),
            reasons=reasons,
            factors=factors,
        )

    def is_odd_hour(self, timestamp: datetime) -> bool:
        return _as_utc(timestamp).astimezone(self.timezone).hour in ODD_HOURS

    def is_impossible_travel(
        self, last_login: Optional[LastLogin], context: RiskContext
    ) -> bool:
        travel = self._travel(last_login, context)
        return travel is not None and travel[1] > MAX_TRAVEL_SPEED_KMH

    def _travel(
        self, last_login: Optional[LastLogin], context: RiskContext
    ) -> Optional[Tuple[float, float]]:
        """(distance_km, speed_kmh) when the pair of logins is comparable"""
        if last_login is None or last_login.timestamp is None:
            return None

        elapsed = _as_utc(context.timestamp) - _as_utc(last_login.timestamp)
        minutes = elapsed.total_seconds() / 60
        if minutes < TRAVEL_MIN_MINUTES or minutes > TRAVEL_MAX_MINUTES:
            return None

        current = context.current_location
        if not _has_coordinates(last_login.country):
            return None
        if not _has_coordinates(current.country):
            return None

        distance = haversine_km(
            last_login.latitude,
            last_login.longitude,
            current.latitude,
            current.longitude,
        )
        speed = distance / (minutes / 60)
        return distance, speed

    def _is_known_location(
        self, current: Location, history: List[KnownLocation]
    ) -> bool:
        if self.location_match_radius_km is None:
            return any(
                loc.country == current.country and loc.city == current.city
                for loc in history
            )
        return any(
            haversine_km(loc.latitude, loc.longitude, current.latitude, current.longitude)
            <= self.location_match_radius_km
            for loc in history
        )

    def _is_ip_flagged(
        self, context: RiskContext, history: List[KnownLocation]
    ) -> bool:
        cutoff = _as_utc(context.timestamp) - IP_REPUTATION_WINDOW
        return any(
            loc.ip == context.ip and _as_utc(loc.seen_at) > cutoff for loc in history
        )

