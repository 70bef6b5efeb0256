from typing import Optional

from pydantic import BaseModel


class AuthPolicy(BaseModel):
    """Thresholds and durations driving the login decision"""

    model_config = {"frozen": True}

    velocity_limit: int = 5
    velocity_window_seconds: int = 3600
    ip_blacklist_seconds: int = 3600
    failed_login_lock_minutes: int = 30
    high_risk_lock_minutes: int = 60

    otp_length: int = 6
    otp_ttl_seconds: int = 600
    otp_max_attempts: int = 3

    risk_timezone: str = "UTC"
    location_match_radius_km: Optional[float] = None

    session_expire_minutes: int = 60

    @classmethod
    def from_config(cls, config) -> "AuthPolicy":
        return cls(
            velocity_limit=config.VELOCITY_LIMIT,
            velocity_window_seconds=config.VELOCITY_WINDOW_SECONDS,
            ip_blacklist_seconds=config.IP_BLACKLIST_SECONDS,
            failed_login_lock_minutes=config.FAILED_LOGIN_LOCK_MINUTES,
            high_risk_lock_minutes=config.HIGH_RISK_LOCK_MINUTES,
            otp_length=config.OTP_LENGTH,
            otp_ttl_seconds=config.OTP_TTL_SECONDS,
            otp_max_attempts=config.OTP_MAX_ATTEMPTS,
            risk_timezone=config.RISK_TIMEZONE,
            location_match_radius_km=config.LOCATION_MATCH_RADIUS_KM,
            session_expire_minutes=config.JWT_EXPIRE_MINUTES,
        )
