"""
Risk Auth Domain Enums

All enumeration types used across domain entities.
"""

from enum import Enum


class RiskLevel(str, Enum):
    """Risk classification derived from the risk score"""

    safe = "safe"
    warning = "warning"
    critical = "critical"


class LoginStatus(str, Enum):
    """Terminal (or pending step-up) status of a login attempt"""

    success = "success"
    failed = "failed"
    blocked = "blocked"
    otp_pending = "otp_pending"
    otp_verified = "otp_verified"


class SuspiciousEventType(str, Enum):
    """Security log entry types"""

    brute_force = "brute_force"
    impossible_travel = "impossible_travel"
    new_device = "new_device"
    new_location = "new_location"
    velocity_limit_exceeded = "velocity_limit_exceeded"
    account_locked = "account_locked"
    high_risk_login = "high_risk_login"
    odd_login_time = "odd_login_time"


class Severity(str, Enum):
    """Suspicious event severity"""

    low = "low"
    medium = "medium"
    high = "high"
    critical = "critical"
