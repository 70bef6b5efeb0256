"""
Risk Auth Domain Entities

All domain entities organized by model.
Each entity in its own file for better maintainability.
"""

# Export all enums
from .enums import (
    RiskLevel,
    LoginStatus,
    SuspiciousEventType,
    Severity,
)

# Export all entities
from .account import Account
from .account_device import AccountDevice
from .account_location import AccountLocation
from .login_attempt import LoginAttempt
from .challenge import Challenge
from .suspicious_event import SuspiciousEvent

__all__ = [
    # Enums
    "RiskLevel",
    "LoginStatus",
    "SuspiciousEventType",
    "Severity",
    # Entities
    "Account",
    "AccountDevice",
    "AccountLocation",
    "LoginAttempt",
    "Challenge",
    "SuspiciousEvent",
]
