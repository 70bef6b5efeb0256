"""
Use Cases

Organized into domain folders:
- auth/: Registration, login decision, step-up verification
- admin/: Security administration (audit trail, events, unlocks, stats)

Import from subdirectories for better organization.
"""

from .auth import (
    GetCurrentAccountUseCase,
    LoginUseCase,
    RegisterUseCase,
    VerifyChallengeUseCase,
)
from .admin import (
    DashboardStatsUseCase,
    GetAccountDetailsUseCase,
    ListLoginAttemptsUseCase,
    ListSuspiciousEventsUseCase,
    LocationDataUseCase,
    ResolveSuspiciousEventUseCase,
    UnlockAccountUseCase,
)

__all__ = [
    # Auth
    "RegisterUseCase",
    "LoginUseCase",
    "VerifyChallengeUseCase",
    "GetCurrentAccountUseCase",
    # Admin
    "ListLoginAttemptsUseCase",
    "ListSuspiciousEventsUseCase",
    "ResolveSuspiciousEventUseCase",
    "UnlockAccountUseCase",
    "GetAccountDetailsUseCase",
    "DashboardStatsUseCase",
    "LocationDataUseCase",
]
