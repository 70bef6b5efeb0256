"""Admin use cases for security administration operations."""

from .dashboard_stats_use_case import DashboardStatsUseCase
from .get_account_details_use_case import GetAccountDetailsUseCase
from .list_login_attempts_use_case import ListLoginAttemptsUseCase
from .list_suspicious_events_use_case import ListSuspiciousEventsUseCase
from .location_data_use_case import LocationDataUseCase
from .resolve_suspicious_event_use_case import ResolveSuspiciousEventUseCase
from .unlock_account_use_case import UnlockAccountUseCase
from .dtos import (
    AccountDetailsResponse,
    AccountView,
    DashboardStatsResponse,
    LocationDataResponse,
    LocationMarker,
    LoginAttemptPage,
    LoginAttemptView,
    Pagination,
    SuspiciousEventPage,
    SuspiciousEventView,
)

__all__ = [
    "ListLoginAttemptsUseCase",
    "ListSuspiciousEventsUseCase",
    "ResolveSuspiciousEventUseCase",
    "UnlockAccountUseCase",
    "GetAccountDetailsUseCase",
    "DashboardStatsUseCase",
    "LocationDataUseCase",
    "LoginAttemptPage",
    "LoginAttemptView",
    "SuspiciousEventPage",
    "SuspiciousEventView",
    "AccountView",
    "AccountDetailsResponse",
    "DashboardStatsResponse",
    "LocationDataResponse",
    "LocationMarker",
    "Pagination",
]
