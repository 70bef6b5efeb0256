"""
Dashboard Stats Use Case

Aggregate counters for the security dashboard.
"""

from collections import Counter
from datetime import datetime, timedelta
from typing import Callable

from src.app.services.unit_of_work import UnitOfWork
from src.domain.base import utcnow
from src.domain.entities import RiskLevel
from src.libs.result import Result, Return
from .dtos import (
    CountryCount,
    DashboardStatsResponse,
    HourlyCount,
    LoginAttemptCounts,
    SuspiciousEventCounts,
)

TOP_COUNTRIES = 10
HOURLY_SAMPLE_LIMIT = 10000


class DashboardStatsUseCase:
    """
    Business Rules:
    - Attempt counts for all time, last hour, last 24 hours and last 7 days
    - Risk level and status distributions over all attempts
    - Top 10 countries by attempt count
    - Hourly attempt buckets over the last 24 hours (UTC)
    - Locked accounts counts only locks still in effect
    """

    def __init__(self, uow: UnitOfWork, clock: Callable[[], datetime] = utcnow):
        self.uow = uow
        self.clock = clock

    async def execute(self) -> Result[DashboardStatsResponse]:
        now = self.clock()
        last_hour = now - timedelta(hours=1)
        last_24_hours = now - timedelta(hours=24)
        last_7_days = now - timedelta(days=7)

        async with self.uow:
            attempts = self.uow.login_attempts

            counts = LoginAttemptCounts(
                total=await attempts.count(),
                last_hour=await attempts.count(since=last_hour),
                last_24_hours=await attempts.count(since=last_24_hours),
                last_7_days=await attempts.count(since=last_7_days),
            )

            by_country = await attempts.count_grouped("country")
            top_countries = sorted(by_country.items(), key=lambda item: (-item[1], item[0]))

            recent = await attempts.get_since(last_24_hours, limit=HOURLY_SAMPLE_LIMIT)
            hourly = Counter(a.timestamp.strftime("%Y-%m-%d %H:00") for a in recent)

            return Return.ok(
                DashboardStatsResponse(
                    login_attempts=counts,
                    risk_distribution=await attempts.count_grouped("risk_level"),
                    status_distribution=await attempts.count_grouped("status"),
                    top_countries=[
                        CountryCount(country=country, count=count)
                        for country, count in top_countries[:TOP_COUNTRIES]
                    ],
                    suspicious_events=SuspiciousEventCounts(
                        total=await self.uow.suspicious_events.count(),
                        unresolved=await self.uow.suspicious_events.count(resolved=False),
                    ),
                    high_risk_attempts=await attempts.count(risk_level=RiskLevel.critical),
                    locked_accounts=await self.uow.accounts.count_locked(now),
                    hourly_attempts=[
                        HourlyCount(hour=hour, count=count)
                        for hour, count in sorted(hourly.items())
                    ],
                )
            )
