from datetime import datetime, timedelta
from typing import Callable

from src.app.services.unit_of_work import UnitOfWork
from src.domain.base import utcnow
from src.libs.result import Result, Return
from .dtos import LocationDataResponse, LocationMarker

WINDOW = timedelta(hours=24)
MARKER_LIMIT = 1000


class LocationDataUseCase:
    """Map markers for login attempts in the last 24 hours with known coordinates"""

    def __init__(self, uow: UnitOfWork, clock: Callable[[], datetime] = utcnow):
        self.uow = uow
        self.clock = clock

    async def execute(self) -> Result[LocationDataResponse]:
        since = self.clock() - WINDOW

        async with self.uow:
            attempts = await self.uow.login_attempts.get_since(since, limit=MARKER_LIMIT)

            # 0,0 is the unresolved-location placeholder
            markers = [
                LocationMarker(
                    lat=a.latitude,
                    lng=a.longitude,
                    risk_level=a.risk_level.value,
                    status=a.status.value,
                    email=a.email,
                    city=a.city,
                    country=a.country,
                )
                for a in attempts
                if a.latitude and a.longitude
            ]
            return Return.ok(LocationDataResponse(markers=markers))
