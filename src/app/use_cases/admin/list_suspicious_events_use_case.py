from typing import Optional

from src.app.services.unit_of_work import UnitOfWork
from src.domain.entities import Severity, SuspiciousEventType
from src.libs.result import Result, Return
from .dtos import Pagination, SuspiciousEventPage, SuspiciousEventView


class ListSuspiciousEventsUseCase:
    """
    List suspicious events for the admin console.

    Newest first, optionally filtered by severity, type and resolution state.
    """

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(
        self,
        page: int = 1,
        limit: int = 50,
        severity: Optional[Severity] = None,
        type: Optional[SuspiciousEventType] = None,
        resolved: Optional[bool] = None,
    ) -> Result[SuspiciousEventPage]:
        async with self.uow:
            events, total = await self.uow.suspicious_events.list_filtered(
                severity=severity,
                type=type,
                resolved=resolved,
                offset=(page - 1) * limit,
                limit=limit,
            )

            return Return.ok(
                SuspiciousEventPage(
                    data=[SuspiciousEventView.from_entity(e) for e in events],
                    pagination=Pagination.build(page, limit, total),
                )
            )
