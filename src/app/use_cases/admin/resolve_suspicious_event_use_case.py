"""
Use Case: Resolve Suspicious Event

Marks a security log entry as handled by an operator.
"""

import logging
from uuid import UUID

from src.app.services.unit_of_work import UnitOfWork
from src.domain.base import utcnow
from src.libs.result import Error, Result, Return
from .dtos import SuspiciousEventView

logger = logging.getLogger(__name__)


class ResolveSuspiciousEventUseCase:
    """
    Resolve a suspicious event.

    Business Logic:
    1. Validate event exists
    2. Set resolved, resolved_by, resolved_at (only resolution fields change)
    3. Commit and return the event

    Resolving an already-resolved event overwrites the resolver and time.
    """

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(self, event_id: UUID, resolved_by: str) -> Result[SuspiciousEventView]:
        async with self.uow:
            event = await self.uow.suspicious_events.get_by_id(event_id)
            if event is None:
                return Return.err(Error("EVENT_NOT_FOUND", "Event not found"))

            event.resolve(resolved_by, utcnow())
            event = await self.uow.suspicious_events.update(event)

            await self.uow.commit()

        logger.info(f"Suspicious event {event_id} resolved by {resolved_by}")
        return Return.ok(SuspiciousEventView.from_entity(event))
