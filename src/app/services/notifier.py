"""
Notifications

Outbound account notifications (step-up codes, security alerts).

Delivery is best-effort: the dispatcher schedules each notification as a
background task after the authentication decision is committed, retries a
bounded number of times, and logs failures without propagating them.
"""

import asyncio
import logging
from abc import ABC, abstractmethod
from typing import Awaitable, Callable, Set

from pydantic import BaseModel

logger = logging.getLogger(__name__)


class HighRiskAlert(BaseModel):
    """Context included in a blocked-login alert"""

    city: str
    country: str
    device: str
    timestamp: str


class INotifier(ABC):
    """Notifier interface - application layer"""

    @abstractmethod
    async def send_challenge_code(self, email: str, code: str) -> None:
        pass

    @abstractmethod
    async def send_high_risk_alert(self, email: str, alert: HighRiskAlert) -> None:
        pass

    @abstractmethod
    async def send_lock_alert(self, email: str, reason: str) -> None:
        pass


class NotificationDispatcher:
    """
    Fire-and-forget wrapper around an INotifier.

    Methods mirror INotifier but return immediately; delivery happens in a
    background task. drain() waits for in-flight deliveries (shutdown, tests).
    """

    def __init__(
        self,
        notifier: INotifier,
        max_retries: int = 3,
        retry_delay_seconds: float = 1.0,
    ):
        self.notifier = notifier
        self.max_retries = max(max_retries, 1)
        self.retry_delay_seconds = retry_delay_seconds
        self._pending: Set[asyncio.Task] = set()

    def send_challenge_code(self, email: str, code: str) -> None:
        self._schedule("challenge_code", email, lambda: self.notifier.send_challenge_code(email, code))

    def send_high_risk_alert(self, email: str, alert: HighRiskAlert) -> None:
        self._schedule("high_risk_alert", email, lambda: self.notifier.send_high_risk_alert(email, alert))

    def send_lock_alert(self, email: str, reason: str) -> None:
        self._schedule("lock_alert", email, lambda: self.notifier.send_lock_alert(email, reason))

    async def drain(self) -> None:
        while self._pending:
            await asyncio.gather(*list(self._pending), return_exceptions=True)

    def _schedule(
        self, kind: str, email: str, send: Callable[[], Awaitable[None]]
    ) -> None:
        task = asyncio.create_task(self._deliver(kind, email, send))
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)

    async def _deliver(
        self, kind: str, email: str, send: Callable[[], Awaitable[None]]
    ) -> None:
        for attempt in range(1, self.max_retries + 1):
            try:
                await send()
                logger.info(f"Notification {kind} delivered to {email}")
                return
            except Exception as e:
                logger.warning(
                    f"Notification {kind} to {email} failed (attempt {attempt}/{self.max_retries}): {e}"
                )
                if attempt < self.max_retries and self.retry_delay_seconds > 0:
                    await asyncio.sleep(self.retry_delay_seconds * attempt)
        logger.error(f"Notification {kind} to {email} dropped after {self.max_retries} attempts")
