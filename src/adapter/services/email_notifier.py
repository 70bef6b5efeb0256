import logging
from typing import Optional

import httpx

from src.app.services.notifier import HighRiskAlert, INotifier

logger = logging.getLogger(__name__)

CHALLENGE_SUBJECT = "Your verification code - do not share"
HIGH_RISK_SUBJECT = "Suspicious login blocked on your account"
LOCK_SUBJECT = "Your account has been locked"


def challenge_body(code: str) -> str:
    return (
        "<h2>Security Verification</h2>"
        "<p>We detected a login attempt from a new device or location.</p>"
        f"<p>Your one-time code is: <strong>{code}</strong></p>"
        "<p>This code expires in 10 minutes. Never share it with anyone.</p>"
    )


def high_risk_body(alert: HighRiskAlert) -> str:
    return (
        "<h2>Suspicious Login Detected</h2>"
        "<p>A high-risk login attempt on your account was blocked.</p>"
        f"<p><strong>Location:</strong> {alert.city}, {alert.country}<br>"
        f"<strong>Device:</strong> {alert.device}<br>"
        f"<strong>Time:</strong> {alert.timestamp}</p>"
        "<p>If this wasn't you, change your password immediately.</p>"
    )


def lock_body(reason: str) -> str:
    return (
        "<h2>Account Locked</h2>"
        "<p>Your account has been temporarily locked for security reasons.</p>"
        f"<p><strong>Reason:</strong> {reason}</p>"
        "<p>Contact support if you believe this is a mistake.</p>"
    )


class LogNotifier(INotifier):
    """Development notifier: writes notifications to the log instead of sending them"""

    async def send_challenge_code(self, email: str, code: str) -> None:
        logger.info(f"[email] challenge code for {email}: {code}")

    async def send_high_risk_alert(self, email: str, alert: HighRiskAlert) -> None:
        logger.info(
            f"[email] high risk alert for {email}: {alert.city}, {alert.country} "
            f"via {alert.device} at {alert.timestamp}"
        )

    async def send_lock_alert(self, email: str, reason: str) -> None:
        logger.info(f"[email] lock alert for {email}: {reason}")


class HttpEmailNotifier(INotifier):
    """Sends HTML email through a transactional email HTTP API (Brevo-style payload)"""

    def __init__(
        self,
        api_url: str,
        api_key: str,
        sender: str,
        sender_name: str = "Risk Auth Security",
        client: Optional[httpx.AsyncClient] = None,
    ):
        self.api_url = api_url
        self.api_key = api_key
        self.sender = sender
        self.sender_name = sender_name
        self.client = client

    async def send_challenge_code(self, email: str, code: str) -> None:
        await self._send(email, CHALLENGE_SUBJECT, challenge_body(code))

    async def send_high_risk_alert(self, email: str, alert: HighRiskAlert) -> None:
        await self._send(email, HIGH_RISK_SUBJECT, high_risk_body(alert))

    async def send_lock_alert(self, email: str, reason: str) -> None:
        await self._send(email, LOCK_SUBJECT, lock_body(reason))

    async def _send(self, to_email: str, subject: str, html: str) -> None:
        headers = {
            "accept": "application/json",
            "api-key": self.api_key,
            "content-type": "application/json",
        }
        data = {
            "sender": {"name": self.sender_name, "email": self.sender},
            "to": [{"email": to_email}],
            "subject": subject,
            "htmlContent": html,
        }

        if self.client is not None:
            response = await self.client.post(self.api_url, json=data, headers=headers)
        else:
            async with httpx.AsyncClient() as client:
                response = await client.post(self.api_url, json=data, headers=headers)

        # Raised errors are retried by the NotificationDispatcher
        response.raise_for_status()
