"""
Login Use Case

Risk-adaptive authentication decision: turns credentials plus network and
device context into success, step-up challenge, block or failure.
"""

import logging
from datetime import UTC, datetime, timedelta
from typing import Callable, List, Optional

import bcrypt

from src.api.utils.jwt import generate_jwt
from src.app.services.auth_policy import AuthPolicy
from src.app.services.challenge_manager import ChallengeManager
from src.app.services.counter_store import (
    ICounterStore,
    ip_attempts_key,
    ip_blacklist_key,
    user_attempts_key,
)
from src.app.services.device_fingerprint import (
    DeviceInfo,
    generate_fingerprint,
    parse_user_agent,
)
from src.app.services.geolocation import IGeolocationResolver, Location
from src.app.services.notifier import HighRiskAlert, NotificationDispatcher
from src.app.services.risk_engine import (
    KnownDevice,
    KnownLocation,
    LastLogin,
    LoginHistory,
    RiskAssessment,
    RiskContext,
    RiskEngine,
    describe_reason,
)
from src.app.services.unit_of_work import UnitOfWork
from src.domain.base import utcnow
from src.domain.entities import (
    Account,
    LoginAttempt,
    LoginStatus,
    RiskLevel,
    Severity,
    SuspiciousEvent,
    SuspiciousEventType,
)
from src.libs.result import Error, Result, Return
from .dtos import (
    AccountInfo,
    LoginBlockedResponse,
    LoginCommand,
    LoginResponse,
    LoginSuccessResponse,
    StepUpRequiredResponse,
)
from .trusted_login import record_trusted_login

logger = logging.getLogger(__name__)

FAILED_LOGIN_LOCK_REASON = "Multiple failed login attempts"
HIGH_RISK_LOCK_REASON = "High-risk login attempt detected"


def _naive_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value
    return value.astimezone(UTC).replace(tzinfo=None)


def _invalid_credentials() -> Result:
    return Return.err(Error("INVALID_CREDENTIALS", "Invalid email or password"))


class LoginUseCase:
    """
    Use case for risk-adaptive login.

    Business Rules:
    - A blacklisted IP is rejected before anything is read or written
    - Unknown and locked accounts get the same generic failure as a wrong
      password, with a dummy bcrypt check to keep timing uniform
    - Failed credentials count per IP and per email; reaching the velocity
      limit blacklists the IP / locks the account
    - Matching credentials reset the per-email counters, then the risk score
      decides: critical blocks and locks, warning issues a step-up
      challenge, safe grants a session
    - Everything for one attempt is committed in one unit of work;
      the IP blacklist and notifications are applied only after the commit
    """

    def __init__(
        self,
        uow: UnitOfWork,
        counters: ICounterStore,
        geolocation: IGeolocationResolver,
        notifications: NotificationDispatcher,
        policy: Optional[AuthPolicy] = None,
        risk_engine: Optional[RiskEngine] = None,
        challenge_manager: Optional[ChallengeManager] = None,
        clock: Callable[[], datetime] = utcnow,
    ):
        self.uow = uow
        self.counters = counters
        self.geolocation = geolocation
        self.notifications = notifications
        self.policy = policy or AuthPolicy()
        self.risk_engine = risk_engine or RiskEngine(
            timezone=self.policy.risk_timezone,
            location_match_radius_km=self.policy.location_match_radius_km,
        )
        self.challenge_manager = challenge_manager or ChallengeManager(
            length=self.policy.otp_length,
            ttl_seconds=self.policy.otp_ttl_seconds,
            max_attempts=self.policy.otp_max_attempts,
        )
        self.clock = clock

    async def execute(self, command: LoginCommand) -> Result[LoginResponse]:
        """
        Execute login use case.

        Args:
            command: LoginCommand with credentials and request metadata

        Returns:
            Result with LoginSuccessResponse, StepUpRequiredResponse or
            LoginBlockedResponse, or Error(TOO_MANY_ATTEMPTS | INVALID_CREDENTIALS)
        """
        now = _naive_utc(command.timestamp) if command.timestamp else self.clock()
        email = command.email.strip().lower()
        ip = command.ip

        if await self.counters.has_flag(ip_blacklist_key(ip)):
            logger.warning(f"Login rejected for blacklisted IP {ip}")
            return Return.err(
                Error(
                    "TOO_MANY_ATTEMPTS",
                    "Your IP has been temporarily blocked due to multiple failed attempts",
                )
            )

        location = await self.geolocation.resolve(ip)
        device = parse_user_agent(command.user_agent)
        fingerprint = generate_fingerprint(command.user_agent, ip, command.accept_language)

        # Deferred until after commit
        outbox: List[Callable[[], None]] = []
        blacklist: List[str] = []

        async with self.uow:
            account = await self.uow.accounts.get_by_email(email)

            attempt = LoginAttempt(
                account_id=account.id if account else None,
                email=email,
                ip=ip,
                user_agent=command.user_agent,
                device_fingerprint=fingerprint,
                browser=device.browser,
                os=device.os,
                device_type=device.device_type,
                device_name=device.device_name,
                city=location.city,
                country=location.country,
                latitude=location.latitude,
                longitude=location.longitude,
                timestamp=now,
                login_time=now.strftime("%H:%M"),
            )

            if account is None or account.lock_active(now):
                # Hash dummy password to maintain constant time
                bcrypt.checkpw(b"dummy_password", bcrypt.gensalt(12))
                await self._record_failure(attempt, None, location, now, outbox, blacklist)
                await self.uow.commit()
                await self._blacklist(blacklist)
                self._flush(outbox)
                return _invalid_credentials()

            password_valid = bcrypt.checkpw(
                command.password.encode(), account.password_hash.encode()
            )
            if not password_valid:
                await self._record_failure(attempt, account, location, now, outbox, blacklist)
                await self.uow.commit()
                await self._blacklist(blacklist)
                self._flush(outbox)
                return _invalid_credentials()

            response = await self._decide(account, attempt, location, device, now, outbox)
            await self.uow.commit()

        self._flush(outbox)
        return Return.ok(response)

    async def _record_failure(
        self,
        attempt: LoginAttempt,
        account: Optional[Account],
        location: Location,
        now: datetime,
        outbox: List[Callable[[], None]],
        blacklist: List[str],
    ) -> None:
        """Failed credential path: velocity counters, escalation, terminal failed"""
        policy = self.policy
        attempt.status = LoginStatus.failed

        ip_attempts = await self.counters.increment(
            ip_attempts_key(attempt.ip), policy.velocity_window_seconds
        )
        if ip_attempts >= policy.velocity_limit:
            attempt.ip_rate_limited = True
            attempt.risk_score = 100
            attempt.risk_level = RiskLevel.critical
            attempt.reasons = ["velocity_limit_exceeded", "brute_force"]

            blacklist.append(attempt.ip)
            await self.uow.suspicious_events.create(
                self._event(
                    attempt,
                    SuspiciousEventType.brute_force,
                    Severity.critical,
                    {
                        "failed_attempts": ip_attempts,
                        "ip": attempt.ip,
                        "location": location.model_dump(),
                    },
                )
            )
            logger.warning(f"IP {attempt.ip} blacklisted after {ip_attempts} failed logins")

        if account is not None:
            account.failed_attempts += 1
            user_attempts = await self.counters.increment(
                user_attempts_key(account.email), policy.velocity_window_seconds
            )
            if user_attempts >= policy.velocity_limit:
                attempt.user_rate_limited = True
                account.lock(
                    FAILED_LOGIN_LOCK_REASON,
                    now + timedelta(minutes=policy.failed_login_lock_minutes),
                )
                await self.uow.suspicious_events.create(
                    self._event(
                        attempt,
                        SuspiciousEventType.account_locked,
                        Severity.high,
                        {
                            "reason": FAILED_LOGIN_LOCK_REASON,
                            "failed_attempts": user_attempts,
                        },
                    )
                )
                email = account.email
                outbox.append(
                    lambda: self.notifications.send_lock_alert(
                        email, "Multiple failed login attempts detected"
                    )
                )
                logger.warning(f"Account {account.id} locked after {user_attempts} failed logins")

            account.updated_at = utcnow()
            await self.uow.accounts.update(account)

        await self.uow.login_attempts.create(attempt)

    async def _decide(
        self,
        account: Account,
        attempt: LoginAttempt,
        location: Location,
        device: DeviceInfo,
        now: datetime,
        outbox: List[Callable[[], None]],
    ) -> LoginResponse:
        """Credential match: score the attempt and branch on risk level"""
        failed_before = account.failed_attempts
        account.failed_attempts = 0
        await self.counters.delete(user_attempts_key(account.email))
        if account.is_locked:
            # Lock has lapsed
            account.unlock()

        history = await self._load_history(account)
        context = RiskContext(
            ip=attempt.ip,
            user_agent=attempt.user_agent,
            device_fingerprint=attempt.device_fingerprint,
            current_location=location,
            timestamp=now,
            failed_attempts_before_success=failed_before,
        )
        assessment = self.risk_engine.score(context, history)
        self._apply_assessment(attempt, assessment)

        if assessment.factors.is_impossible_travel:
            await self.uow.suspicious_events.create(
                self._event(
                    attempt,
                    SuspiciousEventType.impossible_travel,
                    Severity.high,
                    {
                        "distance_km": assessment.factors.distance_km,
                        "speed_kmh": assessment.factors.speed_kmh,
                        "from_city": account.last_login_city,
                        "from_country": account.last_login_country,
                        "to_city": location.city,
                        "to_country": location.country,
                    },
                )
            )

        account.updated_at = utcnow()
        email = account.email

        if assessment.risk_level == RiskLevel.critical:
            attempt.status = LoginStatus.blocked
            await self.uow.login_attempts.create(attempt)

            account.lock(
                HIGH_RISK_LOCK_REASON,
                now + timedelta(minutes=self.policy.high_risk_lock_minutes),
            )
            await self.uow.accounts.update(account)
            await self.uow.suspicious_events.create(
                self._event(
                    attempt,
                    SuspiciousEventType.high_risk_login,
                    Severity.critical,
                    assessment.model_dump(mode="json"),
                )
            )

            alert = HighRiskAlert(
                city=location.city,
                country=location.country,
                device=device.browser,
                timestamp=now.strftime("%Y-%m-%d %H:%M:%S UTC"),
            )
            outbox.append(lambda: self.notifications.send_high_risk_alert(email, alert))
            logger.warning(
                f"Blocked high-risk login for account {account.id} (score {assessment.risk_score})"
            )
            return LoginBlockedResponse(
                risk_score=assessment.risk_score,
                risk_level=assessment.risk_level.value,
                login_attempt_id=str(attempt.id),
            )

        if assessment.risk_level == RiskLevel.warning:
            attempt.status = LoginStatus.otp_pending
            attempt.otp_sent = True
            await self.uow.login_attempts.create(attempt)
            await self.uow.accounts.update(account)

            code = await self.challenge_manager.issue(self.uow.challenges, attempt, account, now)
            outbox.append(lambda: self.notifications.send_challenge_code(email, code))
            logger.info(
                f"Step-up required for account {account.id} (score {assessment.risk_score})"
            )
            return StepUpRequiredResponse(
                risk_score=assessment.risk_score,
                risk_level=assessment.risk_level.value,
                reasons=assessment.reasons,
                reason_descriptions=[describe_reason(r) for r in assessment.reasons],
                login_attempt_id=str(attempt.id),
            )

        attempt.status = LoginStatus.success
        await self.uow.login_attempts.create(attempt)
        account = await record_trusted_login(self.uow, account, attempt)

        session_token = generate_jwt(
            account.id, account.email, self.policy.session_expire_minutes
        )
        logger.info(f"Login succeeded for account {account.id}")
        return LoginSuccessResponse(
            session_token=session_token,
            risk_score=assessment.risk_score,
            risk_level=assessment.risk_level.value,
            login_attempt_id=str(attempt.id),
            account=AccountInfo.from_account(account),
        )

    async def _load_history(self, account: Account) -> LoginHistory:
        devices = await self.uow.account_devices.get_by_account(account.id)
        locations = await self.uow.account_locations.get_by_account(account.id)

        last_login = None
        if account.last_login_at is not None:
            last_login = LastLogin(
                timestamp=account.last_login_at,
                ip=account.last_login_ip,
                city=account.last_login_city,
                country=account.last_login_country,
                latitude=account.last_login_latitude or 0.0,
                longitude=account.last_login_longitude or 0.0,
            )

        return LoginHistory(
            last_login=last_login,
            device_history=[
                KnownDevice(device_fingerprint=d.device_fingerprint) for d in devices
            ],
            location_history=[
                KnownLocation(
                    ip=loc.ip,
                    city=loc.city,
                    country=loc.country,
                    latitude=loc.latitude,
                    longitude=loc.longitude,
                    seen_at=loc.seen_at,
                )
                for loc in locations
            ],
        )

    @staticmethod
    def _apply_assessment(attempt: LoginAttempt, assessment: RiskAssessment) -> None:
        factors = assessment.factors
        attempt.risk_score = assessment.risk_score
        attempt.risk_level = assessment.risk_level
        attempt.reasons = list(assessment.reasons)
        attempt.risk_factors = factors.model_dump()
        attempt.is_new_device = factors.is_new_device
        attempt.is_new_location = factors.is_new_location
        attempt.is_impossible_travel = factors.is_impossible_travel
        attempt.is_odd_login_time = factors.is_odd_login_time

    @staticmethod
    def _event(
        attempt: LoginAttempt,
        type: SuspiciousEventType,
        severity: Severity,
        details: dict,
    ) -> SuspiciousEvent:
        return SuspiciousEvent(
            account_id=attempt.account_id,
            email=attempt.email,
            type=type,
            severity=severity,
            details=details,
            ip=attempt.ip,
            city=attempt.city,
            country=attempt.country,
            timestamp=attempt.timestamp,
        )

    async def _blacklist(self, ips: List[str]) -> None:
        # Only set once the brute_force event is committed
        for ip in ips:
            await self.counters.set_flag(ip_blacklist_key(ip), self.policy.ip_blacklist_seconds)

    @staticmethod
    def _flush(outbox: List[Callable[[], None]]) -> None:
        for send in outbox:
            send()
