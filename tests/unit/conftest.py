from unittest.mock import AsyncMock, MagicMock

import pytest

from src.adapter.services.memory_counter_store import InMemoryCounterStore
from src.domain.entities import Account
from tests.fixtures.fakes import PASSWORD_HASH, FakeClock


def _returns_argument():
    return AsyncMock(side_effect=lambda entity: entity)


def _bump_attempts(challenge):
    challenge.attempts += 1
    return challenge.attempts


@pytest.fixture
def mock_uow():
    """Mock UnitOfWork with all repositories"""
    uow = MagicMock()
    uow.__aenter__ = AsyncMock(return_value=uow)
    uow.__aexit__ = AsyncMock(return_value=False)  # Must return False to not suppress exceptions
    uow.commit = AsyncMock()
    uow.rollback = AsyncMock()

    uow.accounts = MagicMock()
    uow.accounts.get_by_email = AsyncMock(return_value=None)
    uow.accounts.get_by_id = AsyncMock(return_value=None)
    uow.accounts.create = _returns_argument()
    uow.accounts.update = _returns_argument()
    uow.accounts.count_locked = AsyncMock(return_value=0)

    uow.account_devices = MagicMock()
    uow.account_devices.get_by_account = AsyncMock(return_value=[])
    uow.account_devices.create = _returns_argument()

    uow.account_locations = MagicMock()
    uow.account_locations.get_by_account = AsyncMock(return_value=[])
    uow.account_locations.create = _returns_argument()

    uow.login_attempts = MagicMock()
    uow.login_attempts.create = _returns_argument()
    uow.login_attempts.update = _returns_argument()
    uow.login_attempts.get_by_id = AsyncMock(return_value=None)

    uow.challenges = MagicMock()
    uow.challenges.create = _returns_argument()
    uow.challenges.increment_attempts = AsyncMock(side_effect=_bump_attempts)
    uow.challenges.delete = AsyncMock()
    uow.challenges.get_active_by_login_attempt = AsyncMock(return_value=None)

    uow.suspicious_events = MagicMock()
    uow.suspicious_events.create = _returns_argument()
    uow.suspicious_events.update = _returns_argument()
    uow.suspicious_events.get_by_id = AsyncMock(return_value=None)

    return uow


@pytest.fixture
def counters():
    return InMemoryCounterStore(clock=FakeClock())


@pytest.fixture
def notifications():
    dispatcher = MagicMock()
    dispatcher.send_challenge_code = MagicMock()
    dispatcher.send_high_risk_alert = MagicMock()
    dispatcher.send_lock_alert = MagicMock()
    return dispatcher


@pytest.fixture
def account():
    return Account(
        email="user@example.com",
        password_hash=PASSWORD_HASH,
        first_name="Ada",
        last_name="Lovelace",
    )
