"""
Trusted Login Side Effects

Shared by the safe login path and step-up verification: once a login is
trusted, its device and location join the account history and the
last-login snapshot moves forward.
"""

from src.app.services.unit_of_work import UnitOfWork
from src.domain.base import utcnow
from src.domain.entities import Account, AccountDevice, AccountLocation, LoginAttempt


async def record_trusted_login(
    uow: UnitOfWork, account: Account, attempt: LoginAttempt, verified: bool = False
) -> Account:
    """
    Apply history updates for a trusted login. Caller commits.

    Args:
        uow: Open unit of work
        account: Account being logged in
        attempt: LoginAttempt carrying the captured context and risk factors
        verified: True when the device passed step-up verification
    """
    if attempt.is_new_device:
        await uow.account_devices.create(
            AccountDevice(
                account_id=account.id,
                device_fingerprint=attempt.device_fingerprint,
                device_name=attempt.device_name,
                browser=attempt.browser,
                os=attempt.os,
                is_verified=verified,
                first_seen_at=attempt.timestamp,
                last_seen_at=attempt.timestamp,
            )
        )

    if attempt.is_new_location:
        await uow.account_locations.create(
            AccountLocation(
                account_id=account.id,
                ip=attempt.ip,
                city=attempt.city,
                country=attempt.country,
                latitude=attempt.latitude,
                longitude=attempt.longitude,
                seen_at=attempt.timestamp,
            )
        )

    account.last_login_at = attempt.timestamp
    account.last_login_ip = attempt.ip
    account.last_login_city = attempt.city
    account.last_login_country = attempt.country
    account.last_login_latitude = attempt.latitude
    account.last_login_longitude = attempt.longitude
    account.updated_at = utcnow()
    return await uow.accounts.update(account)
