from functools import lru_cache
from uuid import UUID

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlmodel import SQLModel
from sqlmodel.ext.asyncio.session import AsyncSession

from config import ApplicationConfig
from src.adapter.services.email_notifier import HttpEmailNotifier, LogNotifier
from src.adapter.services.ipinfo_geolocation import IpInfoGeolocationResolver
from src.adapter.services.memory_counter_store import InMemoryCounterStore
from src.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from src.api.utils.jwt import verify_jwt
from src.app.services.auth_policy import AuthPolicy
from src.app.services.counter_store import ICounterStore
from src.app.services.geolocation import IGeolocationResolver
from src.app.services.notifier import INotifier, NotificationDispatcher

# Register table metadata before create_all
import src.domain.entities  # noqa: F401

engine = create_async_engine(ApplicationConfig.DB_URI, echo=False, future=True)

AsyncSessionLocal = sessionmaker(
    engine, class_=AsyncSession, expire_on_commit=False, autoflush=False
)

security = HTTPBearer()


async def init_db():
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)


async def shutdown():
    await get_counter_store().close()
    await engine.dispose()


async def get_unit_of_work():
    async with AsyncSessionLocal() as session:
        yield SqlAlchemyUnitOfWork(session)


@lru_cache
def get_counter_store() -> ICounterStore:
    """Process-wide counter store selected by COUNTER_BACKEND"""
    if ApplicationConfig.COUNTER_BACKEND == "redis":
        from redis.asyncio import Redis

        from src.adapter.services.redis_counter_store import RedisCounterStore

        return RedisCounterStore(Redis.from_url(ApplicationConfig.REDIS_URL))
    return InMemoryCounterStore()


@lru_cache
def get_geolocation_resolver() -> IGeolocationResolver:
    return IpInfoGeolocationResolver(
        base_url=ApplicationConfig.GEOLOCATION_URL,
        token=ApplicationConfig.GEOLOCATION_TOKEN,
        timeout_seconds=ApplicationConfig.GEOLOCATION_TIMEOUT_SECONDS,
    )


def build_notifier() -> INotifier:
    if ApplicationConfig.EMAIL_BACKEND == "http":
        return HttpEmailNotifier(
            api_url=ApplicationConfig.EMAIL_API_URL,
            api_key=ApplicationConfig.EMAIL_API_KEY,
            sender=ApplicationConfig.EMAIL_SENDER,
        )
    return LogNotifier()


@lru_cache
def get_notification_dispatcher() -> NotificationDispatcher:
    return NotificationDispatcher(
        build_notifier(),
        max_retries=ApplicationConfig.NOTIFY_MAX_RETRIES,
        retry_delay_seconds=ApplicationConfig.NOTIFY_RETRY_DELAY_SECONDS,
    )


@lru_cache
def get_auth_policy() -> AuthPolicy:
    return AuthPolicy.from_config(ApplicationConfig)


async def get_current_account_id(
    credentials: HTTPAuthorizationCredentials = Depends(security),
) -> UUID:
    """
    Dependency to extract and verify the session token from Authorization header.

    Args:
        credentials: Bearer token from Authorization header

    Returns:
        Account UUID from the token

    Raises:
        HTTPException: 401 if token is invalid or expired
    """
    token = credentials.credentials
    payload = verify_jwt(token)

    if payload is None or "account_id" not in payload:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired token",
        )

    try:
        return UUID(payload["account_id"])
    except ValueError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired token",
        )
