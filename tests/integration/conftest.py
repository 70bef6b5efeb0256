import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlmodel import SQLModel
from sqlmodel.ext.asyncio.session import AsyncSession

import src.domain.entities  # noqa: F401
from config import ApplicationConfig
from src.adapter.services.memory_counter_store import InMemoryCounterStore
from src.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from src.app.services.auth_policy import AuthPolicy
from src.app.services.notifier import NotificationDispatcher
from src.depends import (
    get_auth_policy,
    get_counter_store,
    get_geolocation_resolver,
    get_notification_dispatcher,
    get_unit_of_work,
)
from tests.fixtures.api_client import BERGEN_IP, SYDNEY_IP
from tests.fixtures.fakes import BERGEN, OSLO, SYDNEY, OutboxNotifier, StaticGeolocation


@pytest_asyncio.fixture
async def engine():
    engine = create_async_engine("sqlite+aiosqlite:///./test.db")
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.drop_all)
    await engine.dispose()


@pytest_asyncio.fixture
async def db_session(engine):
    Session = sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    async with Session() as session:
        yield session


@pytest.fixture
def counters():
    return InMemoryCounterStore()


@pytest.fixture
def geolocation():
    return StaticGeolocation(
        OSLO, by_ip={BERGEN_IP: BERGEN, SYDNEY_IP: SYDNEY}
    )


@pytest.fixture
def notifier():
    return OutboxNotifier()


@pytest.fixture
def dispatcher(notifier):
    return NotificationDispatcher(notifier, retry_delay_seconds=0)


@pytest_asyncio.fixture
async def client(db_session, counters, geolocation, dispatcher):
    from src.api.app import create_app

    app = create_app(ApplicationConfig)

    async def override_get_unit_of_work():
        yield SqlAlchemyUnitOfWork(db_session)

    app.dependency_overrides[get_unit_of_work] = override_get_unit_of_work
    app.dependency_overrides[get_counter_store] = lambda: counters
    app.dependency_overrides[get_geolocation_resolver] = lambda: geolocation
    app.dependency_overrides[get_notification_dispatcher] = lambda: dispatcher
    app.dependency_overrides[get_auth_policy] = lambda: AuthPolicy()

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    await dispatcher.drain()


@pytest.fixture
def admin_headers():
    return {"X-Admin-API-Key": ApplicationConfig.ADMIN_API_KEY}
