"""Shared test fixtures — async SQLite in-memory DB + test client."""

import os

os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite://")
os.environ.setdefault("JWT_SECRET_KEY", "test-only-jwt-secret")
os.environ.setdefault("CLIENT_URL", "http://portal.test")

from collections.abc import AsyncGenerator  # noqa: E402

import pytest  # noqa: E402
from fakeredis import FakeServer  # noqa: E402
from fakeredis import aioredis as fake_aioredis  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
from sqlalchemy.ext.asyncio import AsyncSession  # noqa: E402
from sqlalchemy.orm import sessionmaker  # noqa: E402
from sqlmodel import SQLModel  # noqa: E402

# Import all models so metadata is populated
import app.models  # noqa: E402, F401
from app.core import cache  # noqa: E402
from app.core.database import build_engine, get_session  # noqa: E402
from app.main import app  # noqa: E402
from app.services.broker import NotificationBroker, get_broker  # noqa: E402


@pytest.fixture
async def engine():
    eng = build_engine("sqlite+aiosqlite://")
    async with eng.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)
    yield eng
    await eng.dispose()


@pytest.fixture
def test_session_factory(engine):
    """Session factory bound to the test SQLite engine."""
    return sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
async def session(test_session_factory) -> AsyncGenerator[AsyncSession, None]:
    async with test_session_factory() as sess:
        yield sess
        await sess.rollback()


@pytest.fixture
def redis_server() -> FakeServer:
    """One in-memory Redis shared by every broker of a test."""
    return FakeServer()


@pytest.fixture
async def broker_factory(redis_server):
    """Build brokers sharing one Redis, like separate worker processes."""
    made: list[NotificationBroker] = []

    def _make() -> NotificationBroker:
        hub = NotificationBroker(
            redis=fake_aioredis.FakeRedis(server=redis_server, decode_responses=True)
        )
        made.append(hub)
        return hub

    yield _make
    for hub in made:
        await hub.aclose()


@pytest.fixture
def broker(broker_factory) -> NotificationBroker:
    """The broker the app under test publishes through."""
    return broker_factory()


@pytest.fixture
async def client(session, broker) -> AsyncGenerator[AsyncClient, None]:
    """HTTPX async test client with DB session override."""

    async def _override_session():
        yield session

    app.dependency_overrides[get_session] = _override_session
    app.dependency_overrides[get_broker] = lambda: broker
    cache.clear()

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()
    cache.clear()
