"""Test fixtures — a fresh database per test and an app with a controllable clock.

Learn: Testing pattern for async SQLAlchemy + FastAPI:

1. Each test gets its own engine with the schema created from models.py.
   By default that is an in-memory SQLite DB (aiosqlite + StaticPool, so
   every session sees the same connection); set ODYSSEY_TEST_DATABASE_URL
   to run against PostgreSQL instead.
2. get_db is overridden so each request opens its own session on that
   engine, exactly like production.
3. get_token_codec is overridden with a codec whose clock is a FakeClock,
   so expiry tests move time instead of sleeping.
"""

import os

# Must be set before odyssey.config builds its settings singleton.
os.environ.setdefault("ODYSSEY_DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("ODYSSEY_JWT_SECRET", "test-secret-0123456789abcdef0123456789")

from datetime import datetime, timedelta, timezone

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from odyssey.auth import password
from odyssey.auth.tokens import TokenCodec, get_token_codec
from odyssey.config import settings
from odyssey.db.engine import get_db
from odyssey.db.models import Base
from odyssey.main import app

TEST_DB_URL = os.environ.get("ODYSSEY_TEST_DATABASE_URL", settings.database_url)
TEST_KEY = b"unit-test-signing-key-0123456789abcdef"


class FakeClock:
    """Callable clock that only moves when told to."""

    def __init__(self, start: datetime | None = None):
        self.now = start or datetime(2026, 1, 1, 12, 0, 0, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now += timedelta(**kwargs)


@pytest.fixture(autouse=True)
def fast_bcrypt(monkeypatch):
    """Minimum bcrypt work factor — hashing is not what these tests measure."""
    monkeypatch.setattr(password, "BCRYPT_ROUNDS", 4)


@pytest.fixture()
def clock():
    return FakeClock()


@pytest.fixture()
def codec(clock):
    return TokenCodec(key=TEST_KEY, ttl=timedelta(hours=1), clock=clock)


@pytest_asyncio.fixture()
async def db_engine():
    kwargs = {}
    if TEST_DB_URL.startswith("sqlite"):
        kwargs = {"poolclass": StaticPool, "connect_args": {"check_same_thread": False}}
    engine = create_async_engine(TEST_DB_URL, echo=False, **kwargs)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
        await conn.run_sync(Base.metadata.create_all)
    try:
        yield engine
    finally:
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.drop_all)
        await engine.dispose()


@pytest_asyncio.fixture()
async def session_factory(db_engine):
    return async_sessionmaker(db_engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture()
async def db_session(session_factory):
    """Session for calling services directly (no HTTP)."""
    async with session_factory() as session:
        yield session


@pytest_asyncio.fixture()
async def client(session_factory, codec):
    """HTTP client running the real auth pipeline against the test DB."""

    async def override_get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_token_codec] = lambda: codec

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()
