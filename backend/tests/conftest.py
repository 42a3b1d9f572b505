"""Shared test configuration and fixtures.

Repository and API tests run against an in-memory SQLite database
(aiosqlite + StaticPool) so the suite needs no PostgreSQL server. Each test
gets a fresh engine with freshly created tables.
"""

import uuid
from collections.abc import AsyncGenerator, Awaitable, Callable

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, create_async_engine
from sqlalchemy.pool import StaticPool

from subs_service.database import Base, get_db
from subs_service.main import app
from subs_service.models.subscription import Subscription
from subs_service.services.periods import parse_month_year

# ---------------------------------------------------------------------------
# Database
# ---------------------------------------------------------------------------


@pytest_asyncio.fixture
async def test_engine() -> AsyncGenerator[AsyncEngine, None]:
    """Create an in-memory engine with all tables."""
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
        echo=False,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest_asyncio.fixture
async def db_session(test_engine: AsyncEngine) -> AsyncGenerator[AsyncSession, None]:
    """Yield a session whose work is rolled back after the test."""
    session = AsyncSession(bind=test_engine, expire_on_commit=False)
    try:
        yield session
    finally:
        await session.rollback()
        await session.close()


@pytest_asyncio.fixture
async def client(db_session: AsyncSession) -> AsyncGenerator[AsyncClient, None]:
    """Provide an httpx AsyncClient wired to use the test DB session."""

    async def override_get_db() -> AsyncGenerator[AsyncSession, None]:
        yield db_session

    app.dependency_overrides[get_db] = override_get_db

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://testserver") as ac:
        yield ac

    app.dependency_overrides.clear()


# ---------------------------------------------------------------------------
# Convenience fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def user_id() -> uuid.UUID:
    return uuid.uuid4()


@pytest.fixture
def make_subscription(
    db_session: AsyncSession,
) -> Callable[..., Awaitable[Subscription]]:
    """Return a helper that inserts a subscription directly in the DB."""

    async def _make(
        *,
        user_id: uuid.UUID,
        service_name: str = "Netflix",
        price: int = 500,
        start: str = "01-2024",
        end: str | None = None,
    ) -> Subscription:
        subscription = Subscription(
            service_name=service_name,
            price=price,
            user_id=user_id,
            start_date=parse_month_year(start),
            end_date=parse_month_year(end) if end else None,
        )
        db_session.add(subscription)
        await db_session.flush()
        return subscription

    return _make
