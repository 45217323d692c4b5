from __future__ import annotations

import asyncio
import os
from collections.abc import AsyncIterator, Iterator
from pathlib import Path

# Settings are cached on first import, so test configuration goes in first
os.environ.setdefault("APP_ENV", "test")
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("REDIS_URL", "redis://127.0.0.1:6399/0")
os.environ.setdefault("PASSWORD_HASH_ROUNDS", "4")

import pytest
from fastapi.testclient import TestClient
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import NullPool

from pulse.api.deps import get_db_session
from pulse.api.main import app
from pulse.infrastructure.db.base import Base
from pulse.infrastructure.db.models import AccountRole
from tests.utils import ADMIN_EMAIL, ADMIN_PASSWORD, seed_account


@pytest.fixture(scope="session")
def loop() -> Iterator[asyncio.AbstractEventLoop]:
    loop = asyncio.new_event_loop()
    yield loop
    loop.close()


async def _create_schema(engine: AsyncEngine) -> None:
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


@pytest.fixture()
def session_factory(
    loop: asyncio.AbstractEventLoop, tmp_path: Path
) -> Iterator[async_sessionmaker[AsyncSession]]:
    engine = create_async_engine(
        f"sqlite+aiosqlite:///{tmp_path / 'pulse.db'}", poolclass=NullPool
    )
    factory = async_sessionmaker(engine, expire_on_commit=False)
    loop.run_until_complete(_create_schema(engine))
    yield factory
    loop.run_until_complete(engine.dispose())


@pytest.fixture()
def test_client(session_factory: async_sessionmaker[AsyncSession]) -> Iterator[TestClient]:
    async def override_db_session() -> AsyncIterator[AsyncSession]:
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db_session] = override_db_session
    with TestClient(app) as client:
        client.session_factory = session_factory  # type: ignore
        yield client
    app.dependency_overrides.pop(get_db_session, None)


@pytest.fixture()
async def async_client(test_client: TestClient) -> AsyncIterator[AsyncClient]:
    """Async HTTP client for testing async routes."""
    transport = ASGITransport(app=app)  # type: ignore
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest.fixture()
async def db(session_factory: async_sessionmaker[AsyncSession]) -> AsyncIterator[AsyncSession]:
    """Provide a database session for tests that need direct DB access."""
    async with session_factory() as session:
        yield session


@pytest.fixture()
def admin_client(test_client: TestClient, loop: asyncio.AbstractEventLoop) -> TestClient:
    """Test client logged in as a platform admin."""
    loop.run_until_complete(
        seed_account(
            test_client.session_factory,  # type: ignore
            ADMIN_EMAIL,
            ADMIN_PASSWORD,
            role=AccountRole.ADMIN,
        )
    )
    response = test_client.post("/hr/login", json={"email": ADMIN_EMAIL, "password": ADMIN_PASSWORD})
    assert response.status_code == 200
    return test_client
