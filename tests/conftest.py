"""Shared fixtures.

Environment is configured before ``inkwell`` is imported so the cached
settings, cipher and token service pick up test values.
"""

import os

os.environ["ENVIRONMENT"] = "test"
os.environ["JWT_SECRET"] = "test-secret"
os.environ["JWT_EXPIRES_IN"] = "1h"
os.environ["AES_SECRET_KEY"] = "12345678901234567890123456789012"
os.environ["AES_IV"] = "1234567890123456"
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["RATE_LIMIT_ENABLED"] = "false"

from collections.abc import AsyncGenerator  # noqa: E402
from datetime import timedelta  # noqa: E402

import pytest  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from inkwell.core.encryption import Cipher  # noqa: E402
from inkwell.core.security import TokenService  # noqa: E402
from inkwell.models.database import close_db, create_tables, init_db  # noqa: E402
from inkwell.services.users import UserPublic, UserService  # noqa: E402

TEST_KEY = os.environ["AES_SECRET_KEY"]
TEST_IV = os.environ["AES_IV"]
TEST_PASSWORD = "TestPass123"


@pytest.fixture
async def db_engine() -> AsyncGenerator[AsyncEngine, None]:
    """Fresh in-memory database per test."""
    engine = init_db(
        "sqlite+aiosqlite:///:memory:",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    await create_tables()
    yield engine
    await close_db()


@pytest.fixture
async def db(db_engine: AsyncEngine) -> AsyncGenerator[AsyncSession, None]:
    async with AsyncSession(db_engine, expire_on_commit=False) as session:
        yield session


@pytest.fixture
def cipher() -> Cipher:
    return Cipher(TEST_KEY, TEST_IV)


@pytest.fixture
def tokens() -> TokenService:
    return TokenService("test-secret", expires_in=timedelta(hours=1))


@pytest.fixture
async def owner(db: AsyncSession) -> UserPublic:
    return await UserService(db).register("owner@example.com", TEST_PASSWORD)


@pytest.fixture
async def stranger(db: AsyncSession) -> UserPublic:
    return await UserService(db).register("stranger@example.com", TEST_PASSWORD)


@pytest.fixture
async def client(db_engine: AsyncEngine) -> AsyncGenerator[AsyncClient, None]:
    """HTTP client against a fresh app bound to the test database."""
    from inkwell.api.main import create_app

    app = create_app()
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as c:
        yield c
