"""Pytest configuration for all tests."""

import os

# Cheap hashing and a fixed signing secret; must be set before settings load.
os.environ.setdefault("SCHOOLBASE_ENVIRONMENT", "testing")
os.environ.setdefault("SCHOOLBASE_SESSION_SECRET", "test-secret-key-for-schoolbase-tests")
os.environ.setdefault("SCHOOLBASE_PASSWORD_HASH_TIME_COST", "1")
os.environ.setdefault("SCHOOLBASE_PASSWORD_HASH_MEMORY_COST", "1024")
os.environ.setdefault("SCHOOLBASE_PASSWORD_HASH_PARALLELISM", "1")

from typing import AsyncGenerator  # noqa: E402
from unittest.mock import AsyncMock  # noqa: E402

import email_validator  # noqa: E402
import pytest  # noqa: E402
import pytest_asyncio  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
from sqlalchemy.ext.asyncio import (  # noqa: E402
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool  # noqa: E402

from factories import PASSWORD, create_school, token_for  # noqa: E402
from schoolbase.domain.entities import Role  # noqa: E402
from schoolbase.domain.services import SuperadminService  # noqa: E402
from schoolbase.infrastructure.persistence import models  # noqa: E402, F401
from schoolbase.infrastructure.persistence.database import (  # noqa: E402
    Base,
    configure_sqlite_engine,
)
from schoolbase.infrastructure.services.email_service import EmailService  # noqa: E402

# Fixture accounts live under the reserved .test domain.
email_validator.TEST_ENVIRONMENT = True


@pytest_asyncio.fixture
async def db_session() -> AsyncGenerator[AsyncSession, None]:
    """Create a test database session.

    Uses an in-memory SQLite database for testing.
    """
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
        echo=False,
    )
    configure_sqlite_engine(engine)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    session_factory = async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )
    async with session_factory() as session:
        yield session
        await session.rollback()

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest.fixture
def mailer() -> AsyncMock:
    """Mail service double that records every code it is asked to send."""
    service = AsyncMock(spec=EmailService)
    service.send_verification_code.return_value = True
    service.send_two_factor_code.return_value = True
    return service


@pytest_asyncio.fixture
async def client(db_session: AsyncSession, mailer: AsyncMock) -> AsyncGenerator[AsyncClient, None]:
    """Create a test client with overridden database and mail dependencies."""
    from schoolbase.infrastructure.api.app import app
    from schoolbase.infrastructure.api.dependencies import get_email_service
    from schoolbase.infrastructure.persistence.database import get_db_session

    app.dependency_overrides[get_db_session] = lambda: db_session
    app.dependency_overrides[get_email_service] = lambda: mailer

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac

    app.dependency_overrides = {}


@pytest_asyncio.fixture
async def superadmin(db_session: AsyncSession) -> dict[str, str]:
    """A verified superadmin and a session token for it."""
    email = "root@schoolbase.test"
    user_id = await SuperadminService.create_superadmin(
        email=email, password=PASSWORD, session=db_session
    )
    return {"id": user_id, "email": email, "token": token_for(user_id, Role.SUPERADMIN)}


@pytest_asyncio.fixture
async def school(db_session: AsyncSession) -> dict[str, str]:
    return await create_school(db_session)
