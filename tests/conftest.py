import pytest
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlalchemy.orm import sessionmaker

from email_validation.domain.user import User
from email_validation.infrastructure.db.models import Base
from email_validation.infrastructure.email.mock import MockNotificationSender
from email_validation.infrastructure.repositories import get_repositories

LINK_TEMPLATE = "https://cms.example.com/validate-email/{0}"


@pytest.fixture
async def session_factory():
    """An AsyncSession factory bound to a fresh in-memory SQLite database."""
    engine = create_async_engine("sqlite+aiosqlite:///:memory:", echo=False)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    AsyncSessionLocal = sessionmaker(engine, expire_on_commit=False, class_=AsyncSession)
    try:
        yield AsyncSessionLocal
    finally:
        await engine.dispose()


@pytest.fixture
async def db_session(session_factory):
    async with session_factory() as session:
        yield session


@pytest.fixture
def sender():
    return MockNotificationSender()


async def create_user_direct(session, email: str = "owner@example.com", **fields) -> User:
    """Insert a user through the repository and return the stored domain object."""
    repos = get_repositories(session)
    return await repos["users"].create(User(id=None, email=email, **fields))
