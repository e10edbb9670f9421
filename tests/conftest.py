"""
Shared fixtures: an in-memory SQLite database rebuilt for every test and a
handful of users, one per role.
"""

import os

# Settings are cached on first import; point them at the test database first
os.environ["ENV_MODE"] = "test"
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["TOKEN_SECRET"] = "test-secret"

import pytest
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from eats.core.security import hash_password
from eats.database import Base
from eats.models import User, UserRole
from eats.services.notifications import BaseNotificationService, NotificationResult

TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"
PASSWORD = "secret-password"


@pytest.fixture
async def engine():
    engine = create_async_engine(
        TEST_DATABASE_URL,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest.fixture
async def db(engine):
    session_maker = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    async with session_maker() as session:
        yield session


async def make_user(db: AsyncSession, email: str, role: UserRole) -> User:
    user = User(email=email, password_hash=hash_password(PASSWORD), role=role)
    db.add(user)
    await db.commit()
    return user


@pytest.fixture
async def owner(db):
    return await make_user(db, "owner@eats.io", UserRole.OWNER)


@pytest.fixture
async def other_owner(db):
    return await make_user(db, "rival@eats.io", UserRole.OWNER)


@pytest.fixture
async def client_user(db):
    return await make_user(db, "client@eats.io", UserRole.CLIENT)


@pytest.fixture
async def driver(db):
    return await make_user(db, "driver@eats.io", UserRole.DELIVERY)


class RecordingNotifier(BaseNotificationService):
    """Keeps every event in memory instead of publishing it."""

    def __init__(self):
        self.events = []

    @property
    def provider_name(self) -> str:
        return "recording"

    async def notify_new_order(self, order, owner_id):
        self.events.append(("new_order", order.id, owner_id))
        return NotificationResult(success=True, provider=self.provider_name)

    async def notify_order_status(self, order):
        self.events.append(("status", order.id, order.status))
        return NotificationResult(success=True, provider=self.provider_name)

    async def health_check(self) -> bool:
        return True


@pytest.fixture
def notifier():
    return RecordingNotifier()
