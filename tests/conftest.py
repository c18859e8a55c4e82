import sys
import os
from datetime import datetime, timedelta, timezone
from typing import AsyncGenerator

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker
from sqlalchemy.pool import NullPool

# Ensure project root is on sys.path so `import core` works
ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), '..'))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)

from core.clock import Clock
from database.base import Base
from database.models import Appointment, File, User
from services.jobs.queue import InMemoryJobQueue
from services.notifications import NotificationDispatcher
from services.scheduling import SchedulingEngine


# Fixed "now" for scheduling tests: 2024-06-01 09:30 UTC
NOW = datetime(2024, 6, 1, 9, 30, tzinfo=timezone.utc)
SLOT = datetime(2024, 6, 1, 14, 0, tzinfo=timezone.utc)


class FrozenClock(Clock):
    """Clock that only moves when told to."""

    def __init__(self, current: datetime):
        self.current = current

    def now(self) -> datetime:
        return self.current

    def set(self, current: datetime) -> None:
        self.current = current


@pytest_asyncio.fixture(scope="function")
async def async_engine(tmp_path):
    """File-backed SQLite so every session gets its own connection."""
    engine = create_async_engine(
        f"sqlite+aiosqlite:///{tmp_path / 'slotbook_test.db'}",
        echo=False,
        poolclass=NullPool,
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest_asyncio.fixture(scope="function")
async def session_factory(async_engine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(
        async_engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )


@pytest_asyncio.fixture(scope="function")
async def db_session(session_factory) -> AsyncGenerator[AsyncSession, None]:
    """Create database session for tests."""
    async with session_factory() as session:
        yield session
        await session.rollback()


@pytest.fixture
def clock() -> FrozenClock:
    return FrozenClock(NOW)


@pytest.fixture
def job_queue() -> InMemoryJobQueue:
    return InMemoryJobQueue()


@pytest.fixture
def scheduling_engine(session_factory, job_queue, clock) -> SchedulingEngine:
    return SchedulingEngine(
        session_factory=session_factory,
        job_queue=job_queue,
        notifications=NotificationDispatcher("UTC"),
        clock=clock,
        lead_time=timedelta(hours=2),
        page_size=20,
    )


async def _add_user(session: AsyncSession, **kwargs) -> User:
    user = User(**kwargs)
    session.add(user)
    await session.commit()
    await session.refresh(user)
    return user


@pytest_asyncio.fixture
async def customer(db_session: AsyncSession) -> User:
    return await _add_user(db_session, name="Alice Customer", email="alice@example.com", provider=False)


@pytest_asyncio.fixture
async def other_customer(db_session: AsyncSession) -> User:
    return await _add_user(db_session, name="Bob Customer", email="bob@example.com", provider=False)


@pytest_asyncio.fixture
async def provider(db_session: AsyncSession) -> User:
    avatar = File(name="avatar.png", path="abc123-avatar.png")
    db_session.add(avatar)
    await db_session.flush()
    return await _add_user(
        db_session,
        name="Paula Provider",
        email="paula@example.com",
        provider=True,
        avatar_id=avatar.id,
    )


@pytest_asyncio.fixture
async def make_appointment(db_session: AsyncSession):
    """Insert an appointment row directly, bypassing the booking rules."""

    async def _make(customer_id: int, provider_id: int, scheduled_at: datetime, canceled_at=None) -> Appointment:
        appointment = Appointment(
            customer_id=customer_id,
            provider_id=provider_id,
            scheduled_at=scheduled_at,
            canceled_at=canceled_at,
        )
        db_session.add(appointment)
        await db_session.commit()
        return appointment

    return _make
