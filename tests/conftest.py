"""Pytest configuration and fixtures."""

import uuid
from collections.abc import AsyncGenerator
from datetime import UTC, date, datetime

import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from futurely.auth.models import User
from futurely.auth.service import get_async_session
from futurely.core.database import Base
from futurely.letters.models import DeliveryChannelType, Letter, LetterStatus
from futurely.main import app

# Use in-memory SQLite for tests
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


@pytest_asyncio.fixture
async def test_engine():
    """Create a test database engine."""
    engine = create_async_engine(TEST_DATABASE_URL, echo=False)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest_asyncio.fixture
async def test_session(test_engine) -> AsyncGenerator[AsyncSession, None]:
    """Create a test database session."""
    async_session_maker = async_sessionmaker(
        test_engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )
    async with async_session_maker() as session:
        yield session


@pytest_asyncio.fixture
async def client(test_engine) -> AsyncGenerator[AsyncClient, None]:
    """Create an async test client with test database."""
    async_session_maker = async_sessionmaker(
        test_engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )

    async def get_test_session() -> AsyncGenerator[AsyncSession, None]:
        async with async_session_maker() as session:
            yield session

    # Override the session dependency
    app.dependency_overrides[get_async_session] = get_test_session

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest_asyncio.fixture
async def test_user(test_session: AsyncSession) -> User:
    """Create a test user."""
    user = User(
        id=uuid.uuid4(),
        email="vault-test@example.com",
        hashed_password="hashedpassword",
    )
    test_session.add(user)
    await test_session.commit()
    return user


@pytest_asyncio.fixture
async def make_letter(test_session: AsyncSession, test_user: User):
    """Factory fixture that stores a letter for the test user."""

    async def _make_letter(
        *,
        deliver_on: date,
        status: LetterStatus = LetterStatus.SEALED,
        delivery_channel: str = DeliveryChannelType.EMAIL.value,
        body: str = "Remember why you started.",
        recipient_email: str | None = "me@example.com",
        recipient_telegram: str | None = None,
        salutation: str | None = None,
        sign_off: str | None = None,
    ) -> Letter:
        letter = Letter(
            id=uuid.uuid4(),
            user_id=test_user.id,
            status=status,
            body=body,
            salutation=salutation,
            sign_off=sign_off,
            delivery_channel=delivery_channel,
            recipient_email=recipient_email,
            recipient_telegram=recipient_telegram,
            deliver_on=deliver_on,
            created_at=datetime(2025, 1, 15, 9, 30, tzinfo=UTC),
            sealed_at=datetime(2025, 1, 15, 9, 45, tzinfo=UTC)
            if status != LetterStatus.DRAFT
            else None,
        )
        test_session.add(letter)
        await test_session.commit()
        return letter

    return _make_letter
