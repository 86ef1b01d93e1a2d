"""
Shared fixtures.

Each test gets its own SQLite file database so concurrent sessions behave
like separate connections to a real server.
"""
import os

os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ.setdefault("CONTRIBUTION_RETRY_DELAY", "0.01")

from datetime import date
from decimal import Decimal

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from app.core.database import Base, get_async_session
from app.core.security import get_password_hash
from app.main import app
from app.models.account import Account, AccountRole
from app.schemas.milestone import MilestoneCreate
from app.utils import milestones as engine


@pytest.fixture
async def session_factory(tmp_path):
    db_engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'savings.db'}")
    async with db_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield async_sessionmaker(bind=db_engine, expire_on_commit=False, class_=AsyncSession)
    await db_engine.dispose()


@pytest.fixture
async def db(session_factory):
    async with session_factory() as session:
        yield session


@pytest.fixture
async def client(session_factory):
    async def override_session():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_async_session] = override_session
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as http:
        yield http
    app.dependency_overrides.clear()


@pytest.fixture
def account_factory(db):
    async def factory(email="ada@example.com", role=AccountRole.CHILD, password="secret1"):
        account = Account(
            first_name="Ada",
            last_name="Saver",
            email=email,
            password_hash=get_password_hash(password),
            role=role,
            dob=date(2012, 5, 1),
            created_at=date.today(),
        )
        db.add(account)
        await db.commit()
        return account
    return factory


@pytest.fixture
async def account(account_factory):
    return await account_factory()


@pytest.fixture
async def milestone(db, account):
    """Target 200.00, started in the past, nothing saved yet."""
    return await engine.create_milestone(
        MilestoneCreate(
            user_id=account.id,
            name="New Bike",
            target_amount=Decimal("200.00"),
            start_date=date(2024, 1, 15),
        ),
        db,
    )
