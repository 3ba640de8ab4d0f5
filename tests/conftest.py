"""Shared fixtures: in-memory SQLite database, users, HTTP client."""

import os
import sys
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", "api"))
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")

import uuid
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from db.database import Base
import models  # noqa: F401  (registers tables on Base.metadata)
from models.user import User


@pytest_asyncio.fixture
async def db_engine():
    """Fresh in-memory database per test."""
    engine = create_async_engine("sqlite+aiosqlite://", poolclass=StaticPool)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture
async def db(db_engine) -> AsyncSession:
    session_factory = async_sessionmaker(db_engine, expire_on_commit=False)
    async with session_factory() as session:
        yield session


@pytest_asyncio.fixture
async def make_user(db):
    """Factory for stored users; verified, non-admin by default."""
    async def _make(**overrides) -> User:
        data = {
            "id": uuid.uuid4(),
            "full_name": "Asha Patel",
            "email": f"{uuid.uuid4().hex[:8]}@example.com",
            "phone": "+919800000000",
            "phone_verified": True,
            "is_admin": False,
        }
        data.update(overrides)
        user = User(**data)
        db.add(user)
        await db.commit()
        return user

    return _make


@pytest_asyncio.fixture
async def client(db_engine):
    """HTTP client bound to the app with get_db pointed at the test database."""
    import httpx
    from main import app
    from db.database import get_db

    session_factory = async_sessionmaker(db_engine, expire_on_commit=False)

    async def _get_test_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = _get_test_db
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as c:
        yield c
    app.dependency_overrides.clear()
