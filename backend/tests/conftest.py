"""Shared fixtures: a throwaway SQLite database per test and an authenticated API client"""
import os
import sys

# Add parent directory to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import httpx
import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import create_async_engine, async_sessionmaker, AsyncSession
from sqlalchemy.pool import NullPool

from app.database import Base, get_db
from app.main import app
from app.models import Broker, Property, PropertyOwner, PropertyType
from app.services.activity_log import ActivityLogger, get_activity_logger
from app.services.auth import AuthService, get_password_hash


@pytest_asyncio.fixture
async def engine(tmp_path):
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}", poolclass=NullPool)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_maker(engine):
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False, autoflush=False)


@pytest_asyncio.fixture
async def db(session_maker):
    async with session_maker() as session:
        yield session


async def _create_broker(session_maker, name: str, email: str) -> Broker:
    async with session_maker() as session:
        broker = Broker(name=name, email=email, hashed_password=get_password_hash("Password123"))
        session.add(broker)
        await session.commit()
        await session.refresh(broker)
        return broker


@pytest_asyncio.fixture
async def broker(session_maker):
    return await _create_broker(session_maker, "Asha Mehta", "asha@example.com")


@pytest_asyncio.fixture
async def other_broker(session_maker):
    return await _create_broker(session_maker, "Kiran Rao", "kiran@example.com")


@pytest.fixture
def activity_logger(session_maker):
    return ActivityLogger(session_maker)


@pytest.fixture
def make_property(session_maker):
    """Insert a listing directly; defaults to a Rajkot plot"""
    async def _make(broker, owners=(), **fields):
        fields.setdefault("property_type", PropertyType.PLOT)
        fields.setdefault("city", "Rajkot")
        async with session_maker() as session:
            prop = Property(broker_id=broker.id, **fields)
            session.add(prop)
            await session.flush()
            for owner in owners:
                session.add(PropertyOwner(property_id=prop.id, broker_id=broker.id, **owner))
            await session.commit()
            return prop.id
    return _make


@pytest_asyncio.fixture
async def client(session_maker, activity_logger):
    async def override_get_db():
        async with session_maker() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_activity_logger] = lambda: activity_logger

    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


def bearer(broker: Broker) -> dict:
    return {"Authorization": f"Bearer {AuthService.create_access_token(broker)}"}


@pytest.fixture
def auth_headers(broker):
    return bearer(broker)


@pytest.fixture
def other_auth_headers(other_broker):
    return bearer(other_broker)
