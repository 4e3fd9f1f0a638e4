"""Shared pytest fixtures."""

import os
import time

os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite://")
os.environ.setdefault("PINATA_API_KEY", "test-pinata-key")
os.environ.setdefault("TENDERLY_ADMIN_RPC", "https://rpc.tenderly.test/admin")

import httpx
import pytest
import pytest_asyncio
from eth_account import Account
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from memez.api.deps import get_http_client
from memez.database import Base, get_db
from memez.main import app
from memez.models import Message

from factories import MEMECOIN


@pytest.fixture
def account():
    return Account.from_key("0x" + "11" * 32)


@pytest.fixture
def other_account():
    return Account.from_key("0x" + "22" * 32)


@pytest_asyncio.fixture
async def engine(tmp_path):
    """File-backed SQLite database so separate sessions see each other."""
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'memez.db'}")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_maker(engine):
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture
async def db(session_maker):
    async with session_maker() as session:
        yield session


@pytest_asyncio.fixture
async def stored_message(session_maker):
    """A message with no likes yet."""
    async with session_maker() as session:
        message = Message(
            id="7b1f6a52-0c1e-4f51-9d3b-2f8f0d6e4a11",
            author="0x1A642f0E3c3aF545E7AcBD38b07251B3990914F1",
            memecoin=MEMECOIN,
            timestamp=int(time.time()),
            message="gm",
            likes=0,
        )
        session.add(message)
        await session.commit()
        return message


@pytest.fixture
def override_http():
    """Route outbound HTTP calls of the app through a mock transport."""
    def _install(handler):
        async def _client():
            async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
                yield client

        app.dependency_overrides[get_http_client] = _client

    yield _install
    app.dependency_overrides.pop(get_http_client, None)


@pytest_asyncio.fixture
async def client(session_maker):
    """HTTP client bound to the app with the test database."""
    async def _get_db():
        async with session_maker() as session:
            yield session

    app.dependency_overrides[get_db] = _get_db
    async with httpx.AsyncClient(
        transport=httpx.ASGITransport(app=app),
        base_url="http://test",
    ) as client:
        yield client
    app.dependency_overrides.pop(get_db, None)
