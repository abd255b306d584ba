"""Shared fixtures: a fresh SQLite database per test, user factory and HTTP client."""
import os
import tempfile

_TEST_DIR = tempfile.mkdtemp(prefix="coinhub-tests-")
# Settings are read at import time; point them at a throwaway database and no .env file.
os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{os.path.join(_TEST_DIR, 'import.db')}"
os.environ["ENV_FILE"] = os.path.join(_TEST_DIR, "missing.env")

import httpx
import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine
from sqlalchemy.pool import NullPool

from coinhub import models  # noqa: F401
from coinhub.core.db import Base, get_db
from coinhub.core.security import create_access_token, hash_password
from coinhub.main import app
from coinhub.models.user import User

PASSWORD = "secret123"
PASSWORD_HASH = hash_password(PASSWORD)


@pytest_asyncio.fixture
async def engine(tmp_path):
    eng = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'ledger.db'}", poolclass=NullPool)
    async with eng.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield eng
    await eng.dispose()


@pytest.fixture
def session_factory(engine):
    return async_sessionmaker(engine, expire_on_commit=False)


@pytest_asyncio.fixture
async def db(session_factory):
    async with session_factory() as session:
        yield session


@pytest.fixture
def make_user(session_factory):
    counter = {"n": 0}

    async def _make(balance: int = 0, role: str = "user", first_name: str = "Somchai", last_name: str = "Dee") -> User:
        counter["n"] += 1
        async with session_factory() as s:
            user = User(
                email=f"user{counter['n']}@example.com",
                first_name=first_name,
                last_name=last_name,
                password_hash=PASSWORD_HASH,
                role=role,
                balance=balance,
            )
            s.add(user)
            await s.commit()
            return user

    return _make


@pytest_asyncio.fixture
async def client(session_factory):
    async def _get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = _get_db
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture
def auth_headers():
    def _headers(user: User) -> dict:
        return {"Authorization": f"Bearer {create_access_token(user.id, user.role)}"}

    return _headers
