# tests/conftest.py
import os

os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ.setdefault("ALLOWED_EMAIL_DOMAINS", '["acme.com"]')

import httpx
import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from account_service import models
from account_service.database import Base, get_db
from account_service.main import app


class FakeUserStore:
    """In-memory UserStore keyed by email."""

    def __init__(self):
        self.users = {}
        self.inserted = []

    async def find_by_email(self, email):
        return self.users.get(email)

    async def insert(self, user):
        db_user = models.User(
            id=len(self.users),
            name=user.name,
            lastname=user.lastname,
            email=user.email,
            hashed_password="hashed:" + user.password,
        )
        self.users[user.email] = db_user
        self.inserted.append(db_user)
        return db_user


@pytest.fixture
def candidate_data():
    return {
        "name": "Jakub",
        "lastname": "Kaiser",
        "email": "kuba@acme.com",
        "password": "111111111111",
    }


@pytest.fixture
def fake_store():
    return FakeUserStore()


@pytest_asyncio.fixture
async def db_engine(tmp_path):
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'accounts.db'}")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(db_engine):
    return async_sessionmaker(db_engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture
async def db(session_factory):
    async with session_factory() as session:
        yield session


@pytest_asyncio.fixture
async def client(session_factory):
    async def override_get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()
