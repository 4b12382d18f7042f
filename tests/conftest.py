"""Shared pytest fixtures for backend tests."""

import os
from typing import AsyncGenerator

# Point settings at SQLite BEFORE importing the app
os.environ.setdefault("DATABASE_URL_OVERRIDE", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("JWT_SECRET", "test-secret")

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from markdown_editor.database import Base, get_db
from markdown_editor.main import app
from markdown_editor.services.auth_service import CurrentUser, create_access_token

# Use in-memory SQLite for testing
SQLALCHEMY_DATABASE_URL = "sqlite+aiosqlite:///:memory:"

USER_ID = "user_test_1"
USER_ID_2 = "user_test_2"


@pytest.fixture
async def engine() -> AsyncGenerator[AsyncEngine, None]:
    """Create a test database engine with SQLite."""
    engine = create_async_engine(
        SQLALCHEMY_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    # Enable foreign key support for SQLite
    @event.listens_for(engine.sync_engine, "connect")
    def set_sqlite_pragma(dbapi_conn, connection_record):
        cursor = dbapi_conn.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest.fixture
def session_maker(engine: AsyncEngine) -> async_sessionmaker:
    """Session factory bound to the test engine."""
    return async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )


@pytest.fixture
async def db_session(session_maker: async_sessionmaker) -> AsyncGenerator[AsyncSession, None]:
    """Create a test database session."""
    async with session_maker() as session:
        try:
            yield session
        finally:
            await session.rollback()


@pytest.fixture
async def client(session_maker: async_sessionmaker) -> AsyncGenerator[AsyncClient, None]:
    """Create a test client with database dependency override."""
    async def override_get_db():
        async with session_maker() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db] = override_get_db

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as test_client:
        yield test_client

    app.dependency_overrides.clear()


@pytest.fixture
def test_user() -> CurrentUser:
    """Identity of the primary test user."""
    return CurrentUser(id=USER_ID, email="test@example.com")


@pytest.fixture
def test_user_2() -> CurrentUser:
    """Identity of a second, unrelated user."""
    return CurrentUser(id=USER_ID_2, email="test2@example.com")


@pytest.fixture
def auth_headers(test_user: CurrentUser) -> dict:
    """Create authorization headers."""
    token = create_access_token(data={"sub": test_user.id, "email": test_user.email})
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def auth_headers_2(test_user_2: CurrentUser) -> dict:
    """Create authorization headers for second user."""
    token = create_access_token(data={"sub": test_user_2.id, "email": test_user_2.email})
    return {"Authorization": f"Bearer {token}"}


async def call_action(client: AsyncClient, name: str, body: dict, headers: dict | None = None):
    """POST an action and return the raw response."""
    return await client.post(f"/_actions/{name}", json=body, headers=headers or {})


@pytest.fixture
def action(client: AsyncClient, auth_headers: dict):
    """Call an action as the primary test user and return the response."""
    async def _call(name: str, body: dict | None = None, headers: dict | None = None):
        return await call_action(
            client, name, body if body is not None else {}, headers or auth_headers
        )
    return _call


@pytest.fixture
async def test_document(action) -> dict:
    """A document owned by the primary test user (wire representation)."""
    response = await action("createDocument", {"title": "Test Document"})
    assert response.status_code == 200
    return response.json()["data"]["document"]
