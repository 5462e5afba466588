"""Test fixtures — in-memory SQLite per test, fake Google verifier.

1. Each test gets a fresh in-memory SQLite database (aiosqlite) with the
   schema created from the ORM metadata. StaticPool keeps every session
   on the same connection, so data committed by a request is visible to
   the test afterwards.
2. get_db is overridden to hand out sessions on that database.
3. get_identity_verifier is overridden with FakeGoogleVerifier, which
   accepts only tokens registered on it. No network access.

Environment variables are set before the app is imported because the
settings singleton (and the engine) are built at import time.
"""

import os

os.environ.setdefault("JWT_SECRET", "test-secret-key-for-session-tokens")
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("GOOGLE_CLIENT_ID", "test-client-id.apps.googleusercontent.com")
os.environ.setdefault("FRONTEND_URL", "http://localhost:5173")

import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from toolboard.auth.google import GoogleIdentity, get_identity_verifier
from toolboard.auth.jwt import create_session_token
from toolboard.db.engine import get_db
from toolboard.db.models import Base, User
from toolboard.errors import AuthenticationError
from toolboard.main import app

TEST_DB_URL = "sqlite+aiosqlite:///:memory:"


class FakeGoogleVerifier:
    """Stands in for GoogleIdentityVerifier: known tokens map to identities."""

    def __init__(self):
        self.identities: dict[str, GoogleIdentity] = {}
        self.calls: list[str] = []

    def register(self, token: str, identity: GoogleIdentity) -> str:
        self.identities[token] = identity
        return token

    async def verify(self, token: str) -> GoogleIdentity:
        self.calls.append(token)
        try:
            return self.identities[token]
        except KeyError:
            raise AuthenticationError()


@pytest_asyncio.fixture()
async def db_engine():
    engine = create_async_engine(
        TEST_DB_URL,
        echo=False,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest_asyncio.fixture()
async def session_factory(db_engine):
    return async_sessionmaker(db_engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture()
async def db_session(session_factory):
    """A session for arranging and inspecting data directly."""
    async with session_factory() as session:
        yield session


@pytest_asyncio.fixture()
async def google():
    return FakeGoogleVerifier()


@pytest_asyncio.fixture()
async def client(session_factory, google):
    """HTTP client with get_db and the Google verifier overridden.

    The session guard is NOT overridden: protected routes need a real
    session token (see make_user).
    """
    async def override_get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_identity_verifier] = lambda: google

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest_asyncio.fixture()
async def make_user(session_factory):
    """Factory: insert a user and return (user, auth headers)."""

    async def _make(email: str, name: str = "Test User"):
        async with session_factory() as session:
            user = User(email=email, name=name, google_id=f"google-{email}")
            session.add(user)
            await session.commit()
            await session.refresh(user)
        token = create_session_token(user.id, user.email)
        return user, {"Authorization": f"Bearer {token}"}

    return _make
