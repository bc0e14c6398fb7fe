"""Pytest fixtures and configuration."""

from __future__ import annotations

import base64
import hashlib
import hmac
import json
from collections.abc import AsyncGenerator
from datetime import datetime, timedelta, timezone
from typing import TYPE_CHECKING, Any

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from src.app.core.config import settings
from src.app.db.session import Base, get_db
from src.app.main import app

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncEngine


TEST_ACTOR_ID = "user-42"


def _base64url_encode(data: bytes) -> str:
    """Encode bytes using base64 URL-safe encoding without padding."""
    return base64.urlsafe_b64encode(data).rstrip(b"=").decode("ascii")


def _create_test_jwt(
    subject: str | None = "admin@clinic.example",
    user_id: str | None = TEST_ACTOR_ID,
    expire_minutes: int = 30,
    secret: str | None = None,
) -> str:
    """Create an HS256 test token the way the identity provider signs them."""
    now = datetime.now(timezone.utc)
    expire = now + timedelta(minutes=expire_minutes)

    payload: dict[str, Any] = {
        "iat": int(now.timestamp()),
        "exp": int(expire.timestamp()),
    }
    if subject is not None:
        payload["sub"] = subject
    if user_id is not None:
        payload["user_id"] = user_id

    header = {"alg": "HS256", "typ": "JWT"}

    header_json = json.dumps(header, separators=(",", ":"), sort_keys=True).encode("utf-8")
    payload_json = json.dumps(payload, separators=(",", ":"), sort_keys=True).encode("utf-8")

    encoded_header = _base64url_encode(header_json)
    encoded_payload = _base64url_encode(payload_json)

    signing_input = f"{encoded_header}.{encoded_payload}".encode("ascii")
    key = (secret or settings.SECRET_KEY).encode("utf-8")
    signature = hmac.new(key, signing_input, hashlib.sha256).digest()
    encoded_signature = _base64url_encode(signature)

    return f"{encoded_header}.{encoded_payload}.{encoded_signature}"


# Test database URL (in-memory SQLite for tests)
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


@pytest.fixture
def auth_headers() -> dict[str, str]:
    """Get authentication headers with a valid test JWT token."""
    token = _create_test_jwt()
    return {"Authorization": f"Bearer {token}"}


@pytest_asyncio.fixture(scope="function")
async def test_engine() -> AsyncGenerator[AsyncEngine, None]:
    """Create a test database engine."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
        echo=False,
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await engine.dispose()


@pytest_asyncio.fixture(scope="function")
async def db_session(test_engine: AsyncEngine) -> AsyncGenerator[AsyncSession, None]:
    """Create a test database session."""
    async_session_factory = async_sessionmaker(
        test_engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autocommit=False,
        autoflush=False,
    )

    async with async_session_factory() as session:
        yield session
        await session.rollback()


@pytest_asyncio.fixture(scope="function")
async def client(test_engine: AsyncEngine) -> AsyncGenerator[AsyncClient, None]:
    """Create a test HTTP client with overridden dependencies."""

    async def override_get_db() -> AsyncGenerator[AsyncSession, None]:
        async_session_factory = async_sessionmaker(
            test_engine,
            class_=AsyncSession,
            expire_on_commit=False,
            autocommit=False,
            autoflush=False,
        )
        async with async_session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db] = override_get_db

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest.fixture
def sample_roster_csv() -> str:
    """A small roster in the shape partner clinics send: mixed headers, one bad row."""
    return (
        "First Name,Last Name,DOB,SSN,E-mail,Age,Unique ID,Favourite Colour\n"
        "Ada,Lovelace,1990-06-15,111-22-3333,ada@example.com,99,TRN-HACKED,blue\n"
        ",,,222-33-4444,nobody@example.com,,,green\n"
        "Grace,Hopper,12/9/1985,333-44-5555,,,,\n"
    )


@pytest.fixture
def make_token():
    """Factory for signed test tokens with custom claims."""
    return _create_test_jwt
