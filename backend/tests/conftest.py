"""Pytest fixtures for testing."""
import os
import time
from collections.abc import AsyncGenerator, Generator
from contextlib import asynccontextmanager
from typing import Any
from unittest.mock import MagicMock, patch

import jwt
import pytest
from cryptography.hazmat.primitives.asymmetric import rsa
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import (
    AsyncConnection,
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from testcontainers.postgres import PostgresContainer

from core.config import Settings
from models.base import Base

TEST_ISSUER = "https://test.okta.com/oauth2/default"
TEST_AUDIENCE = "api://default"
TEST_CLIENT_ID = "test-client-id"


def make_settings(**overrides: Any) -> Settings:
    """Settings matching the tokens minted by make_token."""
    values: dict[str, Any] = {
        "database_url": "postgresql+asyncpg://test",
        "okta_issuer": TEST_ISSUER,
        "okta_audience": TEST_AUDIENCE,
        "okta_client_id": TEST_CLIENT_ID,
    }
    values.update(overrides)
    return Settings(_env_file=None, **values)


def make_token(
    private_key: rsa.RSAPrivateKey,
    sub: str | None = "u1",
    **claims: Any,
) -> str:
    """
    Mint an RS256 access token shaped like an Okta token.

    Keyword arguments override the default claims; passing None drops a claim.
    """
    now = int(time.time())
    payload: dict[str, Any] = {
        "sub": sub,
        "iss": TEST_ISSUER,
        "aud": TEST_AUDIENCE,
        "cid": TEST_CLIENT_ID,
        "iat": now,
        "exp": now + 300,
    }
    payload.update(claims)
    payload = {key: value for key, value in payload.items() if value is not None}
    return jwt.encode(payload, private_key, algorithm="RS256", headers={"kid": "test-key"})


@pytest.fixture(scope="session")
def signing_key() -> rsa.RSAPrivateKey:
    """RSA key standing in for the identity provider's signing key."""
    return rsa.generate_private_key(public_exponent=65537, key_size=2048)


@pytest.fixture
def mock_jwks(signing_key: rsa.RSAPrivateKey) -> Generator[MagicMock]:
    """Replace the JWKS lookup so tokens verify against signing_key without network calls."""
    jwks_client = MagicMock()
    jwks_client.get_signing_key_from_jwt.return_value = MagicMock(
        key=signing_key.public_key(),
    )
    with patch("core.auth.get_jwks_client", return_value=jwks_client):
        yield jwks_client


@pytest.fixture(scope="session")
def postgres_container() -> Generator[PostgresContainer]:
    """Start a PostgreSQL container for the test session."""
    with PostgresContainer("postgres:16", driver="asyncpg") as postgres:
        yield postgres


@pytest.fixture(scope="session")
def database_url(postgres_container: PostgresContainer) -> str:
    """
    Get the database URL from the container and set it in environment.

    This must be set before any app imports that trigger Settings validation.
    """
    url = postgres_container.get_connection_url()
    os.environ["DATABASE_URL"] = url
    # Tables are created by the async_engine fixture, not the app lifespan
    os.environ["CREATE_TABLES"] = "false"
    return url


@pytest.fixture
async def async_engine(database_url: str) -> AsyncGenerator[AsyncEngine]:
    """Create an async engine for testing."""
    engine = create_async_engine(database_url, echo=False)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest.fixture
async def db_connection(async_engine: AsyncEngine) -> AsyncGenerator[AsyncConnection]:
    """
    Create a connection with a transaction that will be rolled back after the test.

    Each test runs in its own transaction, so tests don't affect each other.
    """
    async with async_engine.connect() as connection:
        transaction = await connection.begin()
        try:
            yield connection
        finally:
            await transaction.rollback()


@pytest.fixture
async def db_session(db_connection: AsyncConnection) -> AsyncGenerator[AsyncSession]:
    """
    Create an async session bound to the test transaction.

    Uses savepoints so the session's commit works inside the outer test transaction.
    """
    session_factory = async_sessionmaker(
        bind=db_connection,
        class_=AsyncSession,
        expire_on_commit=False,
        join_transaction_mode="create_savepoint",
    )

    async with session_factory() as session:
        yield session


@pytest.fixture
async def api_app(db_session: AsyncSession) -> AsyncGenerator[FastAPI]:
    """The FastAPI app with the database session and settings overridden."""
    # Clear the settings cache so it picks up DATABASE_URL from environment
    from core.config import get_settings  # noqa: PLC0415

    get_settings.cache_clear()

    from api.main import app  # noqa: PLC0415
    from db.session import get_async_session  # noqa: PLC0415

    async def override_get_async_session() -> AsyncGenerator[AsyncSession]:
        yield db_session

    def override_get_settings() -> Settings:
        return make_settings()

    app.dependency_overrides[get_async_session] = override_get_async_session
    app.dependency_overrides[get_settings] = override_get_settings

    yield app

    app.dependency_overrides.clear()


@asynccontextmanager
async def open_client(
    app: FastAPI,
    token: str | None = None,
    raise_app_exceptions: bool = True,
) -> AsyncGenerator[AsyncClient]:
    """
    Open a test client, authenticated with `token` when given.

    Starlette re-raises unhandled errors after sending the 500 response; pass
    raise_app_exceptions=False to inspect that response instead.
    """
    headers = {"Authorization": f"Bearer {token}"} if token else {}
    async with AsyncClient(
        transport=ASGITransport(app=app, raise_app_exceptions=raise_app_exceptions),
        base_url="http://test",
        headers=headers,
    ) as test_client:
        yield test_client


@pytest.fixture
async def client(
    api_app: FastAPI,
    signing_key: rsa.RSAPrivateKey,
    mock_jwks: MagicMock,  # noqa: ARG001
) -> AsyncGenerator[AsyncClient]:
    """Test client authenticated as owner 'u1'."""
    async with open_client(api_app, make_token(signing_key, sub="u1")) as test_client:
        yield test_client


@pytest.fixture
async def anon_client(
    api_app: FastAPI,
    mock_jwks: MagicMock,  # noqa: ARG001
) -> AsyncGenerator[AsyncClient]:
    """Test client without an Authorization header."""
    async with open_client(api_app) as test_client:
        yield test_client
