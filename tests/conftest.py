"""
Test configuration and shared fixtures.
Uses an in-memory SQLite database, rebuilt for every test.
"""
from __future__ import annotations

from collections.abc import AsyncGenerator
from typing import Any

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from jose import jwt
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
)
from sqlalchemy.pool import StaticPool

from assettrack.core.config import settings
from assettrack.core.security import Actor
from assettrack.db.base import Base
from assettrack.db.session import build_engine, get_db
from assettrack.main import app, limiter

# ── Test database ─────────────────────────────────────────────────────────────
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"

limiter.enabled = False


@pytest_asyncio.fixture
async def engine() -> AsyncGenerator[AsyncEngine, None]:
    test_engine = build_engine(TEST_DATABASE_URL, poolclass=StaticPool)
    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield test_engine
    await test_engine.dispose()


@pytest_asyncio.fixture
async def db(engine: AsyncEngine) -> AsyncGenerator[AsyncSession, None]:
    """Provide a test database session that rolls back after each test."""
    session_factory = async_sessionmaker(
        bind=engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autocommit=False,
        autoflush=False,
    )
    async with session_factory() as session:
        try:
            yield session
            await session.rollback()
        finally:
            await session.close()


@pytest_asyncio.fixture
async def client(db: AsyncSession) -> AsyncGenerator[AsyncClient, None]:
    """Provide an async HTTP test client with the test DB injected."""

    async def override_get_db() -> AsyncGenerator[AsyncSession, None]:
        yield db
        await db.flush()

    app.dependency_overrides[get_db] = override_get_db

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac

    app.dependency_overrides.clear()


# ── Identity helpers ──────────────────────────────────────────────────────────

def make_token(
    subject: str = "idp|admin-1",
    username: str | None = "alice.admin",
    roles: list[str] | None = None,
    **extra_claims: Any,
) -> str:
    """Mint a token the way the identity provider would."""
    claims: dict[str, Any] = {"sub": subject, **extra_claims}
    if username is not None:
        claims[settings.IDP_USERNAME_CLAIM] = username
    claims[settings.IDP_ROLES_CLAIM] = [settings.ADMIN_ROLE] if roles is None else roles
    return jwt.encode(claims, settings.IDP_JWT_SECRET, algorithm=settings.IDP_JWT_ALGORITHM)


@pytest.fixture
def token_factory() -> Any:
    return make_token


@pytest.fixture
def admin_actor() -> Actor:
    return Actor(
        subject="idp|admin-1",
        username="alice.admin",
        roles=frozenset({settings.ADMIN_ROLE}),
    )


@pytest.fixture
def admin_headers() -> dict[str, str]:
    """Authorization headers for an admin."""
    return {"Authorization": f"Bearer {make_token()}"}


@pytest.fixture
def viewer_headers() -> dict[str, str]:
    """Authorization headers for an authenticated user without the admin role."""
    token = make_token(subject="idp|viewer-1", username="victor.viewer", roles=["viewer"])
    return {"Authorization": f"Bearer {token}"}


# ── Data helpers ──────────────────────────────────────────────────────────────

OWNER_PAYLOAD: dict[str, str] = {
    "name": "John Doe",
    "address": "1 Main Street",
    "phone": "+1 555 0100",
    "email": "john@example.com",
}


@pytest_asyncio.fixture
async def owner(client: AsyncClient, admin_headers: dict[str, str]) -> dict[str, Any]:
    response = await client.post("/api/v1/owners/", json=OWNER_PAYLOAD, headers=admin_headers)
    assert response.status_code == 201, response.text
    return response.json()


@pytest_asyncio.fixture
async def property_(
    client: AsyncClient, admin_headers: dict[str, str], owner: dict[str, Any]
) -> dict[str, Any]:
    response = await client.post(
        "/api/v1/properties/",
        json={
            "owner_id": owner["id"],
            "title": "Seaside Villa",
            "description": "Four bedrooms with a view",
            "address": "7 Ocean Drive",
        },
        headers=admin_headers,
    )
    assert response.status_code == 201, response.text
    return response.json()
