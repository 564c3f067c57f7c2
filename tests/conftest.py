"""
tests.conftest

Shared fixtures.

Responsibilities:
- Provide an in-memory `AuthStore` double for unit tests of the auth core.
- Provide a fully wired app + HTTP client over a throwaway SQLite file for API tests.
"""

from __future__ import annotations

from collections.abc import AsyncIterator

import httpx
import pytest
import pytest_asyncio
from fastapi import FastAPI
from helpers import TEST_SECRET, InMemoryAuthStore

from issue_tracker.api.app import create_app
from issue_tracker.auth.jwt import JwtConfig
from issue_tracker.auth.passwords import PasswordHasher
from issue_tracker.settings import Settings


@pytest.fixture
def store() -> InMemoryAuthStore:
    return InMemoryAuthStore()


@pytest.fixture
def hasher() -> PasswordHasher:
    # bcrypt's minimum cost keeps the suite fast.
    return PasswordHasher(rounds=4)


@pytest.fixture
def jwt_cfg() -> JwtConfig:
    return JwtConfig(
        alg="HS256", issuer="issue-tracker", audience="issue-tracker-api", secret=TEST_SECRET
    )


@pytest.fixture
def settings(tmp_path) -> Settings:
    return Settings(
        env="test",
        jwt_secret=TEST_SECRET,
        bcrypt_rounds=4,
        database_url=f"sqlite+aiosqlite:///{tmp_path / 'test.db'}",
    )


@pytest_asyncio.fixture
async def app(settings: Settings) -> AsyncIterator[FastAPI]:
    app = create_app(settings=settings)
    # httpx's ASGITransport does not run lifespan events; drive them explicitly.
    async with app.router.lifespan_context(app):
        yield app


@pytest_asyncio.fixture
async def client(app: FastAPI) -> AsyncIterator[httpx.AsyncClient]:
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as c:
        yield c
