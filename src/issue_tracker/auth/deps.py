"""
issue_tracker.auth.deps

FastAPI dependency functions for authentication and authorization.

Responsibilities:
- Build the per-request auth components over the request's DB session.
- Convert an optional bearer token into `Principal | None`.
"""

from __future__ import annotations

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from issue_tracker.api.deps import db_session, settings_dep
from issue_tracker.auth.jwt import JwtConfig
from issue_tracker.auth.models import Principal
from issue_tracker.auth.passwords import PasswordHasher
from issue_tracker.auth.policies import AuthorizationEngine
from issue_tracker.auth.service import AuthService
from issue_tracker.db.repositories.auth_store import SqlAuthStore
from issue_tracker.settings import Settings

_bearer = HTTPBearer(auto_error=False)


def auth_store(session: AsyncSession = Depends(db_session)) -> SqlAuthStore:
    return SqlAuthStore(session)


def authz_engine(store: SqlAuthStore = Depends(auth_store)) -> AuthorizationEngine:
    return AuthorizationEngine(store)


def auth_service(
    store: SqlAuthStore = Depends(auth_store),
    settings: Settings = Depends(settings_dep),
) -> AuthService:
    return AuthService(
        store=store,
        hasher=PasswordHasher(rounds=settings.bcrypt_rounds),
        jwt_cfg=JwtConfig.from_settings(settings),
    )


async def get_principal(
    creds: HTTPAuthorizationCredentials | None = Depends(_bearer),
    auth: AuthService = Depends(auth_service),
) -> Principal | None:
    # No bearer credential at all: anonymous; services decide whether that is allowed.
    if creds is None or not creds.credentials:
        return None
    # A presented but invalid token is an error, never "anonymous".
    return await auth.principal_from_token(creds.credentials)


# --- Module Notes -----------------------------------------------------------
# FastAPI caches dependencies per request, so the store, engine and services of
# one request share a single AsyncSession.
