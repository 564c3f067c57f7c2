"""
issue_tracker.api.routers.auth

Session endpoints.

Responsibilities:
- Register (self-service, USER role) and log in, both returning a session token.
- Return the caller's own profile.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.status import HTTP_201_CREATED

from issue_tracker.api.deps import db_session
from issue_tracker.api.schemas import SessionOut, UserOut
from issue_tracker.auth.deps import auth_service, authz_engine, get_principal
from issue_tracker.auth.models import Principal
from issue_tracker.auth.policies import AuthorizationEngine
from issue_tracker.auth.service import AuthService, Session
from issue_tracker.services.users import UserService

router = APIRouter(prefix="/v1/auth", tags=["auth"])


class RegisterRequest(BaseModel):
    username: str = Field(min_length=3, max_length=64)
    email: str = Field(min_length=3, max_length=256)
    password: str = Field(min_length=8, max_length=128)
    name: str | None = Field(default=None, max_length=256)


class LoginRequest(BaseModel):
    username: str = Field(min_length=1, max_length=64)
    password: str = Field(min_length=1, max_length=128)


def user_service(
    session: AsyncSession = Depends(db_session),
    authz: AuthorizationEngine = Depends(authz_engine),
    auth: AuthService = Depends(auth_service),
) -> UserService:
    return UserService(session=session, authz=authz, auth=auth)


def _session_out(session: Session) -> SessionOut:
    return SessionOut(token=session.token, user=UserOut.model_validate(session.user))


@router.post("/register", response_model=SessionOut, status_code=HTTP_201_CREATED)
async def register(
    body: RegisterRequest,
    users: UserService = Depends(user_service),
) -> SessionOut:
    session = await users.register(
        username=body.username, email=body.email, password=body.password, name=body.name
    )
    return _session_out(session)


@router.post("/login", response_model=SessionOut)
async def login(
    body: LoginRequest,
    auth: AuthService = Depends(auth_service),
) -> SessionOut:
    return _session_out(await auth.login(body.username, body.password))


@router.get("/me", response_model=UserOut)
async def me(
    principal: Principal | None = Depends(get_principal),
    users: UserService = Depends(user_service),
) -> UserOut:
    return UserOut.model_validate(await users.me(principal))
