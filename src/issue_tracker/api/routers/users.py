"""
issue_tracker.api.routers.users

User administration and per-user views.
"""

from __future__ import annotations

import uuid

from fastapi import APIRouter, Depends, Response
from pydantic import BaseModel, Field
from starlette.status import HTTP_201_CREATED, HTTP_204_NO_CONTENT

from issue_tracker.api.routers.auth import user_service
from issue_tracker.api.schemas import IssueOut, MemberOut, UserOut
from issue_tracker.auth.deps import get_principal
from issue_tracker.auth.models import GlobalRole, Principal
from issue_tracker.services.users import UserService

router = APIRouter(prefix="/v1/users", tags=["users"])


class UserCreateRequest(BaseModel):
    username: str = Field(min_length=3, max_length=64)
    email: str = Field(min_length=3, max_length=256)
    password: str = Field(min_length=8, max_length=128)
    name: str | None = Field(default=None, max_length=256)
    role: GlobalRole = GlobalRole.user


class UserUpdateRequest(BaseModel):
    username: str | None = Field(default=None, min_length=3, max_length=64)
    email: str | None = Field(default=None, min_length=3, max_length=256)
    name: str | None = Field(default=None, max_length=256)
    role: GlobalRole | None = None
    is_active: bool | None = None


@router.get("", response_model=list[UserOut])
async def list_users(
    principal: Principal | None = Depends(get_principal),
    users: UserService = Depends(user_service),
) -> list[UserOut]:
    return [UserOut.model_validate(u) for u in await users.list_users(principal)]


@router.post("", response_model=UserOut, status_code=HTTP_201_CREATED)
async def create_user(
    body: UserCreateRequest,
    principal: Principal | None = Depends(get_principal),
    users: UserService = Depends(user_service),
) -> UserOut:
    user = await users.create_user(
        principal,
        username=body.username,
        email=body.email,
        password=body.password,
        name=body.name,
        role=body.role,
    )
    return UserOut.model_validate(user)


@router.get("/{user_id}", response_model=UserOut)
async def get_user(
    user_id: uuid.UUID,
    principal: Principal | None = Depends(get_principal),
    users: UserService = Depends(user_service),
) -> UserOut:
    return UserOut.model_validate(await users.get_user(principal, user_id))


@router.patch("/{user_id}", response_model=UserOut)
async def update_user(
    user_id: uuid.UUID,
    body: UserUpdateRequest,
    principal: Principal | None = Depends(get_principal),
    users: UserService = Depends(user_service),
) -> UserOut:
    # Only fields the client actually sent; explicit nulls are dropped for non-nullable columns.
    fields = body.model_dump(exclude_unset=True)
    fields = {k: v for k, v in fields.items() if v is not None or k == "name"}
    return UserOut.model_validate(await users.update_user(principal, user_id, fields))


@router.delete("/{user_id}", status_code=HTTP_204_NO_CONTENT)
async def delete_user(
    user_id: uuid.UUID,
    principal: Principal | None = Depends(get_principal),
    users: UserService = Depends(user_service),
) -> Response:
    await users.delete_user(principal, user_id)
    return Response(status_code=HTTP_204_NO_CONTENT)


@router.get("/{user_id}/issues", response_model=list[IssueOut])
async def reported_issues(
    user_id: uuid.UUID,
    principal: Principal | None = Depends(get_principal),
    users: UserService = Depends(user_service),
) -> list[IssueOut]:
    return [IssueOut.model_validate(i) for i in await users.reported_issues(principal, user_id)]


@router.get("/{user_id}/assigned-issues", response_model=list[IssueOut])
async def assigned_issues(
    user_id: uuid.UUID,
    principal: Principal | None = Depends(get_principal),
    users: UserService = Depends(user_service),
) -> list[IssueOut]:
    return [IssueOut.model_validate(i) for i in await users.assigned_issues(principal, user_id)]


@router.get("/{user_id}/memberships", response_model=list[MemberOut])
async def memberships(
    user_id: uuid.UUID,
    principal: Principal | None = Depends(get_principal),
    users: UserService = Depends(user_service),
) -> list[MemberOut]:
    return [MemberOut.model_validate(m) for m in await users.memberships(principal, user_id)]
