"""
issue_tracker.api.routers.projects

Project and membership endpoints.
"""

from __future__ import annotations

import uuid

from fastapi import APIRouter, Depends, Response
from pydantic import BaseModel, Field
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.status import HTTP_201_CREATED, HTTP_204_NO_CONTENT

from issue_tracker.api.deps import db_session
from issue_tracker.api.schemas import MemberOut, ProjectOut
from issue_tracker.auth.deps import authz_engine, get_principal
from issue_tracker.auth.models import Principal, ProjectRole
from issue_tracker.auth.policies import AuthorizationEngine
from issue_tracker.services.projects import ProjectService

router = APIRouter(prefix="/v1/projects", tags=["projects"])


class ProjectCreateRequest(BaseModel):
    name: str = Field(min_length=1, max_length=128)
    description: str | None = Field(default=None, max_length=10_000)


class ProjectUpdateRequest(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=128)
    description: str | None = Field(default=None, max_length=10_000)


class MemberAddRequest(BaseModel):
    user_id: uuid.UUID
    project_role: ProjectRole = ProjectRole.member


class MemberRoleRequest(BaseModel):
    project_role: ProjectRole


def project_service(
    session: AsyncSession = Depends(db_session),
    authz: AuthorizationEngine = Depends(authz_engine),
) -> ProjectService:
    return ProjectService(session=session, authz=authz)


@router.get("", response_model=list[ProjectOut])
async def list_projects(
    principal: Principal | None = Depends(get_principal),
    projects: ProjectService = Depends(project_service),
) -> list[ProjectOut]:
    return [ProjectOut.model_validate(p) for p in await projects.list_projects(principal)]


@router.post("", response_model=ProjectOut, status_code=HTTP_201_CREATED)
async def create_project(
    body: ProjectCreateRequest,
    principal: Principal | None = Depends(get_principal),
    projects: ProjectService = Depends(project_service),
) -> ProjectOut:
    project = await projects.create_project(
        principal, name=body.name, description=body.description
    )
    return ProjectOut.model_validate(project)


@router.get("/{project_id}", response_model=ProjectOut)
async def get_project(
    project_id: uuid.UUID,
    principal: Principal | None = Depends(get_principal),
    projects: ProjectService = Depends(project_service),
) -> ProjectOut:
    return ProjectOut.model_validate(await projects.get_project(principal, project_id))


@router.patch("/{project_id}", response_model=ProjectOut)
async def update_project(
    project_id: uuid.UUID,
    body: ProjectUpdateRequest,
    principal: Principal | None = Depends(get_principal),
    projects: ProjectService = Depends(project_service),
) -> ProjectOut:
    fields = body.model_dump(exclude_unset=True)
    if fields.get("name") is None:
        fields.pop("name", None)
    project = await projects.update_project(principal, project_id, fields)
    return ProjectOut.model_validate(project)


@router.delete("/{project_id}", status_code=HTTP_204_NO_CONTENT)
async def delete_project(
    project_id: uuid.UUID,
    principal: Principal | None = Depends(get_principal),
    projects: ProjectService = Depends(project_service),
) -> Response:
    await projects.delete_project(principal, project_id)
    return Response(status_code=HTTP_204_NO_CONTENT)


@router.get("/{project_id}/members", response_model=list[MemberOut])
async def list_members(
    project_id: uuid.UUID,
    principal: Principal | None = Depends(get_principal),
    projects: ProjectService = Depends(project_service),
) -> list[MemberOut]:
    return [MemberOut.model_validate(m) for m in await projects.list_members(principal, project_id)]


@router.post("/{project_id}/members", response_model=MemberOut, status_code=HTTP_201_CREATED)
async def add_member(
    project_id: uuid.UUID,
    body: MemberAddRequest,
    principal: Principal | None = Depends(get_principal),
    projects: ProjectService = Depends(project_service),
) -> MemberOut:
    member = await projects.add_member(
        principal, project_id, user_id=body.user_id, project_role=body.project_role
    )
    return MemberOut.model_validate(member)


@router.patch("/{project_id}/members/{user_id}", response_model=MemberOut)
async def update_member_role(
    project_id: uuid.UUID,
    user_id: uuid.UUID,
    body: MemberRoleRequest,
    principal: Principal | None = Depends(get_principal),
    projects: ProjectService = Depends(project_service),
) -> MemberOut:
    member = await projects.update_member_role(principal, project_id, user_id, body.project_role)
    return MemberOut.model_validate(member)


@router.delete("/{project_id}/members/{user_id}", status_code=HTTP_204_NO_CONTENT)
async def remove_member(
    project_id: uuid.UUID,
    user_id: uuid.UUID,
    principal: Principal | None = Depends(get_principal),
    projects: ProjectService = Depends(project_service),
) -> Response:
    await projects.remove_member(principal, project_id, user_id)
    return Response(status_code=HTTP_204_NO_CONTENT)
