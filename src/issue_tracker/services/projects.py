"""
issue_tracker.services.projects

Project and project-membership operations.

Responsibilities:
- Create (creator becomes OWNER member), read, list, update, delete projects.
- Add members, change member roles, remove members.
"""

from __future__ import annotations

import uuid
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from issue_tracker.auth.guards import Guards, require_authenticated
from issue_tracker.auth.models import Principal, ProjectRole
from issue_tracker.auth.policies import AuthorizationEngine
from issue_tracker.db.models import Project, ProjectMember
from issue_tracker.db.repositories.projects import MemberRepo, ProjectRepo
from issue_tracker.db.repositories.users import UserRepo
from issue_tracker.observability.logging import get_logger
from issue_tracker.services.errors import Conflict, NotFound

log = get_logger(__name__)

_SELF_MEMBERSHIP_MESSAGE = "You cannot change your own project membership"


class ProjectService:
    def __init__(self, *, session: AsyncSession, authz: AuthorizationEngine) -> None:
        self._session = session
        self._authz = authz
        self._guards = Guards(authz)
        self._projects = ProjectRepo(session)
        self._members = MemberRepo(session)

    async def create_project(
        self, principal: Principal | None, *, name: str, description: str | None = None
    ) -> Project:
        actor = require_authenticated(principal)
        self._guards.require(
            actor, await self._authz.can_create_project(actor), "Only admins can create projects"
        )

        project = await self._projects.create(
            name=name, description=description, owner_id=actor.id
        )
        await self._members.add(
            user_id=actor.id, project_id=project.id, project_role=ProjectRole.owner
        )
        await self._session.commit()
        log.info("project_created", project_id=str(project.id), by=str(actor.id))
        return project

    async def get_project(self, principal: Principal | None, project_id: uuid.UUID) -> Project:
        actor = require_authenticated(principal)
        project = await self._get(project_id)
        self._guards.require(
            actor,
            await self._authz.can_view_project(actor, project),
            "No permission to view this project",
        )
        return project

    async def list_projects(self, principal: Principal | None) -> list[Project]:
        actor = require_authenticated(principal)
        scope = await self._authz.project_scope(actor)
        return await self._projects.list_visible(scope)

    async def update_project(
        self, principal: Principal | None, project_id: uuid.UUID, fields: dict[str, Any]
    ) -> Project:
        actor = require_authenticated(principal)
        project = await self._get(project_id)
        self._guards.require(
            actor,
            await self._authz.can_manage_project(actor, project.id),
            "No permission to update this project",
        )
        await self._projects.update(project, fields)
        await self._session.commit()
        return project

    async def delete_project(self, principal: Principal | None, project_id: uuid.UUID) -> None:
        actor = require_authenticated(principal)
        project = await self._get(project_id)
        self._guards.require(
            actor,
            await self._authz.can_delete_project(actor, project.id),
            "Only project owners can delete projects",
        )
        await self._projects.delete(project)
        await self._session.commit()
        log.info("project_deleted", project_id=str(project_id), by=str(actor.id))

    # -- members -------------------------------------------------------------

    async def list_members(
        self, principal: Principal | None, project_id: uuid.UUID
    ) -> list[ProjectMember]:
        project = await self.get_project(principal, project_id)
        return await self._members.list_for_project(project.id)

    async def add_member(
        self,
        principal: Principal | None,
        project_id: uuid.UUID,
        *,
        user_id: uuid.UUID,
        project_role: ProjectRole = ProjectRole.member,
    ) -> ProjectMember:
        actor = require_authenticated(principal)
        project = await self._get(project_id)
        self._guards.require(
            actor,
            await self._authz.can_add_project_member(actor, project.id),
            "No permission to add project members",
        )
        if await UserRepo(self._session).get(user_id) is None:
            raise NotFound("User not found")
        if await self._members.get(user_id, project.id) is not None:
            raise Conflict("User is already a member of this project")

        member = await self._members.add(
            user_id=user_id, project_id=project.id, project_role=project_role
        )
        await self._session.commit()
        log.info(
            "member_added",
            project_id=str(project.id),
            user_id=str(user_id),
            project_role=project_role.value,
            by=str(actor.id),
        )
        return member

    async def update_member_role(
        self,
        principal: Principal | None,
        project_id: uuid.UUID,
        user_id: uuid.UUID,
        project_role: ProjectRole,
    ) -> ProjectMember:
        actor = require_authenticated(principal)
        member = await self._changeable_member(
            actor, project_id, user_id, "No permission to update project member roles"
        )
        await self._members.set_role(member, project_role)
        await self._session.commit()
        return member

    async def remove_member(
        self, principal: Principal | None, project_id: uuid.UUID, user_id: uuid.UUID
    ) -> None:
        actor = require_authenticated(principal)
        member = await self._changeable_member(
            actor, project_id, user_id, "No permission to remove project members"
        )
        await self._members.remove(member)
        await self._session.commit()
        log.info("member_removed", project_id=str(project_id), user_id=str(user_id))

    async def _changeable_member(
        self, actor: Principal, project_id: uuid.UUID, user_id: uuid.UUID, message: str
    ) -> ProjectMember:
        project = await self._get(project_id)
        decision = await self._authz.can_change_project_member(actor, project.id, user_id)
        if decision.reason == "self_modification":
            message = _SELF_MEMBERSHIP_MESSAGE
        self._guards.require(actor, decision, message)

        member = await self._members.get(user_id, project.id)
        if member is None:
            raise NotFound("Project member not found")
        return member

    async def _get(self, project_id: uuid.UUID) -> Project:
        project = await self._projects.get(project_id)
        if project is None:
            raise NotFound("Project not found")
        return project
