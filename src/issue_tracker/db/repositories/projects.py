"""
issue_tracker.db.repositories.projects

Repository for `Project` and `ProjectMember` entities.

Responsibilities:
- Create, fetch, update and delete projects.
- Membership rows: unique (user, project) lookup, add, role change, removal.
- Apply a `ProjectScope` when listing.
"""

from __future__ import annotations

import uuid
from typing import Any

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from issue_tracker.auth.models import ProjectRole
from issue_tracker.auth.visibility import ProjectScope
from issue_tracker.db.models import Project, ProjectMember


class ProjectRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def create(
        self, *, name: str, description: str | None, owner_id: uuid.UUID
    ) -> Project:
        project = Project(name=name, description=description, owner_id=owner_id)
        self._session.add(project)
        await self._session.flush()
        return project

    async def get(self, project_id: uuid.UUID) -> Project | None:
        return await self._session.get(Project, project_id)

    async def list_visible(self, scope: ProjectScope) -> list[Project]:
        if scope.is_empty:
            return []
        stmt = select(Project).order_by(Project.created_at)
        if scope.project_ids is not None:
            stmt = stmt.where(Project.id.in_(scope.project_ids))
        return list((await self._session.execute(stmt)).scalars().all())

    async def visible_ids_for(self, user_id: uuid.UUID) -> frozenset[uuid.UUID]:
        # Owned projects plus any membership, whatever the role.
        owned = select(Project.id).where(Project.owner_id == user_id)
        member = select(ProjectMember.project_id).where(ProjectMember.user_id == user_id)
        rows = (await self._session.execute(owned.union(member))).scalars().all()
        return frozenset(rows)

    async def update(self, project: Project, fields: dict[str, Any]) -> Project:
        for key, value in fields.items():
            setattr(project, key, value)
        await self._session.flush()
        return project

    async def delete(self, project: Project) -> None:
        # Members, issues and their comments go with it (ORM cascade).
        await self._session.delete(project)
        await self._session.flush()


class MemberRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get(self, user_id: uuid.UUID, project_id: uuid.UUID) -> ProjectMember | None:
        stmt = select(ProjectMember).where(
            ProjectMember.user_id == user_id, ProjectMember.project_id == project_id
        )
        return (await self._session.execute(stmt)).scalar_one_or_none()

    async def add(
        self, *, user_id: uuid.UUID, project_id: uuid.UUID, project_role: ProjectRole
    ) -> ProjectMember:
        member = ProjectMember(user_id=user_id, project_id=project_id, project_role=project_role)
        self._session.add(member)
        await self._session.flush()
        return member

    async def list_for_project(self, project_id: uuid.UUID) -> list[ProjectMember]:
        stmt = (
            select(ProjectMember)
            .where(ProjectMember.project_id == project_id)
            .order_by(ProjectMember.joined_at)
        )
        return list((await self._session.execute(stmt)).scalars().all())

    async def list_for_user(self, user_id: uuid.UUID) -> list[ProjectMember]:
        stmt = (
            select(ProjectMember)
            .where(ProjectMember.user_id == user_id)
            .order_by(ProjectMember.joined_at)
        )
        return list((await self._session.execute(stmt)).scalars().all())

    async def set_role(self, member: ProjectMember, project_role: ProjectRole) -> ProjectMember:
        member.project_role = project_role
        await self._session.flush()
        return member

    async def remove(self, member: ProjectMember) -> None:
        await self._session.delete(member)
        await self._session.flush()


# --- Module Notes -----------------------------------------------------------
# The uniqueness of (user_id, project_id) is enforced by a DB constraint; the
# service checks first only to return a friendly Conflict.
