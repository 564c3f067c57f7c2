"""
issue_tracker.db.repositories.auth_store

SQLAlchemy implementation of the auth core's storage port.

Responsibilities:
- Serve the point lookups and project-id query declared in `auth.ports.AuthStore`.
"""

from __future__ import annotations

import uuid

from sqlalchemy.ext.asyncio import AsyncSession

from issue_tracker.db.models import Issue, ProjectMember, User
from issue_tracker.db.repositories.issues import IssueRepo
from issue_tracker.db.repositories.projects import MemberRepo, ProjectRepo
from issue_tracker.db.repositories.users import UserRepo


class SqlAuthStore:
    def __init__(self, session: AsyncSession) -> None:
        self._users = UserRepo(session)
        self._projects = ProjectRepo(session)
        self._members = MemberRepo(session)
        self._issues = IssueRepo(session)

    async def get_user(self, user_id: uuid.UUID) -> User | None:
        return await self._users.get(user_id)

    async def get_user_by_username(self, username: str) -> User | None:
        return await self._users.get_by_username(username)

    async def get_membership(
        self, user_id: uuid.UUID, project_id: uuid.UUID
    ) -> ProjectMember | None:
        return await self._members.get(user_id, project_id)

    async def get_issue(self, issue_id: uuid.UUID) -> Issue | None:
        return await self._issues.get(issue_id)

    async def visible_project_ids(self, user_id: uuid.UUID) -> frozenset[uuid.UUID]:
        return await self._projects.visible_ids_for(user_id)


# --- Module Notes -----------------------------------------------------------
# Reads go through the request's session, so membership and role changes made
# earlier in the same request are visible to later checks.
