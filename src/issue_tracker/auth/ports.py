"""
issue_tracker.auth.ports

Storage interface consumed by the auth core.

Responsibilities:
- Describe the rows the core reads (structurally, so ORM objects satisfy them).
- Describe the point lookups and the project-id query the core performs.
"""

from __future__ import annotations

import uuid
from typing import Protocol

from issue_tracker.auth.models import GlobalRole, ProjectRole


class UserRecord(Protocol):
    id: uuid.UUID
    username: str
    email: str
    name: str | None
    password_hash: str
    role: GlobalRole
    is_active: bool


class ProjectRecord(Protocol):
    id: uuid.UUID
    owner_id: uuid.UUID | None


class MembershipRecord(Protocol):
    user_id: uuid.UUID
    project_id: uuid.UUID
    project_role: ProjectRole


class IssueRecord(Protocol):
    id: uuid.UUID
    project_id: uuid.UUID
    reporter_id: uuid.UUID
    assignee_id: uuid.UUID | None


class CommentRecord(Protocol):
    id: uuid.UUID
    issue_id: uuid.UUID
    author_id: uuid.UUID


class AuthStore(Protocol):
    """
    Read-only view of storage used for identity and authorization.

    Unknown ids return None; the core treats that as "no such resource".
    """

    async def get_user(self, user_id: uuid.UUID) -> UserRecord | None: ...

    async def get_user_by_username(self, username: str) -> UserRecord | None: ...

    async def get_membership(
        self, user_id: uuid.UUID, project_id: uuid.UUID
    ) -> MembershipRecord | None: ...

    async def get_issue(self, issue_id: uuid.UUID) -> IssueRecord | None: ...

    async def visible_project_ids(self, user_id: uuid.UUID) -> frozenset[uuid.UUID]:
        """Projects the user owns or holds any membership in."""
        ...


# --- Module Notes -----------------------------------------------------------
# `db.repositories.auth_store.SqlAuthStore` is the production implementation;
# tests use an in-memory double (see tests/conftest.py).
