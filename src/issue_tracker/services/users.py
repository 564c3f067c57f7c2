"""
issue_tracker.services.users

User account operations.

Responsibilities:
- Registration (self-service, default role) and admin-driven account creation.
- Profile reads/updates gated by self-or-admin; role and status changes admin-only.
- Per-user views: reported issues, assigned issues, memberships.
"""

from __future__ import annotations

import uuid
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from issue_tracker.auth.guards import Guards, require_authenticated
from issue_tracker.auth.models import GlobalRole, Principal
from issue_tracker.auth.policies import AuthorizationEngine
from issue_tracker.auth.service import AuthService, Session
from issue_tracker.db.models import Issue, ProjectMember, User
from issue_tracker.db.repositories.issues import IssueRepo
from issue_tracker.db.repositories.projects import MemberRepo
from issue_tracker.db.repositories.users import UserRepo
from issue_tracker.observability.logging import get_logger
from issue_tracker.services.errors import Conflict, NotFound

log = get_logger(__name__)


class UserService:
    def __init__(
        self,
        *,
        session: AsyncSession,
        authz: AuthorizationEngine,
        auth: AuthService,
    ) -> None:
        self._session = session
        self._authz = authz
        self._guards = Guards(authz)
        self._auth = auth
        self._users = UserRepo(session)

    async def register(
        self, *, username: str, email: str, password: str, name: str | None = None
    ) -> Session:
        if await self._users.exists_with(username=username, email=email):
            raise Conflict("Username or email already exists")

        user = await self._users.create(
            username=username,
            email=email,
            password_hash=self._auth.hash_password(password),
            name=name,
            role=GlobalRole.user,
        )
        await self._session.commit()
        log.info("user_registered", user_id=str(user.id))
        return self._auth.open_session(user)

    async def me(self, principal: Principal | None) -> User:
        me = require_authenticated(principal)
        return await self._get(me.id)

    async def create_user(
        self,
        principal: Principal | None,
        *,
        username: str,
        email: str,
        password: str,
        name: str | None = None,
        role: GlobalRole = GlobalRole.user,
    ) -> User:
        actor = require_authenticated(principal)
        self._guards.require(
            actor,
            await self._authz.can_assign_global_role(actor, role),
            "Only admins can assign roles",
        )
        self._guards.require(
            actor, await self._authz.can_manage_users(actor), "Only admins can create users"
        )
        if await self._users.exists_with(username=username, email=email):
            raise Conflict("Username or email already exists")

        user = await self._users.create(
            username=username,
            email=email,
            password_hash=self._auth.hash_password(password),
            name=name,
            role=role,
        )
        await self._session.commit()
        log.info("user_created", user_id=str(user.id), role=role.value, by=str(actor.id))
        return user

    async def get_user(self, principal: Principal | None, user_id: uuid.UUID) -> User:
        actor = require_authenticated(principal)
        self._guards.require(
            actor,
            await self._authz.can_view_user(actor, user_id),
            "No permission to view this user",
        )
        return await self._get(user_id)

    async def list_users(self, principal: Principal | None) -> list[User]:
        actor = require_authenticated(principal)
        self._guards.require(
            actor,
            await self._authz.can_list_users(actor),
            "Only admins and managers can view all users",
        )
        return await self._users.list_all()

    async def update_user(
        self, principal: Principal | None, user_id: uuid.UUID, fields: dict[str, Any]
    ) -> User:
        actor = require_authenticated(principal)
        self._guards.require(
            actor,
            await self._authz.can_edit_user(actor, user_id),
            "No permission to update this user",
        )
        if "role" in fields:
            self._guards.require(
                actor, await self._authz.can_manage_users(actor), "No permission to change role"
            )
        if "is_active" in fields:
            self._guards.require(
                actor,
                await self._authz.can_manage_users(actor),
                "No permission to change account status",
            )

        user = await self._get(user_id)
        if await self._users.exists_with(
            username=fields.get("username"), email=fields.get("email"), exclude_id=user.id
        ):
            raise Conflict("Username or email already exists")

        await self._users.update(user, fields)
        await self._session.commit()
        return user

    async def delete_user(self, principal: Principal | None, user_id: uuid.UUID) -> None:
        actor = require_authenticated(principal)
        self._guards.require(
            actor, await self._authz.can_manage_users(actor), "Only admins can delete users"
        )
        user = await self._get(user_id)
        await self._users.delete(user)
        await self._session.commit()
        log.info("user_deleted", user_id=str(user_id), by=str(actor.id))

    async def reported_issues(self, principal: Principal | None, user_id: uuid.UUID) -> list[Issue]:
        await self.get_user(principal, user_id)
        return await IssueRepo(self._session).list_reported_by(user_id)

    async def assigned_issues(self, principal: Principal | None, user_id: uuid.UUID) -> list[Issue]:
        await self.get_user(principal, user_id)
        return await IssueRepo(self._session).list_assigned_to(user_id)

    async def memberships(
        self, principal: Principal | None, user_id: uuid.UUID
    ) -> list[ProjectMember]:
        await self.get_user(principal, user_id)
        return await MemberRepo(self._session).list_for_user(user_id)

    async def _get(self, user_id: uuid.UUID) -> User:
        user = await self._users.get(user_id)
        if user is None:
            raise NotFound("User not found")
        return user
