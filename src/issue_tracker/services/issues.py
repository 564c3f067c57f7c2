"""
issue_tracker.services.issues

Issue operations.

Responsibilities:
- Create issues (reporter = caller) with optional assignment.
- Read single issues and visibility-scoped lists.
- Update (assignment gated separately from editing) and delete.
"""

from __future__ import annotations

import uuid
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from issue_tracker.auth.guards import Guards, require_authenticated
from issue_tracker.auth.models import Principal
from issue_tracker.auth.policies import AuthorizationEngine
from issue_tracker.db.models import Issue, IssuePriority, IssueStatus, IssueType, Project
from issue_tracker.db.repositories.issues import IssueFilters, IssueRepo
from issue_tracker.db.repositories.projects import ProjectRepo
from issue_tracker.db.repositories.users import UserRepo
from issue_tracker.services.errors import NotFound


class IssueService:
    def __init__(self, *, session: AsyncSession, authz: AuthorizationEngine) -> None:
        self._session = session
        self._authz = authz
        self._guards = Guards(authz)
        self._issues = IssueRepo(session)
        self._projects = ProjectRepo(session)

    async def create_issue(
        self,
        principal: Principal | None,
        *,
        project_id: uuid.UUID,
        title: str,
        description: str | None = None,
        status: IssueStatus = IssueStatus.todo,
        priority: IssuePriority = IssuePriority.medium,
        type: IssueType = IssueType.task,
        assignee_id: uuid.UUID | None = None,
    ) -> Issue:
        actor = require_authenticated(principal)
        project = await self._get_project(project_id)
        self._guards.require(
            actor,
            await self._authz.can_create_issue(actor, project.id),
            "No permission to create issues in this project",
        )
        if assignee_id is not None:
            self._guards.require(
                actor,
                await self._authz.can_assign_issues(actor, project.id),
                "No permission to assign issues",
            )
            await self._require_user(assignee_id)

        issue = await self._issues.create(
            title=title,
            description=description,
            project_id=project.id,
            reporter_id=actor.id,
            assignee_id=assignee_id,
            status=status,
            priority=priority,
            type=type,
        )
        await self._session.commit()
        return issue

    async def get_issue(self, principal: Principal | None, issue_id: uuid.UUID) -> Issue:
        actor = require_authenticated(principal)
        issue = await self._get(issue_id)
        self._guards.require(
            actor,
            await self._authz.can_view_issue(actor, issue),
            "No permission to view this issue",
        )
        return issue

    async def list_issues(
        self,
        principal: Principal | None,
        *,
        project_id: uuid.UUID | None = None,
        filters: IssueFilters = IssueFilters(),
    ) -> list[Issue]:
        actor = require_authenticated(principal)
        project = await self._get_project(project_id) if project_id is not None else None
        scope = await self._authz.issue_scope(actor, project)
        # A denied project gate fails the whole query; an empty implicit scope is just [].
        self._guards.require_visible(actor, scope, "No permission to view this project")
        return await self._issues.list_visible(scope, filters)

    async def update_issue(
        self, principal: Principal | None, issue_id: uuid.UUID, fields: dict[str, Any]
    ) -> Issue:
        actor = require_authenticated(principal)
        issue = await self._get(issue_id)
        if "assignee_id" in fields:
            self._guards.require(
                actor,
                await self._authz.can_assign_issues(actor, issue.project_id),
                "No permission to assign issues",
            )
        self._guards.require(
            actor,
            await self._authz.can_edit_issue(actor, issue),
            "No permission to edit this issue",
        )
        if fields.get("assignee_id") is not None:
            await self._require_user(fields["assignee_id"])

        await self._issues.update(issue, fields)
        await self._session.commit()
        return issue

    async def delete_issue(self, principal: Principal | None, issue_id: uuid.UUID) -> None:
        actor = require_authenticated(principal)
        issue = await self._get(issue_id)
        self._guards.require(
            actor,
            await self._authz.can_delete_issue(actor, issue),
            "No permission to delete this issue",
        )
        await self._issues.delete(issue)
        await self._session.commit()

    async def _get(self, issue_id: uuid.UUID) -> Issue:
        issue = await self._issues.get(issue_id)
        if issue is None:
            raise NotFound("Issue not found")
        return issue

    async def _get_project(self, project_id: uuid.UUID) -> Project:
        project = await self._projects.get(project_id)
        if project is None:
            raise NotFound("Project not found")
        return project

    async def _require_user(self, user_id: uuid.UUID) -> None:
        if await UserRepo(self._session).get(user_id) is None:
            raise NotFound("User not found")
