"""
issue_tracker.db.repositories.issues

Repository for `Issue` entities.

Responsibilities:
- Create, fetch, update and delete issues.
- Translate an `IssueScope` plus optional field filters into a query.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass
from typing import Any

from sqlalchemy import desc, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from issue_tracker.auth.visibility import IssueScope
from issue_tracker.db.models import Issue, IssuePriority, IssueStatus, IssueType


@dataclass(frozen=True, slots=True)
class IssueFilters:
    status: IssueStatus | None = None
    priority: IssuePriority | None = None
    type: IssueType | None = None
    assignee_id: uuid.UUID | None = None


class IssueRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def create(
        self,
        *,
        title: str,
        description: str | None,
        project_id: uuid.UUID,
        reporter_id: uuid.UUID,
        assignee_id: uuid.UUID | None = None,
        status: IssueStatus = IssueStatus.todo,
        priority: IssuePriority = IssuePriority.medium,
        type: IssueType = IssueType.task,
    ) -> Issue:
        issue = Issue(
            title=title,
            description=description,
            project_id=project_id,
            reporter_id=reporter_id,
            assignee_id=assignee_id,
            status=status,
            priority=priority,
            type=type,
        )
        self._session.add(issue)
        await self._session.flush()
        return issue

    async def get(self, issue_id: uuid.UUID) -> Issue | None:
        return await self._session.get(Issue, issue_id)

    async def list_visible(
        self, scope: IssueScope, filters: IssueFilters = IssueFilters()
    ) -> list[Issue]:
        if scope.is_empty:
            return []

        stmt = select(Issue).order_by(desc(Issue.created_at))
        if scope.project_ids is not None:
            stmt = stmt.where(Issue.project_id.in_(scope.project_ids))
        if scope.participant_id is not None:
            stmt = stmt.where(
                or_(
                    Issue.reporter_id == scope.participant_id,
                    Issue.assignee_id == scope.participant_id,
                )
            )

        if filters.status is not None:
            stmt = stmt.where(Issue.status == filters.status)
        if filters.priority is not None:
            stmt = stmt.where(Issue.priority == filters.priority)
        if filters.type is not None:
            stmt = stmt.where(Issue.type == filters.type)
        if filters.assignee_id is not None:
            stmt = stmt.where(Issue.assignee_id == filters.assignee_id)
        return list((await self._session.execute(stmt)).scalars().all())

    async def list_reported_by(self, user_id: uuid.UUID) -> list[Issue]:
        stmt = select(Issue).where(Issue.reporter_id == user_id).order_by(desc(Issue.updated_at))
        return list((await self._session.execute(stmt)).scalars().all())

    async def list_assigned_to(self, user_id: uuid.UUID) -> list[Issue]:
        stmt = select(Issue).where(Issue.assignee_id == user_id).order_by(desc(Issue.updated_at))
        return list((await self._session.execute(stmt)).scalars().all())

    async def update(self, issue: Issue, fields: dict[str, Any]) -> Issue:
        for key, value in fields.items():
            setattr(issue, key, value)
        await self._session.flush()
        return issue

    async def delete(self, issue: Issue) -> None:
        await self._session.delete(issue)
        await self._session.flush()
