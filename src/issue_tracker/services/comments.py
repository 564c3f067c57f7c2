"""
issue_tracker.services.comments

Comment operations.

Responsibilities:
- Comment on issues the caller may comment on.
- List comments of issues the caller may view.
- Edit/delete by author, admin, or project owner/maintainer.
"""

from __future__ import annotations

import uuid

from sqlalchemy.ext.asyncio import AsyncSession

from issue_tracker.auth.guards import Guards, require_authenticated
from issue_tracker.auth.models import Principal
from issue_tracker.auth.policies import AuthorizationEngine
from issue_tracker.db.models import Comment, Issue
from issue_tracker.db.repositories.comments import CommentRepo
from issue_tracker.db.repositories.issues import IssueRepo
from issue_tracker.services.errors import NotFound


class CommentService:
    def __init__(self, *, session: AsyncSession, authz: AuthorizationEngine) -> None:
        self._session = session
        self._authz = authz
        self._guards = Guards(authz)
        self._comments = CommentRepo(session)
        self._issues = IssueRepo(session)

    async def create_comment(
        self, principal: Principal | None, issue_id: uuid.UUID, content: str
    ) -> Comment:
        actor = require_authenticated(principal)
        issue = await self._get_issue(issue_id)
        self._guards.require(
            actor,
            await self._authz.can_comment_on_issue(actor, issue),
            "No permission to comment on this issue",
        )
        comment = await self._comments.create(
            issue_id=issue.id, author_id=actor.id, content=content
        )
        await self._session.commit()
        return comment

    async def list_comments(
        self, principal: Principal | None, issue_id: uuid.UUID
    ) -> list[Comment]:
        actor = require_authenticated(principal)
        issue = await self._get_issue(issue_id)
        self._guards.require(
            actor,
            await self._authz.can_view_issue(actor, issue),
            "No permission to view this issue",
        )
        return await self._comments.list_for_issue(issue.id)

    async def update_comment(
        self, principal: Principal | None, comment_id: uuid.UUID, content: str
    ) -> Comment:
        actor = require_authenticated(principal)
        comment = await self._get(comment_id)
        self._guards.require(
            actor,
            await self._authz.can_modify_comment(actor, comment),
            "No permission to edit this comment",
        )
        await self._comments.set_content(comment, content)
        await self._session.commit()
        return comment

    async def delete_comment(self, principal: Principal | None, comment_id: uuid.UUID) -> None:
        actor = require_authenticated(principal)
        comment = await self._get(comment_id)
        self._guards.require(
            actor,
            await self._authz.can_modify_comment(actor, comment),
            "No permission to delete this comment",
        )
        await self._comments.delete(comment)
        await self._session.commit()

    async def _get(self, comment_id: uuid.UUID) -> Comment:
        comment = await self._comments.get(comment_id)
        if comment is None:
            raise NotFound("Comment not found")
        return comment

    async def _get_issue(self, issue_id: uuid.UUID) -> Issue:
        issue = await self._issues.get(issue_id)
        if issue is None:
            raise NotFound("Issue not found")
        return issue
