"""
issue_tracker.db.repositories.comments

Repository for `Comment` entities.

Responsibilities:
- Create, fetch, edit and delete comments.
- List an issue's comments oldest first.
"""

from __future__ import annotations

import uuid

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from issue_tracker.db.models import Comment


class CommentRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def create(self, *, issue_id: uuid.UUID, author_id: uuid.UUID, content: str) -> Comment:
        comment = Comment(issue_id=issue_id, author_id=author_id, content=content)
        self._session.add(comment)
        await self._session.flush()
        return comment

    async def get(self, comment_id: uuid.UUID) -> Comment | None:
        return await self._session.get(Comment, comment_id)

    async def list_for_issue(self, issue_id: uuid.UUID) -> list[Comment]:
        # Oldest first: comments read as a conversation.
        stmt = select(Comment).where(Comment.issue_id == issue_id).order_by(Comment.created_at)
        return list((await self._session.execute(stmt)).scalars().all())

    async def set_content(self, comment: Comment, content: str) -> Comment:
        comment.content = content
        await self._session.flush()
        return comment

    async def delete(self, comment: Comment) -> None:
        await self._session.delete(comment)
        await self._session.flush()
