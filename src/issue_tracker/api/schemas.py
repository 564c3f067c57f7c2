"""
issue_tracker.api.schemas

Response models shared across routers.
"""

from __future__ import annotations

import uuid
from datetime import datetime

from pydantic import BaseModel, ConfigDict

from issue_tracker.auth.models import GlobalRole, ProjectRole
from issue_tracker.db.models import IssuePriority, IssueStatus, IssueType


class UserOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    username: str
    email: str
    name: str | None = None
    role: GlobalRole
    is_active: bool


class SessionOut(BaseModel):
    token: str
    token_type: str = "bearer"
    user: UserOut


class ProjectOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    name: str
    description: str | None = None
    owner_id: uuid.UUID | None = None
    created_at: datetime
    updated_at: datetime


class MemberOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    user_id: uuid.UUID
    project_id: uuid.UUID
    project_role: ProjectRole
    joined_at: datetime


class IssueOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    title: str
    description: str | None = None
    status: IssueStatus
    priority: IssuePriority
    type: IssueType
    project_id: uuid.UUID
    reporter_id: uuid.UUID
    assignee_id: uuid.UUID | None = None
    created_at: datetime
    updated_at: datetime


class CommentOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    content: str
    issue_id: uuid.UUID
    author_id: uuid.UUID
    created_at: datetime
    updated_at: datetime
