"""
issue_tracker.db.models

Persistence schema for the issue tracker.

Responsibilities:
- Define ORM models:
  - User: account, credentials digest, global role, active flag
  - Project / ProjectMember: projects and per-(user, project) roles
  - Issue: work items with reporter/assignee ownership
  - Comment: discussion on issues with an author
"""

from __future__ import annotations

import enum
import uuid
from datetime import UTC, datetime

from sqlalchemy import Enum, ForeignKey, String, Text, UniqueConstraint, Uuid as SAUuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from issue_tracker.auth.models import GlobalRole, ProjectRole
from issue_tracker.db.base import Base


def _utcnow() -> datetime:
    # Persist naive UTC timestamps; SQLite has no timezone-aware type.
    return datetime.now(tz=UTC).replace(tzinfo=None)


def _enum(enum_cls: type[enum.Enum]) -> Enum:
    # Store enum values ("OWNER"), not member names ("owner"); values are the API contract.
    return Enum(enum_cls, values_callable=lambda members: [m.value for m in members])


class IssueStatus(enum.StrEnum):
    todo = "TODO"
    in_progress = "IN_PROGRESS"
    in_review = "IN_REVIEW"
    done = "DONE"


class IssuePriority(enum.StrEnum):
    low = "LOW"
    medium = "MEDIUM"
    high = "HIGH"
    urgent = "URGENT"


class IssueType(enum.StrEnum):
    bug = "BUG"
    feature = "FEATURE"
    task = "TASK"
    enhancement = "ENHANCEMENT"


class User(Base):
    __tablename__ = "users"

    id: Mapped[uuid.UUID] = mapped_column(
        SAUuid(as_uuid=True), primary_key=True, default=uuid.uuid4
    )
    username: Mapped[str] = mapped_column(String(64), nullable=False, unique=True)
    email: Mapped[str] = mapped_column(String(256), nullable=False, unique=True)
    name: Mapped[str | None] = mapped_column(String(256), nullable=True)
    password_hash: Mapped[str] = mapped_column(String(128), nullable=False)

    role: Mapped[GlobalRole] = mapped_column(
        _enum(GlobalRole), nullable=False, default=GlobalRole.user
    )
    is_active: Mapped[bool] = mapped_column(nullable=False, default=True)

    created_at: Mapped[datetime] = mapped_column(nullable=False, default=_utcnow)
    updated_at: Mapped[datetime] = mapped_column(nullable=False, default=_utcnow, onupdate=_utcnow)

    memberships: Mapped[list[ProjectMember]] = relationship(
        back_populates="user", cascade="all, delete-orphan"
    )
    reported_issues: Mapped[list[Issue]] = relationship(
        foreign_keys="Issue.reporter_id", cascade="all, delete-orphan"
    )
    # No cascade: deleting a user unassigns their issues (assignee_id set to NULL).
    assigned_issues: Mapped[list[Issue]] = relationship(foreign_keys="Issue.assignee_id")
    owned_projects: Mapped[list[Project]] = relationship(foreign_keys="Project.owner_id")
    comments: Mapped[list[Comment]] = relationship(cascade="all, delete-orphan")


class Project(Base):
    __tablename__ = "projects"

    id: Mapped[uuid.UUID] = mapped_column(
        SAUuid(as_uuid=True), primary_key=True, default=uuid.uuid4
    )
    name: Mapped[str] = mapped_column(String(128), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    owner_id: Mapped[uuid.UUID | None] = mapped_column(
        SAUuid(as_uuid=True), ForeignKey("users.id"), nullable=True, index=True
    )

    created_at: Mapped[datetime] = mapped_column(nullable=False, default=_utcnow)
    updated_at: Mapped[datetime] = mapped_column(nullable=False, default=_utcnow, onupdate=_utcnow)

    members: Mapped[list[ProjectMember]] = relationship(
        back_populates="project", cascade="all, delete-orphan"
    )
    issues: Mapped[list[Issue]] = relationship(
        back_populates="project", cascade="all, delete-orphan"
    )


class ProjectMember(Base):
    __tablename__ = "project_members"

    id: Mapped[uuid.UUID] = mapped_column(
        SAUuid(as_uuid=True), primary_key=True, default=uuid.uuid4
    )
    user_id: Mapped[uuid.UUID] = mapped_column(
        SAUuid(as_uuid=True), ForeignKey("users.id"), nullable=False, index=True
    )
    project_id: Mapped[uuid.UUID] = mapped_column(
        SAUuid(as_uuid=True), ForeignKey("projects.id"), nullable=False, index=True
    )
    project_role: Mapped[ProjectRole] = mapped_column(
        _enum(ProjectRole), nullable=False, default=ProjectRole.member
    )
    joined_at: Mapped[datetime] = mapped_column(nullable=False, default=_utcnow)

    user: Mapped[User] = relationship(back_populates="memberships")
    project: Mapped[Project] = relationship(back_populates="members")

    # At most one role per (user, project).
    __table_args__ = (UniqueConstraint("user_id", "project_id", name="uq_member_user_project"),)


class Issue(Base):
    __tablename__ = "issues"

    id: Mapped[uuid.UUID] = mapped_column(
        SAUuid(as_uuid=True), primary_key=True, default=uuid.uuid4
    )
    title: Mapped[str] = mapped_column(String(256), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    status: Mapped[IssueStatus] = mapped_column(
        _enum(IssueStatus), nullable=False, default=IssueStatus.todo, index=True
    )
    priority: Mapped[IssuePriority] = mapped_column(
        _enum(IssuePriority), nullable=False, default=IssuePriority.medium
    )
    type: Mapped[IssueType] = mapped_column(
        _enum(IssueType), nullable=False, default=IssueType.task
    )

    project_id: Mapped[uuid.UUID] = mapped_column(
        SAUuid(as_uuid=True), ForeignKey("projects.id"), nullable=False, index=True
    )
    reporter_id: Mapped[uuid.UUID] = mapped_column(
        SAUuid(as_uuid=True), ForeignKey("users.id"), nullable=False, index=True
    )
    assignee_id: Mapped[uuid.UUID | None] = mapped_column(
        SAUuid(as_uuid=True), ForeignKey("users.id"), nullable=True, index=True
    )

    created_at: Mapped[datetime] = mapped_column(nullable=False, default=_utcnow)
    updated_at: Mapped[datetime] = mapped_column(nullable=False, default=_utcnow, onupdate=_utcnow)

    project: Mapped[Project] = relationship(back_populates="issues")
    comments: Mapped[list[Comment]] = relationship(
        back_populates="issue", cascade="all, delete-orphan"
    )


class Comment(Base):
    __tablename__ = "comments"

    id: Mapped[uuid.UUID] = mapped_column(
        SAUuid(as_uuid=True), primary_key=True, default=uuid.uuid4
    )
    content: Mapped[str] = mapped_column(Text, nullable=False)
    issue_id: Mapped[uuid.UUID] = mapped_column(
        SAUuid(as_uuid=True), ForeignKey("issues.id"), nullable=False, index=True
    )
    author_id: Mapped[uuid.UUID] = mapped_column(
        SAUuid(as_uuid=True), ForeignKey("users.id"), nullable=False, index=True
    )

    created_at: Mapped[datetime] = mapped_column(nullable=False, default=_utcnow)
    updated_at: Mapped[datetime] = mapped_column(nullable=False, default=_utcnow, onupdate=_utcnow)

    issue: Mapped[Issue] = relationship(back_populates="comments")


# --- Module Notes -----------------------------------------------------------
# Ownership columns (reporter_id, assignee_id, author_id, owner_id) are read by
# the auth core through `auth.ports`; they are not permissions in themselves.
