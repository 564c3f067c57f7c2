"""
tests.helpers

Test doubles and seeding helpers shared by the unit and API suites.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field

import httpx
from fastapi import FastAPI

from issue_tracker.auth.models import GlobalRole, Principal, ProjectRole
from issue_tracker.auth.passwords import PasswordHasher
from issue_tracker.db.repositories.users import UserRepo

TEST_SECRET = "test-signing-secret"
TEST_PASSWORD = "correct-horse-battery"


@dataclass
class FakeUser:
    username: str
    role: GlobalRole = GlobalRole.user
    is_active: bool = True
    password_hash: str = ""
    email: str = ""
    name: str | None = None
    id: uuid.UUID = field(default_factory=uuid.uuid4)


@dataclass
class FakeProject:
    owner_id: uuid.UUID | None = None
    id: uuid.UUID = field(default_factory=uuid.uuid4)


@dataclass
class FakeMembership:
    user_id: uuid.UUID
    project_id: uuid.UUID
    project_role: ProjectRole


@dataclass
class FakeIssue:
    project_id: uuid.UUID
    reporter_id: uuid.UUID
    assignee_id: uuid.UUID | None = None
    id: uuid.UUID = field(default_factory=uuid.uuid4)


@dataclass
class FakeComment:
    issue_id: uuid.UUID
    author_id: uuid.UUID
    id: uuid.UUID = field(default_factory=uuid.uuid4)


class InMemoryAuthStore:
    """Dict-backed `AuthStore`; lookups are live, like the SQL implementation."""

    def __init__(self) -> None:
        self.users: dict[uuid.UUID, FakeUser] = {}
        self.projects: dict[uuid.UUID, FakeProject] = {}
        self.memberships: dict[tuple[uuid.UUID, uuid.UUID], FakeMembership] = {}
        self.issues: dict[uuid.UUID, FakeIssue] = {}
        self.comments: dict[uuid.UUID, FakeComment] = {}

    def add_user(self, username: str, role: GlobalRole = GlobalRole.user, **kw) -> FakeUser:
        user = FakeUser(username=username, role=role, email=f"{username}@example.test", **kw)
        self.users[user.id] = user
        return user

    def add_project(self, owner: FakeUser | None = None) -> FakeProject:
        project = FakeProject(owner_id=owner.id if owner else None)
        self.projects[project.id] = project
        return project

    def add_member(
        self, user: FakeUser, project: FakeProject, role: ProjectRole = ProjectRole.member
    ) -> FakeMembership:
        membership = FakeMembership(user_id=user.id, project_id=project.id, project_role=role)
        self.memberships[(user.id, project.id)] = membership
        return membership

    def remove_member(self, user: FakeUser, project: FakeProject) -> None:
        self.memberships.pop((user.id, project.id), None)

    def add_issue(
        self, project: FakeProject, reporter: FakeUser, assignee: FakeUser | None = None
    ) -> FakeIssue:
        issue = FakeIssue(
            project_id=project.id,
            reporter_id=reporter.id,
            assignee_id=assignee.id if assignee else None,
        )
        self.issues[issue.id] = issue
        return issue

    def add_comment(self, issue: FakeIssue, author: FakeUser) -> FakeComment:
        comment = FakeComment(issue_id=issue.id, author_id=author.id)
        self.comments[comment.id] = comment
        return comment

    # -- AuthStore -----------------------------------------------------------

    async def get_user(self, user_id: uuid.UUID) -> FakeUser | None:
        return self.users.get(user_id)

    async def get_user_by_username(self, username: str) -> FakeUser | None:
        return next((u for u in self.users.values() if u.username == username), None)

    async def get_membership(
        self, user_id: uuid.UUID, project_id: uuid.UUID
    ) -> FakeMembership | None:
        return self.memberships.get((user_id, project_id))

    async def get_issue(self, issue_id: uuid.UUID) -> FakeIssue | None:
        return self.issues.get(issue_id)

    async def visible_project_ids(self, user_id: uuid.UUID) -> frozenset[uuid.UUID]:
        owned = {p.id for p in self.projects.values() if p.owner_id == user_id}
        member = {pid for (uid, pid) in self.memberships if uid == user_id}
        return frozenset(owned | member)


def principal_of(user: FakeUser) -> Principal:
    return Principal(id=user.id, global_role=user.role, is_active=user.is_active)


async def seed_user(
    app: FastAPI,
    username: str,
    role: GlobalRole = GlobalRole.user,
    password: str = TEST_PASSWORD,
) -> uuid.UUID:
    """Insert a user directly; registration over HTTP can only produce `USER`s."""
    async with app.state.sessionmaker() as session:
        user = await UserRepo(session).create(
            username=username,
            email=f"{username}@example.test",
            password_hash=PasswordHasher(rounds=4).hash(password),
            name=None,
            role=role,
        )
        await session.commit()
        return user.id


async def login(client: httpx.AsyncClient, username: str, password: str = TEST_PASSWORD) -> dict:
    r = await client.post("/v1/auth/login", json={"username": username, "password": password})
    assert r.status_code == 200, r.text
    return {"Authorization": f"Bearer {r.json()['token']}"}
