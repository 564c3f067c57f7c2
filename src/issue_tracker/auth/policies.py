"""
issue_tracker.auth.policies

Authorization engine.

Responsibilities:
- Global-role and project-role checks (membership read fresh on every call).
- One named policy per protected operation family, each a disjunction of
  global roles, project roles and ownership relations.
- Build list-visibility scopes for project and issue queries.

The engine never raises for a denial; it returns a `Decision`. Turning a denial
into an error is the guard layer's job.
"""

from __future__ import annotations

import enum
import uuid
from collections.abc import Iterable
from dataclasses import dataclass

from issue_tracker.auth.models import (
    ANY_PROJECT_ROLE,
    ELEVATED_ROLES,
    Decision,
    GlobalRole,
    Principal,
    ProjectRole,
)
from issue_tracker.auth.ports import AuthStore, CommentRecord, IssueRecord, ProjectRecord
from issue_tracker.auth.visibility import IssueScope, ProjectScope


class Relation(enum.StrEnum):
    # Declaration order is the order grant reasons are reported in.
    reporter = "reporter"
    assignee = "assignee"
    author = "author"
    own_account = "self"
    project_owner = "project_owner"


@dataclass(frozen=True, slots=True)
class Policy:
    name: str
    global_roles: frozenset[GlobalRole] = frozenset()
    project_roles: frozenset[ProjectRole] = frozenset()
    relations: frozenset[Relation] = frozenset()
    # Deny outright when the principal is the target of the operation.
    deny_self: bool = False


_ADMIN = frozenset({GlobalRole.admin})
_OWNER = frozenset({ProjectRole.owner})
_OWNER_MAINTAINER = frozenset({ProjectRole.owner, ProjectRole.maintainer})
_ISSUE_PARTIES = frozenset({Relation.reporter, Relation.assignee})

ASSIGN_ISSUES = Policy("assign_issues", ELEVATED_ROLES, _OWNER_MAINTAINER)
CREATE_ISSUE = Policy("create_issue", ELEVATED_ROLES, ANY_PROJECT_ROLE)
EDIT_ISSUE = Policy("edit_issue", ELEVATED_ROLES, _OWNER_MAINTAINER, _ISSUE_PARTIES)
# Reporter/assignee may edit but not delete.
DELETE_ISSUE = Policy("delete_issue", ELEVATED_ROLES, _OWNER_MAINTAINER)
VIEW_ISSUE = Policy("view_issue", ELEVATED_ROLES, ANY_PROJECT_ROLE, _ISSUE_PARTIES)
COMMENT_ON_ISSUE = Policy("comment_on_issue", ELEVATED_ROLES, ANY_PROJECT_ROLE, _ISSUE_PARTIES)
MODIFY_COMMENT = Policy(
    "modify_comment", _ADMIN, _OWNER_MAINTAINER, frozenset({Relation.author})
)
VIEW_PROJECT = Policy(
    "view_project", ELEVATED_ROLES, ANY_PROJECT_ROLE, frozenset({Relation.project_owner})
)
MANAGE_PROJECT = Policy("manage_project", ELEVATED_ROLES, _OWNER_MAINTAINER)
DELETE_PROJECT = Policy("delete_project", ELEVATED_ROLES, _OWNER)
# Maintainers may grow a team but not reshuffle or shrink it.
ADD_PROJECT_MEMBER = Policy("add_project_member", _ADMIN, _OWNER_MAINTAINER)
CHANGE_PROJECT_MEMBER = Policy("change_project_member", _ADMIN, _OWNER, deny_self=True)
VIEW_USER = Policy("view_user", _ADMIN, relations=frozenset({Relation.own_account}))
EDIT_USER = Policy("edit_user", _ADMIN, relations=frozenset({Relation.own_account}))
LIST_USERS = Policy("list_users", ELEVATED_ROLES)
CREATE_PROJECT = Policy("create_project", _ADMIN)
ASSIGN_GLOBAL_ROLE = Policy("assign_global_role", _ADMIN)
MANAGE_USERS = Policy("manage_users", _ADMIN)

POLICIES: dict[str, Policy] = {
    p.name: p
    for p in (
        ASSIGN_ISSUES,
        CREATE_ISSUE,
        EDIT_ISSUE,
        DELETE_ISSUE,
        VIEW_ISSUE,
        COMMENT_ON_ISSUE,
        MODIFY_COMMENT,
        VIEW_PROJECT,
        MANAGE_PROJECT,
        DELETE_PROJECT,
        ADD_PROJECT_MEMBER,
        CHANGE_PROJECT_MEMBER,
        VIEW_USER,
        EDIT_USER,
        LIST_USERS,
        CREATE_PROJECT,
        ASSIGN_GLOBAL_ROLE,
        MANAGE_USERS,
    )
}


def issue_relations(principal: Principal, issue: IssueRecord) -> frozenset[Relation]:
    held: set[Relation] = set()
    if issue.reporter_id == principal.id:
        held.add(Relation.reporter)
    if issue.assignee_id is not None and issue.assignee_id == principal.id:
        held.add(Relation.assignee)
    return frozenset(held)


class AuthorizationEngine:
    def __init__(self, store: AuthStore) -> None:
        self._store = store

    # -- building blocks -----------------------------------------------------

    @staticmethod
    def has_global_role(principal: Principal, allowed: Iterable[GlobalRole]) -> bool:
        return principal.is_active and principal.global_role in frozenset(allowed)

    async def has_project_role(
        self,
        user_id: uuid.UUID,
        project_id: uuid.UUID,
        allowed: Iterable[ProjectRole],
    ) -> bool:
        # Fails closed: no membership row (or unknown user/project) is a plain False.
        membership = await self._store.get_membership(user_id, project_id)
        if membership is None:
            return False
        return membership.project_role in frozenset(allowed)

    async def evaluate(
        self,
        policy: Policy,
        principal: Principal,
        *,
        project_id: uuid.UUID | None = None,
        relations: frozenset[Relation] = frozenset(),
        target_user_id: uuid.UUID | None = None,
    ) -> Decision:
        if not principal.is_active:
            return Decision.deny("inactive")
        if policy.deny_self and target_user_id == principal.id:
            return Decision.deny("self_modification")

        held = policy.relations & relations
        if held:
            return Decision.allow(next(r.value for r in Relation if r in held))
        if self.has_global_role(principal, policy.global_roles):
            return Decision.allow("global_role")
        # Membership lookup last: it is the only path that touches storage.
        if policy.project_roles and project_id is not None:
            if await self.has_project_role(principal.id, project_id, policy.project_roles):
                return Decision.allow("project_role")
        return Decision.deny()

    # -- issues --------------------------------------------------------------

    async def can_assign_issues(self, principal: Principal, project_id: uuid.UUID) -> Decision:
        return await self.evaluate(ASSIGN_ISSUES, principal, project_id=project_id)

    async def can_create_issue(self, principal: Principal, project_id: uuid.UUID) -> Decision:
        return await self.evaluate(CREATE_ISSUE, principal, project_id=project_id)

    async def can_edit_issue(self, principal: Principal, issue: IssueRecord) -> Decision:
        return await self.evaluate(
            EDIT_ISSUE,
            principal,
            project_id=issue.project_id,
            relations=issue_relations(principal, issue),
        )

    async def can_delete_issue(self, principal: Principal, issue: IssueRecord) -> Decision:
        return await self.evaluate(DELETE_ISSUE, principal, project_id=issue.project_id)

    async def can_view_issue(self, principal: Principal, issue: IssueRecord) -> Decision:
        return await self.evaluate(
            VIEW_ISSUE,
            principal,
            project_id=issue.project_id,
            relations=issue_relations(principal, issue),
        )

    async def can_comment_on_issue(self, principal: Principal, issue: IssueRecord) -> Decision:
        return await self.evaluate(
            COMMENT_ON_ISSUE,
            principal,
            project_id=issue.project_id,
            relations=issue_relations(principal, issue),
        )

    # -- comments ------------------------------------------------------------

    async def can_modify_comment(self, principal: Principal, comment: CommentRecord) -> Decision:
        relations = (
            frozenset({Relation.author}) if comment.author_id == principal.id else frozenset()
        )
        issue = await self._store.get_issue(comment.issue_id)
        return await self.evaluate(
            MODIFY_COMMENT,
            principal,
            project_id=issue.project_id if issue is not None else None,
            relations=relations,
        )

    # -- projects ------------------------------------------------------------

    async def can_view_project(self, principal: Principal, project: ProjectRecord) -> Decision:
        relations = (
            frozenset({Relation.project_owner})
            if project.owner_id is not None and project.owner_id == principal.id
            else frozenset()
        )
        return await self.evaluate(
            VIEW_PROJECT, principal, project_id=project.id, relations=relations
        )

    async def can_manage_project(self, principal: Principal, project_id: uuid.UUID) -> Decision:
        return await self.evaluate(MANAGE_PROJECT, principal, project_id=project_id)

    async def can_delete_project(self, principal: Principal, project_id: uuid.UUID) -> Decision:
        return await self.evaluate(DELETE_PROJECT, principal, project_id=project_id)

    async def can_add_project_member(
        self, principal: Principal, project_id: uuid.UUID
    ) -> Decision:
        return await self.evaluate(ADD_PROJECT_MEMBER, principal, project_id=project_id)

    async def can_change_project_member(
        self,
        principal: Principal,
        project_id: uuid.UUID,
        member_user_id: uuid.UUID,
    ) -> Decision:
        """Role change or removal of `member_user_id`; never allowed on oneself."""
        return await self.evaluate(
            CHANGE_PROJECT_MEMBER,
            principal,
            project_id=project_id,
            target_user_id=member_user_id,
        )

    async def can_create_project(self, principal: Principal) -> Decision:
        return await self.evaluate(CREATE_PROJECT, principal)

    # -- users ---------------------------------------------------------------

    async def can_view_user(self, principal: Principal, user_id: uuid.UUID) -> Decision:
        return await self.evaluate(
            VIEW_USER, principal, relations=_account_relations(principal, user_id)
        )

    async def can_edit_user(self, principal: Principal, user_id: uuid.UUID) -> Decision:
        return await self.evaluate(
            EDIT_USER, principal, relations=_account_relations(principal, user_id)
        )

    async def can_list_users(self, principal: Principal) -> Decision:
        return await self.evaluate(LIST_USERS, principal)

    async def can_manage_users(self, principal: Principal) -> Decision:
        return await self.evaluate(MANAGE_USERS, principal)

    async def can_assign_global_role(self, principal: Principal, role: GlobalRole) -> Decision:
        if role == GlobalRole.user:
            return Decision.allow("default_role")
        return await self.evaluate(ASSIGN_GLOBAL_ROLE, principal)

    # -- list visibility -----------------------------------------------------

    async def project_scope(self, principal: Principal) -> ProjectScope:
        if self.has_global_role(principal, ELEVATED_ROLES):
            return ProjectScope()
        return ProjectScope(project_ids=await self._store.visible_project_ids(principal.id))

    async def issue_scope(
        self, principal: Principal, project: ProjectRecord | None = None
    ) -> IssueScope:
        if project is not None:
            # Explicit project filter: one gate for the whole query, no per-row filtering.
            decision = await self.can_view_project(principal, project)
            if not decision:
                return IssueScope.denied(decision)
            return IssueScope(decision=decision, project_ids=frozenset({project.id}))

        if self.has_global_role(principal, ELEVATED_ROLES):
            return IssueScope.everything()
        if principal.global_role == GlobalRole.user:
            return IssueScope(participant_id=principal.id)
        return IssueScope(project_ids=await self._store.visible_project_ids(principal.id))


def _account_relations(principal: Principal, user_id: uuid.UUID) -> frozenset[Relation]:
    return frozenset({Relation.own_account}) if user_id == principal.id else frozenset()


# --- Module Notes -----------------------------------------------------------
# Policies are compiled-in data; adding an operation means adding one `Policy`
# entry and one `can_*` method, plus a test per grant path.
