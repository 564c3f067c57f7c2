"""
issue_tracker.auth.visibility

List-visibility scopes.

Responsibilities:
- Describe which rows a principal may see in a list query.
- Offer a row predicate (`admits`) for in-memory filtering; repositories
  translate the same fields into SQL.

A scope is not an allow/deny answer for the whole call. The one exception is a
project-filtered issue query, where the scope carries the single project gate
decision and the guard layer turns a denial into `Forbidden`.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass

from issue_tracker.auth.models import Decision
from issue_tracker.auth.ports import IssueRecord, ProjectRecord

_UNRESTRICTED = Decision.allow("global_role")


@dataclass(frozen=True, slots=True)
class ProjectScope:
    # None means every project.
    project_ids: frozenset[uuid.UUID] | None = None

    @property
    def unrestricted(self) -> bool:
        return self.project_ids is None

    @property
    def is_empty(self) -> bool:
        return self.project_ids is not None and not self.project_ids

    def admits(self, project: ProjectRecord) -> bool:
        return self.project_ids is None or project.id in self.project_ids


@dataclass(frozen=True, slots=True)
class IssueScope:
    decision: Decision = _UNRESTRICTED
    # Restrict to issues inside these projects (None: no project restriction).
    project_ids: frozenset[uuid.UUID] | None = None
    # Restrict to issues this user reported or is assigned to.
    participant_id: uuid.UUID | None = None

    @classmethod
    def everything(cls) -> IssueScope:
        return cls()

    @classmethod
    def denied(cls, decision: Decision) -> IssueScope:
        return cls(decision=decision, project_ids=frozenset())

    @property
    def unrestricted(self) -> bool:
        return bool(self.decision) and self.project_ids is None and self.participant_id is None

    @property
    def is_empty(self) -> bool:
        return not self.decision or (self.project_ids is not None and not self.project_ids)

    def admits(self, issue: IssueRecord) -> bool:
        if not self.decision:
            return False
        if self.project_ids is not None and issue.project_id not in self.project_ids:
            return False
        if self.participant_id is not None:
            return self.participant_id in (issue.reporter_id, issue.assignee_id)
        return True


# --- Module Notes -----------------------------------------------------------
# Scopes are built by `AuthorizationEngine.project_scope` / `issue_scope`.
