"""
issue_tracker.auth.models

Auth domain models.

Responsibilities:
- Role enumerations (global and project-scoped).
- The authenticated identity type (`Principal`) handed to services.
- Token claims and authorization decision value types.
"""

from __future__ import annotations

import enum
import uuid
from dataclasses import dataclass
from datetime import datetime


class GlobalRole(enum.StrEnum):
    # Evaluated as set membership, never as a rank.
    admin = "ADMIN"
    manager = "MANAGER"
    developer = "DEVELOPER"
    user = "USER"


class ProjectRole(enum.StrEnum):
    owner = "OWNER"
    maintainer = "MAINTAINER"
    developer = "DEVELOPER"
    reporter = "REPORTER"
    member = "MEMBER"


ELEVATED_ROLES: frozenset[GlobalRole] = frozenset({GlobalRole.admin, GlobalRole.manager})
ANY_PROJECT_ROLE: frozenset[ProjectRole] = frozenset(ProjectRole)


@dataclass(frozen=True, slots=True)
class Principal:
    """
    Authenticated caller for one request.

    Built by the identity resolver from a verified token plus a live user read;
    never persisted.
    """

    id: uuid.UUID
    global_role: GlobalRole
    is_active: bool

    @property
    def is_elevated(self) -> bool:
        return self.is_active and self.global_role in ELEVATED_ROLES


@dataclass(frozen=True, slots=True)
class TokenClaims:
    subject_id: uuid.UUID
    global_role: GlobalRole
    issued_at: datetime
    expires_at: datetime


@dataclass(frozen=True, slots=True)
class Decision:
    """
    Result of one authorization check.

    `reason` names the grant path when allowed and the cause when denied.
    """

    allowed: bool
    reason: str | None = None

    def __bool__(self) -> bool:
        return self.allowed

    @classmethod
    def allow(cls, reason: str) -> Decision:
        return cls(allowed=True, reason=reason)

    @classmethod
    def deny(cls, reason: str = "no_grant") -> Decision:
        return cls(allowed=False, reason=reason)


# --- Module Notes -----------------------------------------------------------
# Keep these types free of ORM imports; `db.models` reuses the role enums.
