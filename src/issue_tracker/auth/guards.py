"""
issue_tracker.auth.guards

Guard layer: turn failed checks into structured denials.

Responsibilities:
- Require an authenticated, active principal.
- Wrap global/project role checks and composite policy decisions, raising
  `Forbidden` with a caller-chosen or generic message.
"""

from __future__ import annotations

import uuid
from collections.abc import Iterable

from issue_tracker.auth.errors import AccountInactive, AuthenticationRequired, Forbidden
from issue_tracker.auth.models import Decision, GlobalRole, Principal, ProjectRole
from issue_tracker.auth.policies import AuthorizationEngine
from issue_tracker.auth.visibility import IssueScope
from issue_tracker.observability.logging import get_logger

log = get_logger(__name__)


def require_authenticated(principal: Principal | None) -> Principal:
    if principal is None:
        raise AuthenticationRequired()
    # A Principal may outlive the row it was read from within one request.
    if not principal.is_active:
        raise AccountInactive("User account is inactive")
    return principal


class Guards:
    def __init__(self, engine: AuthorizationEngine) -> None:
        self._engine = engine

    @property
    def engine(self) -> AuthorizationEngine:
        return self._engine

    def require_global(
        self,
        principal: Principal,
        roles: Iterable[GlobalRole],
        message: str | None = None,
    ) -> None:
        if not self._engine.has_global_role(principal, roles):
            _deny(principal.id, principal.global_role, "global_role", message)

    async def require_project(
        self,
        user_id: uuid.UUID,
        project_id: uuid.UUID,
        roles: Iterable[ProjectRole],
        message: str | None = None,
    ) -> None:
        if not await self._engine.has_project_role(user_id, project_id, roles):
            _deny(user_id, None, "project_role", message)

    def require(self, principal: Principal, decision: Decision, message: str | None = None) -> None:
        if not decision:
            _deny(principal.id, principal.global_role, decision.reason, message)

    def require_visible(
        self, principal: Principal, scope: IssueScope, message: str | None = None
    ) -> IssueScope:
        self.require(principal, scope.decision, message)
        return scope


def _deny(
    user_id: uuid.UUID,
    role: GlobalRole | None,
    reason: str | None,
    message: str | None,
) -> None:
    # Project-only checks have no principal in hand, so role may be unknown.
    log.info(
        "authz_denied",
        user_id=str(user_id),
        role=role.value if role is not None else None,
        reason=reason,
        detail=message,
    )
    raise Forbidden(message)


# --- Module Notes -----------------------------------------------------------
# The condition kind is always `Forbidden`; messages are for UX only.
