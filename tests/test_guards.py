"""
tests.test_guards

Guard layer: failed checks become `Forbidden`, missing identity is its own condition.
"""

from __future__ import annotations

import uuid

import pytest
from helpers import InMemoryAuthStore, principal_of

from issue_tracker.auth.errors import AccountInactive, AuthenticationRequired, Forbidden
from issue_tracker.auth.guards import Guards, require_authenticated
from issue_tracker.auth.models import Decision, GlobalRole, Principal, ProjectRole
from issue_tracker.auth.policies import AuthorizationEngine


@pytest.fixture
def guards(store: InMemoryAuthStore) -> Guards:
    return Guards(AuthorizationEngine(store))


def test_require_authenticated() -> None:
    principal = Principal(id=uuid.uuid4(), global_role=GlobalRole.user, is_active=True)
    assert require_authenticated(principal) is principal

    with pytest.raises(AuthenticationRequired):
        require_authenticated(None)

    stale = Principal(id=principal.id, global_role=GlobalRole.user, is_active=False)
    with pytest.raises(AccountInactive):
        require_authenticated(stale)


def test_require_global_uses_caller_message(guards: Guards, store: InMemoryAuthStore) -> None:
    user = principal_of(store.add_user("u"))

    with pytest.raises(Forbidden) as exc:
        guards.require_global(user, {GlobalRole.admin}, "Only admins can create projects")
    assert exc.value.message == "Only admins can create projects"


def test_require_global_default_message(guards: Guards, store: InMemoryAuthStore) -> None:
    user = principal_of(store.add_user("u"))

    with pytest.raises(Forbidden) as exc:
        guards.require_global(user, {GlobalRole.manager})
    assert exc.value.message == Forbidden.default_message


@pytest.mark.asyncio
async def test_require_project(guards: Guards, store: InMemoryAuthStore) -> None:
    user = store.add_user("u")
    project = store.add_project()

    with pytest.raises(Forbidden):
        await guards.require_project(user.id, project.id, {ProjectRole.owner})

    store.add_member(user, project, ProjectRole.owner)
    await guards.require_project(user.id, project.id, {ProjectRole.owner})


def test_require_passes_allowed_decisions(guards: Guards, store: InMemoryAuthStore) -> None:
    user = principal_of(store.add_user("u"))

    guards.require(user, Decision.allow("reporter"))
    with pytest.raises(Forbidden):
        guards.require(user, Decision.deny(), "No permission to edit this issue")


class _RecordingLog:
    def __init__(self) -> None:
        self.events: list[tuple[str, dict]] = []

    def info(self, event: str, **kw) -> None:
        self.events.append((event, kw))


@pytest.mark.asyncio
async def test_every_denial_logs_the_same_fields(
    guards: Guards, store: InMemoryAuthStore, monkeypatch: pytest.MonkeyPatch
) -> None:
    recorder = _RecordingLog()
    monkeypatch.setattr("issue_tracker.auth.guards.log", recorder)
    user = store.add_user("u")
    project = store.add_project()

    with pytest.raises(Forbidden):
        await guards.require_project(user.id, project.id, {ProjectRole.owner}, "Owners only")
    with pytest.raises(Forbidden):
        guards.require(principal_of(user), Decision.deny(), "No permission to edit this issue")

    (project_event, project_fields), (policy_event, policy_fields) = recorder.events
    assert project_event == policy_event == "authz_denied"
    assert project_fields.keys() == policy_fields.keys()
    assert project_fields["reason"] == "project_role"
    assert project_fields["detail"] == "Owners only"
    assert project_fields["user_id"] == str(user.id)
