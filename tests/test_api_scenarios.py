"""
tests.test_api_scenarios

End-to-end flows over HTTP against a real (SQLite) database.
"""

from __future__ import annotations

import httpx
import pytest
from fastapi import FastAPI
from helpers import login, seed_user

from issue_tracker.auth.models import GlobalRole


async def _register(client: httpx.AsyncClient, username: str) -> dict:
    r = await client.post(
        "/v1/auth/register",
        json={
            "username": username,
            "email": f"{username}@example.test",
            "password": "s3cret-password",
        },
    )
    assert r.status_code == 201, r.text
    return r.json()


@pytest.mark.asyncio
async def test_register_and_login(client: httpx.AsyncClient) -> None:
    registered = await _register(client, "alice")
    alice_id = registered["user"]["id"]
    assert registered["user"]["role"] == "USER"
    assert "password_hash" not in registered["user"]

    r = await client.post(
        "/v1/auth/login", json={"username": "alice", "password": "s3cret-password"}
    )
    assert r.status_code == 200
    token = r.json()["token"]

    r = await client.get("/v1/auth/me", headers={"Authorization": f"Bearer {token}"})
    assert r.status_code == 200
    assert r.json()["id"] == alice_id
    assert r.json()["role"] == "USER"

    wrong_pw = await client.post(
        "/v1/auth/login", json={"username": "alice", "password": "not-the-password"}
    )
    no_user = await client.post(
        "/v1/auth/login", json={"username": "bob", "password": "s3cret-password"}
    )
    assert wrong_pw.status_code == no_user.status_code == 401
    assert wrong_pw.json() == no_user.json() == {
        "detail": "Invalid credentials",
        "code": "INVALID_CREDENTIALS",
    }


@pytest.mark.asyncio
async def test_duplicate_registration_conflicts(client: httpx.AsyncClient) -> None:
    await _register(client, "alice")

    r = await client.post(
        "/v1/auth/register",
        json={"username": "alice", "email": "other@example.test", "password": "s3cret-password"},
    )
    assert r.status_code == 409


@pytest.mark.asyncio
async def test_project_issue_lifecycle(app: FastAPI, client: httpx.AsyncClient) -> None:
    await seed_user(app, "root", GlobalRole.admin)
    admin = await login(client, "root")
    alice_id = (await _register(client, "alice"))["user"]["id"]
    bob_id = (await _register(client, "bob"))["user"]["id"]
    alice = await login(client, "alice", "s3cret-password")
    bob = await login(client, "bob", "s3cret-password")

    r = await client.post("/v1/projects", json={"name": "P"}, headers=admin)
    assert r.status_code == 201, r.text
    project_id = r.json()["id"]

    r = await client.get(f"/v1/projects/{project_id}/members", headers=admin)
    assert [m["project_role"] for m in r.json()] == ["OWNER"]

    for user_id in (alice_id, bob_id):
        r = await client.post(
            f"/v1/projects/{project_id}/members",
            json={"user_id": user_id, "project_role": "MEMBER"},
            headers=admin,
        )
        assert r.status_code == 201, r.text

    r = await client.post(
        "/v1/issues", json={"project_id": project_id, "title": "Broken"}, headers=alice
    )
    assert r.status_code == 201, r.text
    issue = r.json()
    assert issue["reporter_id"] == alice_id

    r = await client.patch(
        f"/v1/issues/{issue['id']}", json={"title": "Broken login"}, headers=alice
    )
    assert r.status_code == 200
    assert r.json()["title"] == "Broken login"

    r = await client.patch(f"/v1/issues/{issue['id']}", json={"title": "Mine now"}, headers=bob)
    assert r.status_code == 403
    assert r.json()["code"] == "FORBIDDEN"

    # Reporter edits but cannot delete.
    r = await client.delete(f"/v1/issues/{issue['id']}", headers=alice)
    assert r.status_code == 403

    r = await client.delete(f"/v1/issues/{issue['id']}", headers=admin)
    assert r.status_code == 204
    r = await client.get(f"/v1/issues/{issue['id']}", headers=admin)
    assert r.status_code == 404


@pytest.mark.asyncio
async def test_assignment_grants_edit(app: FastAPI, client: httpx.AsyncClient) -> None:
    await seed_user(app, "root", GlobalRole.admin)
    admin = await login(client, "root")
    bob_id = (await _register(client, "bob"))["user"]["id"]
    bob = await login(client, "bob", "s3cret-password")

    project_id = (await client.post("/v1/projects", json={"name": "P"}, headers=admin)).json()["id"]
    await client.post(
        f"/v1/projects/{project_id}/members", json={"user_id": bob_id}, headers=admin
    )
    issue_id = (
        await client.post(
            "/v1/issues", json={"project_id": project_id, "title": "T"}, headers=admin
        )
    ).json()["id"]

    r = await client.patch(f"/v1/issues/{issue_id}", json={"status": "DONE"}, headers=bob)
    assert r.status_code == 403

    # Members cannot hand issues to themselves.
    r = await client.patch(f"/v1/issues/{issue_id}", json={"assignee_id": bob_id}, headers=bob)
    assert r.status_code == 403

    r = await client.patch(f"/v1/issues/{issue_id}", json={"assignee_id": bob_id}, headers=admin)
    assert r.status_code == 200

    r = await client.patch(f"/v1/issues/{issue_id}", json={"status": "DONE"}, headers=bob)
    assert r.status_code == 200
    assert r.json()["status"] == "DONE"

    r = await client.get(f"/v1/users/{bob_id}/assigned-issues", headers=bob)
    assert [i["id"] for i in r.json()] == [issue_id]


@pytest.mark.asyncio
async def test_issue_list_empty_versus_forbidden(app: FastAPI, client: httpx.AsyncClient) -> None:
    await seed_user(app, "root", GlobalRole.admin)
    admin = await login(client, "root")
    await _register(client, "alice")
    alice = await login(client, "alice", "s3cret-password")
    project_id = (await client.post("/v1/projects", json={"name": "P"}, headers=admin)).json()["id"]
    await client.post("/v1/issues", json={"project_id": project_id, "title": "T"}, headers=admin)

    r = await client.get("/v1/issues", headers=alice)
    assert r.status_code == 200
    assert r.json() == []

    r = await client.get("/v1/issues", params={"project_id": project_id}, headers=alice)
    assert r.status_code == 403

    r = await client.get("/v1/issues", params={"project_id": project_id}, headers=admin)
    assert len(r.json()) == 1

    r = await client.get("/v1/projects", headers=alice)
    assert r.json() == []


@pytest.mark.asyncio
async def test_deactivation_revokes_session(app: FastAPI, client: httpx.AsyncClient) -> None:
    await seed_user(app, "root", GlobalRole.admin)
    admin = await login(client, "root")
    alice_id = (await _register(client, "alice"))["user"]["id"]
    alice = await login(client, "alice", "s3cret-password")

    r = await client.patch(f"/v1/users/{alice_id}", json={"is_active": False}, headers=alice)
    assert r.status_code == 403

    r = await client.patch(f"/v1/users/{alice_id}", json={"is_active": False}, headers=admin)
    assert r.status_code == 200

    r = await client.get("/v1/auth/me", headers=alice)
    assert r.status_code == 401
    assert r.json()["code"] == "UNKNOWN_OR_INACTIVE_SUBJECT"

    r = await client.post(
        "/v1/auth/login", json={"username": "alice", "password": "s3cret-password"}
    )
    assert r.status_code == 403
    assert r.json()["code"] == "ACCOUNT_INACTIVE"


@pytest.mark.asyncio
async def test_owner_cannot_remove_self(app: FastAPI, client: httpx.AsyncClient) -> None:
    admin_id = await seed_user(app, "root", GlobalRole.admin)
    admin = await login(client, "root")
    project_id = (await client.post("/v1/projects", json={"name": "P"}, headers=admin)).json()["id"]

    r = await client.delete(f"/v1/projects/{project_id}/members/{admin_id}", headers=admin)
    assert r.status_code == 403
    assert r.json()["detail"] == "You cannot change your own project membership"


@pytest.mark.asyncio
async def test_missing_and_invalid_credentials(client: httpx.AsyncClient) -> None:
    r = await client.get("/v1/auth/me")
    assert r.status_code == 401
    assert r.json()["code"] == "AUTHENTICATION_REQUIRED"
    assert r.headers["www-authenticate"] == "Bearer"

    r = await client.get("/v1/auth/me", headers={"Authorization": "Bearer nope"})
    assert r.status_code == 401
    assert r.json()["code"] == "INVALID_TOKEN"


@pytest.mark.asyncio
async def test_comment_moderation(app: FastAPI, client: httpx.AsyncClient) -> None:
    await seed_user(app, "root", GlobalRole.admin)
    await seed_user(app, "mgr", GlobalRole.manager)
    admin = await login(client, "root")
    manager = await login(client, "mgr")
    project_id = (await client.post("/v1/projects", json={"name": "P"}, headers=admin)).json()["id"]
    issue_id = (
        await client.post(
            "/v1/issues", json={"project_id": project_id, "title": "T"}, headers=admin
        )
    ).json()["id"]

    r = await client.post(
        f"/v1/issues/{issue_id}/comments", json={"content": "hello"}, headers=manager
    )
    assert r.status_code == 201
    comment_id = r.json()["id"]

    r = await client.patch(f"/v1/comments/{comment_id}", json={"content": "edited"}, headers=admin)
    assert r.status_code == 200
    assert r.json()["content"] == "edited"

    r = await client.get(f"/v1/issues/{issue_id}/comments", headers=manager)
    assert [c["content"] for c in r.json()] == ["edited"]

    r = await client.delete(f"/v1/comments/{comment_id}", headers=manager)
    assert r.status_code == 204
