from __future__ import annotations

import pytest


@pytest.mark.parametrize("role", ["admin", "project_officer", "employee"])
def test_any_role_lists_users_without_passwords(client_as, make_user, role):
    make_user("other", role="project_officer")
    users = client_as(role).get("/api/users").get_json()

    assert {u["username"] for u in users} == {"other", role}
    for user in users:
        assert "password" not in user
        assert "passwordHash" not in user
        assert set(user) == {"id", "username", "role", "name"}


def test_users_require_a_session(client):
    assert client.get("/api/users").status_code == 401
