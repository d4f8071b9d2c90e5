from __future__ import annotations

import pytest

from erp import create_app
from erp.extensions import db
from erp.store import entity_store

PASSWORD = "secret"


@pytest.fixture
def app():
    app = create_app("config.TestingConfig")
    with app.app_context():
        db.create_all()

    yield app

    with app.app_context():
        db.session.remove()
        db.drop_all()


@pytest.fixture
def ctx(app):
    """App context for tests that talk to the store directly (no HTTP requests)."""
    with app.app_context():
        yield


@pytest.fixture
def store(ctx):
    return entity_store()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def make_user(app):
    def _make(username: str, role: str = "employee", password: str = PASSWORD) -> int:
        with app.app_context():
            user = entity_store().create_user(
                username=username,
                password=password,
                name=username.title(),
                role=role,
            )
            return user.id

    return _make


@pytest.fixture
def client_as(app, make_user):
    """Fresh test client logged in as a new user with the given role."""

    def _client_as(role: str, username: str | None = None):
        username = username or role
        make_user(username, role=role)
        c = app.test_client()
        resp = c.post("/api/login", json={"username": username, "password": PASSWORD})
        assert resp.status_code == 200, resp.get_json()
        return c

    return _client_as


@pytest.fixture
def project_id(client_as):
    """A project created through the API by an admin."""
    admin = client_as("admin", username="project-owner")
    resp = admin.post("/api/projects", json={"name": "Reef", "description": "d", "budget": 1000})
    assert resp.status_code == 201, resp.get_json()
    return resp.get_json()["id"]
