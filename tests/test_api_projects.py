from __future__ import annotations

import pytest
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

PROJECT = {"name": "Reef", "description": "d", "budget": 1000}


def test_reads_require_a_session(client):
    assert client.get("/api/projects").status_code == 401
    assert client.get("/api/projects/1/tasks").status_code == 401


def test_unauthenticated_before_validation(client):
    # invalid body, but no session: 401 wins
    resp = client.post("/api/projects", json={})
    assert resp.status_code == 401


def test_employee_cannot_create_project(client_as):
    resp = client_as("employee").post("/api/projects", json=PROJECT)
    assert resp.status_code == 403
    assert resp.get_json() == {"message": "Forbidden"}


@pytest.mark.parametrize("role", ["admin", "project_officer"])
def test_managers_create_project_round_trip(client_as, role):
    c = client_as(role)
    resp = c.post("/api/projects", json=PROJECT)

    assert resp.status_code == 201
    created = resp.get_json()
    assert created["id"]
    assert created["budget"] == "1000.00"
    assert created["status"] == "planned"

    listed = c.get("/api/projects").get_json()
    assert created in listed
    assert c.get(f"/api/projects/{created['id']}").get_json() == created


def test_project_validation(client_as):
    c = client_as("admin")

    missing = c.post("/api/projects", json={"budget": 5})
    assert missing.status_code == 400
    assert set(missing.get_json()["errors"]) >= {"name", "description"}

    negative = c.post("/api/projects", json={"name": "x", "description": "d", "budget": -1})
    assert negative.status_code == 400
    assert "budget" in negative.get_json()["errors"]

    not_json = c.post("/api/projects", json=["not", "an", "object"])
    assert not_json.status_code == 400


def test_project_budget_defaults_to_zero(client_as):
    resp = client_as("admin").post("/api/projects", json={"name": "x", "description": "d"})
    assert resp.get_json()["budget"] == "0.00"


def test_get_missing_project(client_as):
    assert client_as("employee").get("/api/projects/999").status_code == 404


def test_create_and_list_tasks(client_as, project_id, make_user):
    assignee = make_user("worker")
    po = client_as("project_officer")

    resp = po.post(
        f"/api/projects/{project_id}/tasks",
        json={"title": "Survey", "description": "d", "assigneeId": assignee, "dueDate": "2024-07-01", "projectId": 999},
    )
    assert resp.status_code == 201
    task = resp.get_json()
    assert task["projectId"] == project_id
    assert task["status"] == "todo"
    assert task["priority"] == "medium"
    assert task["dueDate"] == "2024-07-01"

    assert po.get(f"/api/projects/{project_id}/tasks").get_json() == [task]


def test_employee_cannot_create_task(client_as, project_id):
    resp = client_as("employee").post(f"/api/projects/{project_id}/tasks", json={"title": "t", "description": "d"})
    assert resp.status_code == 403


def test_task_for_missing_project(client_as):
    resp = client_as("admin").post("/api/projects/999/tasks", json={"title": "t", "description": "d"})
    assert resp.status_code == 404


def test_any_role_updates_task_status(client_as, project_id):
    po = client_as("project_officer")
    task = po.post(f"/api/projects/{project_id}/tasks", json={"title": "t", "description": "d"}).get_json()

    employee = client_as("employee")
    resp = employee.patch(f"/api/tasks/{task['id']}/status", json={"status": "completed"})

    assert resp.status_code == 200
    assert resp.get_json()["status"] == "completed"


def test_task_status_errors(client_as, project_id):
    c = client_as("employee")

    assert c.patch("/api/tasks/999/status", json={"status": "completed"}).status_code == 404
    assert c.patch("/api/tasks/999/status", json={"status": "done"}).status_code == 400


def test_unknown_route_is_json(client):
    resp = client.get("/api/nope")
    assert resp.status_code == 404
    assert "message" in resp.get_json()


HUGE_ID = "99999999999999999999999"


def test_oversized_ids_are_not_found(client_as):
    c = client_as("admin")

    assert c.patch(f"/api/tasks/{HUGE_ID}/status", json={"status": "todo"}).status_code == 404
    assert c.get(f"/api/projects/{HUGE_ID}").status_code == 404
    assert c.get(f"/api/projects/{HUGE_ID}/tasks").status_code == 404
    assert c.get(f"/api/projects/{HUGE_ID}/budget/summary").status_code == 404
    assert c.get(f"/api/reports/{HUGE_ID}").status_code == 404

    resp = c.post("/api/projects", json=dict(PROJECT, managerId=int(HUGE_ID)))
    assert resp.status_code == 400
    assert "managerId" in resp.get_json()["errors"]


def test_storage_failure_is_a_json_500(client_as, monkeypatch):
    c = client_as("admin")

    def failing_commit(self):
        raise SQLAlchemyError("disk I/O error")

    monkeypatch.setattr(Session, "commit", failing_commit)
    resp = c.post("/api/projects", json=PROJECT)

    assert resp.status_code == 500
    assert resp.get_json() == {"message": "Storage failure"}

    monkeypatch.undo()
    assert c.get("/api/projects").get_json() == []
