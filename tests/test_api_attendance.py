from __future__ import annotations

from datetime import date


def test_mark_then_read_today(client_as):
    c = client_as("employee")
    me = c.get("/api/user").get_json()

    assert c.get("/api/attendance").get_json() is None

    resp = c.post("/api/attendance", json={"status": "late"})
    assert resp.status_code == 201
    record = resp.get_json()
    assert record["userId"] == me["id"]
    assert record["date"] == date.today().isoformat()
    assert record["status"] == "late"

    assert c.get("/api/attendance").get_json() == record


def test_second_mark_same_day_rejected(client_as):
    c = client_as("employee")
    assert c.post("/api/attendance", json={"status": "present"}).status_code == 201

    resp = c.post("/api/attendance", json={"status": "absent"})
    assert resp.status_code == 400
    assert c.get("/api/attendance").get_json()["status"] == "present"


def test_marks_are_per_user(client_as):
    first = client_as("employee", username="first")
    second = client_as("employee", username="second")

    first.post("/api/attendance", json={"status": "present"})

    assert second.get("/api/attendance").get_json() is None
    assert second.post("/api/attendance", json={"status": "absent"}).status_code == 201


def test_other_day_query(client_as):
    c = client_as("project_officer")
    c.post("/api/attendance", json={"status": "present"})

    assert c.get("/api/attendance", query_string={"date": "2001-01-01"}).get_json() is None
    assert c.get("/api/attendance", query_string={"date": "01/01/2001"}).status_code == 400


def test_attendance_validation(client_as):
    c = client_as("employee")
    assert c.post("/api/attendance", json={}).status_code == 400
    assert c.post("/api/attendance", json={"status": "sick"}).status_code == 400


def test_attendance_requires_a_session(client):
    assert client.get("/api/attendance").status_code == 401
    assert client.post("/api/attendance", json={"status": "present"}).status_code == 401
