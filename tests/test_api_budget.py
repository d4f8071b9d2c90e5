from __future__ import annotations

from decimal import Decimal


def _item(amount, type_="income", day="2024-05-01", category="other"):
    return {"description": f"{type_} line", "amount": amount, "type": type_, "category": category, "date": day}


def test_budget_summary_scenario(client_as, project_id):
    po = client_as("project_officer")

    assert po.post(f"/api/projects/{project_id}/budget", json=_item(400, "income")).status_code == 201
    assert po.post(f"/api/projects/{project_id}/budget", json=_item(150, "expense", category="travel")).status_code == 201

    summary = client_as("employee").get(f"/api/projects/{project_id}/budget/summary").get_json()
    assert Decimal(summary["allocated"]) == Decimal("400")
    assert Decimal(summary["spent"]) == Decimal("150")


def test_empty_summary(client_as, project_id):
    summary = client_as("employee").get(f"/api/projects/{project_id}/budget/summary").get_json()
    assert summary == {"allocated": "0.00", "spent": "0.00"}


def test_cents_sum_exactly(client_as, project_id):
    admin = client_as("admin")
    admin.post(f"/api/projects/{project_id}/budget", json=_item(10.10))
    admin.post(f"/api/projects/{project_id}/budget", json=_item("20.20"))

    summary = admin.get(f"/api/projects/{project_id}/budget/summary").get_json()
    assert summary["allocated"] == "30.30"


def test_created_item_shape(client_as, project_id):
    admin = client_as("admin")
    me = admin.get("/api/user").get_json()

    resp = admin.post(f"/api/projects/{project_id}/budget", json=_item("99.5", "expense", category="equipment"))
    item = resp.get_json()

    assert item["projectId"] == project_id
    assert item["createdBy"] == me["id"]
    assert item["amount"] == "99.50"
    assert item["date"] == "2024-05-01"


def test_employee_cannot_add_budget_items(client_as, project_id):
    resp = client_as("employee").post(f"/api/projects/{project_id}/budget", json=_item(5))
    assert resp.status_code == 403


def test_budget_item_validation(client_as, project_id):
    admin = client_as("admin")
    url = f"/api/projects/{project_id}/budget"

    for bad in (_item(-1), _item("1.005"), _item("abc"), _item(5, type_="refund"), _item(5, category="food")):
        resp = admin.post(url, json=bad)
        assert resp.status_code == 400, bad

    assert admin.post(url, json=_item(5, day="not-a-date")).status_code == 400
    assert admin.get(url).get_json() == []


def test_budget_item_for_missing_project(client_as):
    assert client_as("admin").post("/api/projects/999/budget", json=_item(5)).status_code == 404


def test_date_window_filters_list_and_summary(client_as, project_id):
    admin = client_as("admin")
    url = f"/api/projects/{project_id}/budget"
    admin.post(url, json=_item(1, day="2024-01-01"))
    admin.post(url, json=_item(2, day="2024-01-31"))
    admin.post(url, json=_item(4, day="2024-02-01"))

    listed = admin.get(url, query_string={"startDate": "2024-01-01", "endDate": "2024-01-31"}).get_json()
    assert [i["amount"] for i in listed] == ["1.00", "2.00"]

    summary = admin.get(f"{url}/summary", query_string={"startDate": "2024-02-01"}).get_json()
    assert summary == {"allocated": "4.00", "spent": "0.00"}


def test_bad_date_query(client_as, project_id):
    resp = client_as("employee").get(f"/api/projects/{project_id}/budget", query_string={"startDate": "yesterday"})
    assert resp.status_code == 400
    assert "startDate" in resp.get_json()["errors"]


def test_dates_must_be_complete_iso_values(client_as, project_id):
    admin = client_as("admin")
    url = f"/api/projects/{project_id}/budget"

    assert admin.post(url, json=_item(5, day="2024-05-01garbage")).status_code == 400
    assert admin.get(url, query_string={"endDate": "2024-05-01junk"}).status_code == 400

    resp = admin.post(url, json=_item(5, day="2024-05-01T10:30:00"))
    assert resp.status_code == 201
    assert resp.get_json()["date"] == "2024-05-01"
