import pytest
from electrical_pm.core.permissions import Role
from conftest import API

WORK_DATE = "2024-03-05"


@pytest.fixture
def pm_headers(headers_for):
    return headers_for(Role.PROJECT_MANAGER)


@pytest.fixture
def timesheet(client, pm_headers, make_employee, project):
    a = make_employee(first_name="Ann", last_name="Adams")
    b = make_employee(first_name="Bob", last_name="Baker")
    response = client.post(
        f"{API}/timesheets",
        json={
            "date": WORK_DATE,
            "title": "Crew A",
            "entries": [
                {"employee_id": a.id, "project_id": project.id, "hours_worked": 8, "description": "Conduit"},
                {"employee_id": b.id, "project_id": project.id, "hours_worked": 6.5},
            ],
        },
        headers=pm_headers
    )
    assert response.status_code == 201, response.text
    return response.json()["data"]


def test_create_timesheet_with_entries(timesheet):
    assert timesheet["status"] == "DRAFT"
    assert timesheet["entry_count"] == 2
    assert timesheet["total_hours"] == 14.5
    assert all(e["date"] == WORK_DATE for e in timesheet["time_entries"])
    assert all(e["timesheet_id"] == timesheet["id"] for e in timesheet["time_entries"])


def test_create_timesheet_validates_every_entry(client, pm_headers, employee, project):
    response = client.post(
        f"{API}/timesheets",
        json={
            "date": WORK_DATE,
            "entries": [
                {"employee_id": employee.id, "project_id": project.id, "hours_worked": 8},
                {"employee_id": employee.id, "project_id": project.id, "hours_worked": 0},
            ],
        },
        headers=pm_headers
    )

    assert response.status_code == 400
    listed = client.get(f"{API}/timesheets", headers=pm_headers).json()
    assert listed["pagination"]["total"] == 0


def test_list_and_get_by_date(client, pm_headers, timesheet):
    listed = client.get(f"{API}/timesheets?status=DRAFT", headers=pm_headers).json()
    assert listed["pagination"]["total"] == 1
    assert listed["data"][0]["entry_count"] == 2

    by_date = client.get(f"{API}/timesheets/date/{WORK_DATE}", headers=pm_headers).json()["data"]
    assert [t["id"] for t in by_date] == [timesheet["id"]]


def test_update_replaces_entries(client, pm_headers, employee, timesheet, project):
    response = client.put(
        f"{API}/timesheets/{timesheet['id']}",
        json={"entries": [{"employee_id": employee.id, "project_id": project.id, "hours_worked": 4}]},
        headers=pm_headers
    )

    assert response.status_code == 200
    data = response.json()["data"]
    assert data["entry_count"] == 1
    assert data["total_hours"] == 4.0

    day = client.get(f"{API}/time-entries/date?date={WORK_DATE}", headers=pm_headers).json()["data"]
    assert len(day) == 1


def test_date_change_moves_entries(client, pm_headers, timesheet):
    response = client.put(f"{API}/timesheets/{timesheet['id']}", json={"date": "2024-03-06"}, headers=pm_headers)

    assert response.status_code == 200
    assert {e["date"] for e in response.json()["data"]["time_entries"]} == {"2024-03-06"}


def test_update_rejects_null_date(client, pm_headers, timesheet):
    response = client.put(f"{API}/timesheets/{timesheet['id']}", json={"date": None}, headers=pm_headers)

    assert response.status_code == 400
    assert response.json()["error"]["code"] == "VALIDATION_ERROR"

    fetched = client.get(f"{API}/timesheets/{timesheet['id']}", headers=pm_headers).json()["data"]
    assert fetched["date"] == WORK_DATE


def test_submit_then_approve_cascades(client, pm_headers, timesheet):
    submitted = client.put(f"{API}/timesheets/{timesheet['id']}/submit", headers=pm_headers)
    assert submitted.json()["data"]["status"] == "SUBMITTED"

    approved = client.put(f"{API}/timesheets/{timesheet['id']}/approve", headers=pm_headers)

    assert approved.status_code == 200
    data = approved.json()["data"]
    assert data["status"] == "APPROVED"
    assert data["approved_at"] is not None
    assert {e["status"] for e in data["time_entries"]} == {"APPROVED"}


def test_approve_is_idempotent(client, pm_headers, timesheet):
    first = client.put(f"{API}/timesheets/{timesheet['id']}/approve", headers=pm_headers).json()["data"]
    second = client.put(f"{API}/timesheets/{timesheet['id']}/approve", headers=pm_headers)

    assert second.status_code == 200
    data = second.json()["data"]
    assert data["approved_at"] == first["approved_at"]
    assert data["approved_by"] == first["approved_by"]
    assert {e["status"] for e in data["time_entries"]} == {"APPROVED"}


def test_approved_timesheet_is_locked(client, pm_headers, admin_headers, timesheet):
    client.put(f"{API}/timesheets/{timesheet['id']}/approve", headers=pm_headers)
    entry_id = timesheet["time_entries"][0]["id"]

    update = client.put(f"{API}/timesheets/{timesheet['id']}", json={"title": "Changed"}, headers=pm_headers)
    assert update.status_code == 409
    assert update.json()["error"]["message"] == "Cannot edit approved timesheet"

    assert client.put(f"{API}/timesheets/{timesheet['id']}/submit", headers=pm_headers).status_code == 409
    assert client.delete(f"{API}/timesheets/{timesheet['id']}", headers=pm_headers).status_code == 409

    assert client.put(
        f"{API}/time-entries/{entry_id}", json={"hours_worked": 2}, headers=pm_headers
    ).status_code == 409
    assert client.put(
        f"{API}/time-entries/{entry_id}/reject", json={"reason": "late"}, headers=pm_headers
    ).status_code == 409
    assert client.delete(f"{API}/time-entries/{entry_id}", headers=admin_headers).status_code == 409


def test_only_draft_can_be_deleted(client, pm_headers, timesheet):
    client.put(f"{API}/timesheets/{timesheet['id']}/submit", headers=pm_headers)

    response = client.delete(f"{API}/timesheets/{timesheet['id']}", headers=pm_headers)

    assert response.status_code == 409
    assert response.json()["error"]["message"] == "Only draft timesheets can be deleted"


def test_delete_draft_removes_entries(client, pm_headers, timesheet):
    assert client.delete(f"{API}/timesheets/{timesheet['id']}", headers=pm_headers).status_code == 200

    assert client.get(f"{API}/timesheets/{timesheet['id']}", headers=pm_headers).status_code == 404
    day = client.get(f"{API}/time-entries/date?date={WORK_DATE}", headers=pm_headers).json()["data"]
    assert day == []


def test_timesheet_pdf(client, pm_headers, timesheet):
    response = client.get(f"{API}/timesheets/{timesheet['id']}/pdf", headers=pm_headers)

    assert response.status_code == 200
    assert response.headers["content-type"] == "application/pdf"
    assert "attachment" in response.headers["content-disposition"]
    assert response.content.startswith(b"%PDF")


def test_supervisor_cannot_approve(client, headers_for, timesheet):
    headers = headers_for(Role.FIELD_SUPERVISOR)
    response = client.put(f"{API}/timesheets/{timesheet['id']}/approve", headers=headers)
    assert response.status_code == 403
