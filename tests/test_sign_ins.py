from datetime import date, datetime
import pytest
from sqlalchemy.exc import IntegrityError
from electrical_pm.core.permissions import Role
from electrical_pm.models.sign_in import DailySignIn
from conftest import API

WORK_DATE = "2024-03-04"


@pytest.fixture
def supervisor_headers(headers_for):
    return headers_for(Role.FIELD_SUPERVISOR)


def _sign_in(client, headers, employee_id, **extra):
    payload = {"employee_id": employee_id, "date": WORK_DATE, "sign_in_time": f"{WORK_DATE}T07:00:00"}
    payload.update(extra)
    return client.post(f"{API}/sign-ins", json=payload, headers=headers)


def test_sign_in_creates_active_record(client, supervisor_headers, employee, project):
    response = _sign_in(client, supervisor_headers, employee.id, project_id=project.id, location="Gate B")

    assert response.status_code == 201
    data = response.json()["data"]
    assert data["employee_id"] == employee.id
    assert data["date"] == WORK_DATE
    assert data["is_active"] is True
    assert data["sign_out_time"] is None
    assert data["employee"]["last_name"] == "Doe"


def test_second_sign_in_same_day_conflicts(client, supervisor_headers, employee):
    assert _sign_in(client, supervisor_headers, employee.id).status_code == 201

    response = _sign_in(client, supervisor_headers, employee.id, sign_in_time=f"{WORK_DATE}T09:00:00")

    assert response.status_code == 409
    assert response.json()["error"]["message"] == "Employee is already signed in and has not signed out yet"


def test_sign_in_again_after_sign_out(client, supervisor_headers, employee):
    first = _sign_in(client, supervisor_headers, employee.id).json()["data"]
    client.put(
        f"{API}/sign-ins/{first['id']}/sign-out",
        json={"sign_out_time": f"{WORK_DATE}T11:00:00"},
        headers=supervisor_headers
    )

    response = _sign_in(client, supervisor_headers, employee.id, sign_in_time=f"{WORK_DATE}T12:00:00")
    assert response.status_code == 201


def test_sign_in_unknown_employee(client, supervisor_headers):
    response = _sign_in(client, supervisor_headers, 999)
    assert response.status_code == 404


def test_sign_out(client, supervisor_headers, employee):
    record = _sign_in(client, supervisor_headers, employee.id).json()["data"]

    response = client.put(
        f"{API}/sign-ins/{record['id']}/sign-out",
        json={"sign_out_time": f"{WORK_DATE}T15:30:00"},
        headers=supervisor_headers
    )

    assert response.status_code == 200
    data = response.json()["data"]
    assert data["is_active"] is False
    assert data["hours"] == 8.5


def test_sign_out_twice_conflicts(client, supervisor_headers, employee):
    record = _sign_in(client, supervisor_headers, employee.id).json()["data"]
    url = f"{API}/sign-ins/{record['id']}/sign-out"
    client.put(url, json={"sign_out_time": f"{WORK_DATE}T15:00:00"}, headers=supervisor_headers)

    response = client.put(url, json={"sign_out_time": f"{WORK_DATE}T16:00:00"}, headers=supervisor_headers)

    assert response.status_code == 409
    assert response.json()["error"]["message"] == "Employee is already signed out"


def test_sign_out_before_sign_in_rejected(client, supervisor_headers, employee):
    record = _sign_in(client, supervisor_headers, employee.id).json()["data"]

    response = client.put(
        f"{API}/sign-ins/{record['id']}/sign-out",
        json={"sign_out_time": f"{WORK_DATE}T06:00:00"},
        headers=supervisor_headers
    )
    assert response.status_code == 400


def test_sign_out_missing_record(client, supervisor_headers):
    response = client.put(f"{API}/sign-ins/12345/sign-out", json={}, headers=supervisor_headers)
    assert response.status_code == 404


def test_bulk_sign_in_reports_already_signed_in(client, supervisor_headers, make_employee):
    a = make_employee(first_name="Ann", last_name="Adams")
    b = make_employee(first_name="Bob", last_name="Baker")
    c = make_employee(first_name="Cy", last_name="Cole")
    _sign_in(client, supervisor_headers, b.id)

    response = client.post(
        f"{API}/sign-ins/bulk",
        json={"employee_ids": [a.id, b.id, c.id], "date": WORK_DATE, "sign_in_time": f"{WORK_DATE}T07:00:00"},
        headers=supervisor_headers
    )

    assert response.status_code == 201
    data = response.json()["data"]
    assert sorted(r["employee_id"] for r in data["signed_in"]) == sorted([a.id, c.id])
    assert data["already_signed_in"] == [b.id]


def test_bulk_sign_in_all_active_conflicts(client, supervisor_headers, employee):
    _sign_in(client, supervisor_headers, employee.id)

    response = client.post(
        f"{API}/sign-ins/bulk",
        json={"employee_ids": [employee.id], "date": WORK_DATE},
        headers=supervisor_headers
    )
    assert response.status_code == 409


def test_bulk_sign_in_empty_list_is_invalid(client, supervisor_headers):
    response = client.post(f"{API}/sign-ins/bulk", json={"employee_ids": []}, headers=supervisor_headers)
    assert response.status_code == 400


def test_queries_by_date_and_history(client, supervisor_headers, employee):
    _sign_in(client, supervisor_headers, employee.id)

    by_date = client.get(f"{API}/sign-ins/date?date={WORK_DATE}", headers=supervisor_headers)
    assert by_date.status_code == 200
    assert len(by_date.json()["data"]) == 1

    history = client.get(f"{API}/sign-ins/employee/{employee.id}/history", headers=supervisor_headers)
    assert [r["date"] for r in history.json()["data"]] == [WORK_DATE]

    status = client.get(
        f"{API}/sign-ins/employee/{employee.id}/status?date={WORK_DATE}", headers=supervisor_headers
    )
    assert status.json()["data"]["is_signed_in"] is True

    active = client.get(f"{API}/sign-ins/active", headers=supervisor_headers)
    assert len(active.json()["data"]) == 1


def test_today_defaults(client, supervisor_headers, employee):
    response = client.post(f"{API}/sign-ins", json={"employee_id": employee.id}, headers=supervisor_headers)
    assert response.status_code == 201
    assert response.json()["data"]["date"] == date.today().isoformat()

    today = client.get(f"{API}/sign-ins/today", headers=supervisor_headers)
    assert len(today.json()["data"]) == 1


def test_field_worker_cannot_sign_in_others(client, headers_for, employee):
    headers = headers_for(Role.FIELD_WORKER)

    assert client.get(f"{API}/sign-ins/today", headers=headers).status_code == 200
    assert _sign_in(client, headers, employee.id).status_code == 403


def test_partial_index_blocks_second_open_session(db, employee):
    db.add(DailySignIn(employee_id=employee.id, date=date(2024, 3, 4), sign_in_time=datetime(2024, 3, 4, 7)))
    db.commit()

    db.add(DailySignIn(employee_id=employee.id, date=date(2024, 3, 4), sign_in_time=datetime(2024, 3, 4, 8)))
    with pytest.raises(IntegrityError):
        db.commit()
    db.rollback()


def test_sign_in_to_time_entry_flow(client, headers_for, employee, project):
    supervisor = headers_for(Role.FIELD_SUPERVISOR)
    manager = headers_for(Role.PROJECT_MANAGER)

    record = _sign_in(client, supervisor, employee.id, sign_in_time=f"{WORK_DATE}T08:00:00").json()["data"]
    assert _sign_in(client, supervisor, employee.id, sign_in_time=f"{WORK_DATE}T09:00:00").status_code == 409

    client.put(
        f"{API}/sign-ins/{record['id']}/sign-out",
        json={"sign_out_time": f"{WORK_DATE}T16:30:00"},
        headers=supervisor
    )
    response = client.post(
        f"{API}/time-entries/from-sign-in",
        json={"sign_in_id": record["id"], "project_id": project.id},
        headers=manager
    )

    assert response.status_code == 201
    assert response.json()["data"]["hours_worked"] == 8.5
