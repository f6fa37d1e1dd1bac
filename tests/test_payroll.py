import csv
import io
from datetime import date, datetime, timedelta
import pytest
from electrical_pm.core.permissions import Role
from electrical_pm.models.project import Project
from electrical_pm.models.sign_in import DailySignIn
from electrical_pm.models.time_entry import TimeEntry
from electrical_pm.services.payroll_service import DAILY_CSV_COLUMNS, WEEKLY_CSV_COLUMNS, split_overtime
from conftest import API

MONDAY = date(2024, 3, 4)


@pytest.fixture
def pm_headers(headers_for):
    return headers_for(Role.PROJECT_MANAGER)


@pytest.fixture
def second_project(db, test_client_record):
    record = Project(name="Warehouse Retrofit", project_number="P-1002", client_id=test_client_record.id)
    db.add(record)
    db.commit()
    db.refresh(record)
    return record


@pytest.fixture
def add_entry(db):
    def _add(employee, project, work_date, hours, status="PENDING", hourly_rate=None):
        entry = TimeEntry(
            employee_id=employee.id,
            project_id=project.id,
            date=work_date,
            hours_worked=hours,
            hourly_rate=hourly_rate,
            total_cost=round(hours * hourly_rate, 2) if hourly_rate is not None else None,
            status=status
        )
        db.add(entry)
        db.commit()
        return entry
    return _add


@pytest.mark.parametrize("hours,threshold,expected", [
    (10, 8, (8, 2)),
    (8, 8, (8, 0)),
    (45, 40, (40, 5)),
    (6.5, 8, (6.5, 0)),
])
def test_split_overtime(hours, threshold, expected):
    assert split_overtime(hours, threshold) == expected


def test_daily_report_overtime_across_projects(client, pm_headers, employee, project, second_project, add_entry):
    add_entry(employee, project, MONDAY, 6)
    add_entry(employee, second_project, MONDAY, 4)

    response = client.get(f"{API}/payroll/daily?date={MONDAY.isoformat()}", headers=pm_headers)

    assert response.status_code == 200
    report = response.json()["data"]
    assert report["grand_total_hours"] == 10.0
    row = report["employees"][0]
    assert row["total_hours"] == 10.0
    assert row["regular_hours"] == 8.0
    assert row["overtime_hours"] == 2.0
    assert [p["project_name"] for p in row["projects"]] == ["Main Street Retail", "Warehouse Retrofit"]


def test_daily_report_excludes_rejected(client, pm_headers, employee, project, add_entry):
    add_entry(employee, project, MONDAY, 8)
    add_entry(employee, project, MONDAY, 4, status="REJECTED")

    report = client.get(f"{API}/payroll/daily?date={MONDAY.isoformat()}", headers=pm_headers).json()["data"]

    assert report["employees"][0]["total_hours"] == 8.0
    assert report["employees"][0]["overtime_hours"] == 0.0


def test_daily_report_sign_in_window(client, db, pm_headers, employee, project, add_entry):
    add_entry(employee, project, MONDAY, 8)
    db.add(DailySignIn(
        employee_id=employee.id, date=MONDAY,
        sign_in_time=datetime(2024, 3, 4, 6, 45), sign_out_time=datetime(2024, 3, 4, 15, 15)
    ))
    db.commit()

    row = client.get(
        f"{API}/payroll/daily?date={MONDAY.isoformat()}", headers=pm_headers
    ).json()["data"]["employees"][0]

    assert row["sign_in_time"] == "2024-03-04T06:45:00"
    assert row["sign_out_time"] == "2024-03-04T15:15:00"


def test_weekly_report_overtime(client, pm_headers, employee, project, add_entry):
    for offset in range(5):
        add_entry(employee, project, MONDAY + timedelta(days=offset), 9)

    response = client.get(
        f"{API}/payroll/weekly?start_date=2024-03-04&end_date=2024-03-10", headers=pm_headers
    )

    assert response.status_code == 200
    row = response.json()["data"]["employees"][0]
    assert row["total_hours"] == 45.0
    assert row["regular_hours"] == 40.0
    assert row["overtime_hours"] == 5.0
    assert len(row["daily_hours"]) == 5
    assert row["daily_hours"][0] == {"date": "2024-03-04", "hours": 9.0, "projects": ["Main Street Retail"]}


def test_weekly_report_rejects_inverted_range(client, pm_headers):
    response = client.get(
        f"{API}/payroll/weekly?start_date=2024-03-10&end_date=2024-03-04", headers=pm_headers
    )
    assert response.status_code == 400


def test_project_cost_report(client, pm_headers, make_employee, project, add_entry):
    ann = make_employee(first_name="Ann", last_name="Adams", hourly_rate=40.0)
    bob = make_employee(first_name="Bob", last_name="Baker", classification="Apprentice", hourly_rate=25.0)
    add_entry(ann, project, MONDAY, 8)
    add_entry(ann, project, MONDAY + timedelta(days=1), 2, hourly_rate=60.0)
    add_entry(bob, project, MONDAY, 4)

    response = client.get(f"{API}/payroll/project/{project.id}", headers=pm_headers)

    assert response.status_code == 200
    report = response.json()["data"]
    assert report["total_hours"] == 14.0
    assert report["total_cost"] == 540.0
    by_name = {e["name"]: e for e in report["employees"]}
    assert by_name["Ann Adams"]["cost"] == 440.0
    assert by_name["Ann Adams"]["rate"] == 44.0
    assert by_name["Bob Baker"]["cost"] == 100.0


def test_project_cost_report_without_entries(client, pm_headers, project):
    response = client.get(f"{API}/payroll/project/{project.id}", headers=pm_headers)

    assert response.status_code == 404
    assert response.json()["error"]["message"] == "Project not found or has no time entries"


def test_payroll_summary(client, pm_headers, make_employee, project, second_project, add_entry):
    ann = make_employee(first_name="Ann")
    bob = make_employee(first_name="Bob")
    add_entry(ann, project, MONDAY, 8, hourly_rate=40.0)
    add_entry(bob, second_project, MONDAY, 10, hourly_rate=30.0)

    response = client.get(
        f"{API}/payroll/summary?start_date=2024-03-04&end_date=2024-03-10", headers=pm_headers
    )

    summary = response.json()["data"]
    assert summary["total_labor_hours"] == 18.0
    assert summary["total_labor_cost"] == 620.0
    assert summary["employee_count"] == 2
    assert summary["project_count"] == 2
    assert summary["top_projects"][0]["project_name"] == "Warehouse Retrofit"


def test_export_daily_csv(client, pm_headers, employee, project, second_project, add_entry):
    add_entry(employee, project, MONDAY, 6)
    add_entry(employee, second_project, MONDAY, 4)

    response = client.get(f"{API}/payroll/export/daily?date={MONDAY.isoformat()}", headers=pm_headers)

    assert response.status_code == 200
    assert response.headers["content-type"].startswith("text/csv")
    assert response.headers["content-disposition"].startswith("attachment; filename=")

    lines = response.text.splitlines()
    assert lines[0] == ",".join(f'"{c}"' for c in DAILY_CSV_COLUMNS)
    rows = list(csv.DictReader(io.StringIO(response.text)))
    assert [r["Work Type"] for r in rows] == ["Regular", "Overtime"]
    assert rows[0]["Hours"] == "6.00"
    assert rows[0]["Sign In Time"] == "N/A"
    assert lines[1].startswith(f'"{employee.id}","Jane","Doe"')


def test_export_weekly_csv(client, pm_headers, employee, project, add_entry):
    for offset in range(5):
        add_entry(employee, project, MONDAY + timedelta(days=offset), 9)

    response = client.get(
        f"{API}/payroll/export/weekly?start_date=2024-03-04&end_date=2024-03-10", headers=pm_headers
    )

    assert response.status_code == 200
    rows = list(csv.DictReader(io.StringIO(response.text)))
    assert list(rows[0].keys()) == WEEKLY_CSV_COLUMNS
    assert rows[0]["Total Hours"] == "45.00"
    assert rows[0]["Overtime Hours"] == "5.00"
    assert rows[0]["Projects"] == "Main Street Retail"


def test_export_empty_day_has_header_only(client, pm_headers):
    response = client.get(f"{API}/payroll/export/daily?date=2024-01-01", headers=pm_headers)
    assert response.text.splitlines() == [",".join(f'"{c}"' for c in DAILY_CSV_COLUMNS)]


def test_field_supervisor_cannot_read_payroll(client, headers_for):
    headers = headers_for(Role.FIELD_SUPERVISOR)
    response = client.get(f"{API}/payroll/daily?date=2024-03-04", headers=headers)
    assert response.status_code == 403
