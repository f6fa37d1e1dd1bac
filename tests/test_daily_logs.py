from datetime import date, timedelta
from electrical_pm.core.permissions import Role
from conftest import API


def _log(project_id, log_date="2024-03-04", **extra):
    payload = {
        "project_id": project_id,
        "date": log_date,
        "weather": "Clear, 18C",
        "crew_members": ["Jane Doe", "Bob Baker"],
        "hours_worked": {"Jane Doe": 8, "Bob Baker": 7.5},
        "work_performed": "Pulled feeders to panel LP-2",
        "materials_used": [{"item": "THHN #4", "quantity": 300}],
    }
    payload.update(extra)
    return payload


def test_create_daily_log(client, headers_for, project):
    headers = headers_for(Role.FIELD_WORKER)

    response = client.post(f"{API}/daily-logs", json=_log(project.id), headers=headers)

    assert response.status_code == 201
    data = response.json()["data"]
    assert data["hours_worked"] == {"Jane Doe": 8.0, "Bob Baker": 7.5}
    assert data["project"]["name"] == "Main Street Retail"
    assert data["inspector_visit"] is False


def test_one_log_per_project_and_day(client, admin_headers, project):
    client.post(f"{API}/daily-logs", json=_log(project.id), headers=admin_headers)

    response = client.post(f"{API}/daily-logs", json=_log(project.id), headers=admin_headers)

    assert response.status_code == 409
    assert response.json()["error"]["message"] == "Daily log already exists for this project and date"


def test_move_log_onto_taken_date(client, admin_headers, project):
    client.post(f"{API}/daily-logs", json=_log(project.id, "2024-03-04"), headers=admin_headers)
    other = client.post(f"{API}/daily-logs", json=_log(project.id, "2024-03-05"), headers=admin_headers)

    response = client.put(
        f"{API}/daily-logs/{other.json()['data']['id']}", json={"date": "2024-03-04"}, headers=admin_headers
    )
    assert response.status_code == 409


def test_log_requires_work_performed(client, admin_headers, project):
    response = client.post(f"{API}/daily-logs", json=_log(project.id, work_performed=""), headers=admin_headers)
    assert response.status_code == 400


def test_queries(client, admin_headers, project):
    for day in ("2024-03-04", "2024-03-05", "2024-03-07"):
        client.post(f"{API}/daily-logs", json=_log(project.id, day), headers=admin_headers)

    by_project = client.get(f"{API}/daily-logs/project/{project.id}", headers=admin_headers).json()["data"]
    assert [log["date"] for log in by_project] == ["2024-03-07", "2024-03-05", "2024-03-04"]

    in_range = client.get(
        f"{API}/daily-logs/date-range?start_date=2024-03-04&end_date=2024-03-05", headers=admin_headers
    ).json()["data"]
    assert len(in_range) == 2

    inverted = client.get(
        f"{API}/daily-logs/date-range?start_date=2024-03-05&end_date=2024-03-04", headers=admin_headers
    )
    assert inverted.status_code == 400

    searched = client.get(f"{API}/daily-logs?search=feeders&limit=2", headers=admin_headers).json()
    assert searched["pagination"]["total"] == 3
    assert len(searched["data"]) == 2


def test_stats(client, admin_headers, project):
    today = date.today()
    client.post(f"{API}/daily-logs", json=_log(project.id, today.isoformat()), headers=admin_headers)
    client.post(
        f"{API}/daily-logs", json=_log(project.id, (today - timedelta(days=400)).isoformat()), headers=admin_headers
    )

    stats = client.get(f"{API}/daily-logs/stats", headers=admin_headers).json()["data"]

    assert stats["total_logs"] == 2
    assert stats["this_week_logs"] == 1
    assert stats["this_month_logs"] == 1
    assert stats["recent_logs"][0]["date"] == today.isoformat()


def test_delete_daily_log(client, admin_headers, project):
    created = client.post(f"{API}/daily-logs", json=_log(project.id), headers=admin_headers).json()["data"]

    assert client.delete(f"{API}/daily-logs/{created['id']}", headers=admin_headers).status_code == 200
    assert client.get(f"{API}/daily-logs/{created['id']}", headers=admin_headers).status_code == 404

    recreated = client.post(f"{API}/daily-logs", json=_log(project.id), headers=admin_headers)
    assert recreated.status_code == 201


def test_field_worker_cannot_edit(client, headers_for, project, admin_headers):
    created = client.post(f"{API}/daily-logs", json=_log(project.id), headers=admin_headers).json()["data"]
    headers = headers_for(Role.FIELD_WORKER)

    response = client.put(f"{API}/daily-logs/{created['id']}", json={"issues": "None"}, headers=headers)
    assert response.status_code == 403
