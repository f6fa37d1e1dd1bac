from conftest import API, create_user
from electrical_pm.core.permissions import Role


def test_create_project(client, admin_headers, test_client_record):
    response = client.post(
        f"{API}/projects",
        json={
            "name": "Clinic Expansion",
            "project_number": "P-2001",
            "client_id": test_client_record.id,
            "type": "COMMERCIAL",
            "budget": 125000,
            "start_date": "2024-04-01",
            "end_date": "2024-09-30",
        },
        headers=admin_headers
    )

    assert response.status_code == 201
    data = response.json()["data"]
    assert data["status"] == "QUOTED"
    assert data["billing_type"] == "TIME_AND_MATERIALS"
    assert data["client"]["name"] == "Acme General Contractors"


def test_end_before_start_rejected(client, admin_headers, test_client_record):
    response = client.post(
        f"{API}/projects",
        json={
            "name": "Backwards", "client_id": test_client_record.id,
            "start_date": "2024-09-30", "end_date": "2024-04-01",
        },
        headers=admin_headers
    )
    assert response.status_code == 400


def test_project_number_must_be_unique(client, admin_headers, project, test_client_record):
    response = client.post(
        f"{API}/projects",
        json={"name": "Copy", "project_number": project.project_number, "client_id": test_client_record.id},
        headers=admin_headers
    )
    assert response.status_code == 409


def test_project_for_unknown_client(client, admin_headers):
    response = client.post(f"{API}/projects", json={"name": "Orphan", "client_id": 404}, headers=admin_headers)
    assert response.status_code == 404


def test_filter_projects(client, admin_headers, test_client_record):
    for name, status, budget in [("Alpha", "IN_PROGRESS", 5000), ("Beta", "QUOTED", 20000)]:
        client.post(
            f"{API}/projects",
            json={"name": name, "client_id": test_client_record.id, "status": status, "budget": budget},
            headers=admin_headers
        )

    by_status = client.get(f"{API}/projects?status=IN_PROGRESS", headers=admin_headers).json()
    assert [p["name"] for p in by_status["data"]] == ["Alpha"]

    by_budget = client.get(f"{API}/projects?min_budget=10000", headers=admin_headers).json()
    assert [p["name"] for p in by_budget["data"]] == ["Beta"]

    by_search = client.get(f"{API}/projects?search=alp", headers=admin_headers).json()
    assert by_search["pagination"]["total"] == 1


def test_update_and_delete_project(client, admin_headers, project):
    updated = client.put(f"{API}/projects/{project.id}", json={"status": "IN_PROGRESS"}, headers=admin_headers)
    assert updated.json()["data"]["status"] == "IN_PROGRESS"

    assert client.delete(f"{API}/projects/{project.id}", headers=admin_headers).status_code == 200
    assert client.get(f"{API}/projects/{project.id}", headers=admin_headers).status_code == 404


def test_update_cannot_clear_required_fields(client, admin_headers, project):
    response = client.put(
        f"{API}/projects/{project.id}", json={"name": None, "client_id": None}, headers=admin_headers
    )

    assert response.status_code == 400
    fields = {detail["field"] for detail in response.json()["error"]["details"]}
    assert fields == {"name", "client_id"}

    cleared = client.put(f"{API}/projects/{project.id}", json={"description": None}, headers=admin_headers)
    assert cleared.status_code == 200
    assert cleared.json()["data"]["name"] == "Main Street Retail"


def test_project_members(client, db, admin_headers, project):
    worker = create_user(db, Role.FIELD_WORKER, email="crew@example.com")
    url = f"{API}/projects/{project.id}/members"

    added = client.post(url, json={"user_id": worker.id, "role": "Foreman"}, headers=admin_headers)
    assert added.status_code == 201
    assert added.json()["data"]["user"]["email"] == "crew@example.com"

    duplicate = client.post(url, json={"user_id": worker.id}, headers=admin_headers)
    assert duplicate.status_code == 409

    members = client.get(url, headers=admin_headers).json()["data"]
    assert [m["user_id"] for m in members] == [worker.id]

    assert client.delete(f"{url}/{worker.id}", headers=admin_headers).status_code == 200
    assert client.delete(f"{url}/{worker.id}", headers=admin_headers).status_code == 404


def test_add_inactive_member(client, db, admin_headers, project):
    worker = create_user(db, Role.FIELD_WORKER, email="gone@example.com")
    worker.is_active = False
    db.commit()

    response = client.post(f"{API}/projects/{project.id}/members", json={"user_id": worker.id}, headers=admin_headers)
    assert response.status_code == 404


def test_project_manager_cannot_delete(client, headers_for, project):
    headers = headers_for(Role.PROJECT_MANAGER)
    assert client.delete(f"{API}/projects/{project.id}", headers=headers).status_code == 403


def test_client_read_only_can_list_projects(client, headers_for, project):
    headers = headers_for(Role.CLIENT_READ_ONLY)

    assert client.get(f"{API}/projects", headers=headers).status_code == 200
    assert client.put(f"{API}/projects/{project.id}", json={"name": "X"}, headers=headers).status_code == 403
