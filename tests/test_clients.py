from electrical_pm.core.permissions import Role
from conftest import API


def _contacts_url(client_id):
    return f"{API}/clients/{client_id}/contacts"


def test_create_and_search_clients(client, admin_headers):
    for name, kind in [("Bright Homes", "HOMEOWNER"), ("City Hospital", "COMMERCIAL")]:
        response = client.post(f"{API}/clients", json={"name": name, "type": kind}, headers=admin_headers)
        assert response.status_code == 201

    body = client.get(f"{API}/clients?search=hospital", headers=admin_headers).json()
    assert [c["name"] for c in body["data"]] == ["City Hospital"]

    by_type = client.get(f"{API}/clients?type=HOMEOWNER", headers=admin_headers).json()
    assert by_type["pagination"]["total"] == 1


def test_invalid_client_type(client, admin_headers):
    response = client.post(f"{API}/clients", json={"name": "X", "type": "PARTNER"}, headers=admin_headers)
    assert response.status_code == 400


def test_update_and_delete_client(client, admin_headers, test_client_record):
    updated = client.put(
        f"{API}/clients/{test_client_record.id}", json={"phone": "555-0100"}, headers=admin_headers
    )
    assert updated.json()["data"]["phone"] == "555-0100"

    assert client.delete(f"{API}/clients/{test_client_record.id}", headers=admin_headers).status_code == 200
    assert client.get(f"{API}/clients/{test_client_record.id}", headers=admin_headers).status_code == 404


def test_single_primary_contact(client, admin_headers, test_client_record):
    url = _contacts_url(test_client_record.id)
    first = client.post(url, json={"name": "Pat Lee", "is_primary": True}, headers=admin_headers).json()["data"]
    second = client.post(url, json={"name": "Sam Roy", "is_primary": True}, headers=admin_headers).json()["data"]

    contacts = client.get(url, headers=admin_headers).json()["data"]
    primaries = [c["id"] for c in contacts if c["is_primary"]]
    assert primaries == [second["id"]]

    response = client.post(f"{url}/{first['id']}/primary", headers=admin_headers)
    assert response.status_code == 200
    contacts = client.get(url, headers=admin_headers).json()["data"]
    assert [c["id"] for c in contacts if c["is_primary"]] == [first["id"]]
    assert contacts[0]["id"] == first["id"]


def test_delete_contact(client, admin_headers, test_client_record):
    url = _contacts_url(test_client_record.id)
    contact = client.post(url, json={"name": "Pat Lee"}, headers=admin_headers).json()["data"]

    assert client.delete(f"{url}/{contact['id']}", headers=admin_headers).status_code == 200
    assert client.get(f"{url}/{contact['id']}", headers=admin_headers).status_code == 404
    assert client.get(url, headers=admin_headers).json()["data"] == []


def test_contact_of_unknown_client(client, admin_headers):
    response = client.post(_contacts_url(999), json={"name": "Nobody"}, headers=admin_headers)
    assert response.status_code == 404


def test_client_projects_statistics(client, admin_headers, test_client_record):
    for name, status, budget in [("A", "IN_PROGRESS", 1000), ("B", "IN_PROGRESS", 2500.5), ("C", "COMPLETE", 500)]:
        client.post(
            f"{API}/projects",
            json={"name": name, "client_id": test_client_record.id, "status": status, "budget": budget},
            headers=admin_headers
        )

    data = client.get(f"{API}/clients/{test_client_record.id}/projects", headers=admin_headers).json()["data"]
    assert data["client"]["id"] == test_client_record.id
    assert len(data["projects"]) == 3
    assert data["statistics"] == {"total": 3, "by_status": {"IN_PROGRESS": 2, "COMPLETE": 1}, "total_budget": 4000.5}

    active = client.get(
        f"{API}/clients/{test_client_record.id}/projects?status=IN_PROGRESS", headers=admin_headers
    ).json()["data"]
    assert len(active["projects"]) == 2
    assert active["statistics"]["total"] == 3


def test_field_worker_cannot_read_clients(client, headers_for):
    response = client.get(f"{API}/clients", headers=headers_for(Role.FIELD_WORKER))
    assert response.status_code == 403


def test_client_read_only_role(client, headers_for, test_client_record):
    headers = headers_for(Role.CLIENT_READ_ONLY)

    assert client.get(f"{API}/clients/{test_client_record.id}", headers=headers).status_code == 200
    assert client.post(f"{API}/clients", json={"name": "Nope"}, headers=headers).status_code == 403
