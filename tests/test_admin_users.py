from electrical_pm.core.permissions import Role
from electrical_pm.models.audit_log import AuditLog
from conftest import API, login


def _new_user(**overrides):
    payload = {
        "email": "new.hire@example.com",
        "password": "Welcome123",
        "first_name": "New",
        "last_name": "Hire",
        "role": "FIELD_WORKER",
    }
    payload.update(overrides)
    return payload


def test_super_admin_creates_user(client, db, super_admin_headers):
    response = client.post(f"{API}/admin/users", json=_new_user(), headers=super_admin_headers)

    assert response.status_code == 201
    data = response.json()["data"]
    assert data["email"] == "new.hire@example.com"
    assert data["role"] == "FIELD_WORKER"
    assert data["is_active"] is True

    assert db.query(AuditLog).filter(AuditLog.resource_type == "user").count() == 1
    login(client, "new.hire@example.com", "Welcome123")


def test_duplicate_email_conflict(client, super_admin_headers):
    client.post(f"{API}/admin/users", json=_new_user(), headers=super_admin_headers)

    response = client.post(f"{API}/admin/users", json=_new_user(), headers=super_admin_headers)

    assert response.status_code == 409
    assert response.json()["error"]["code"] == "CONFLICT"


def test_weak_password_rejected(client, super_admin_headers):
    response = client.post(
        f"{API}/admin/users", json=_new_user(password="alllowercase1"), headers=super_admin_headers
    )
    assert response.status_code == 400


def test_invalid_email_is_validation_error(client, super_admin_headers):
    response = client.post(f"{API}/admin/users", json=_new_user(email="not-an-email"), headers=super_admin_headers)

    assert response.status_code == 400
    assert response.json()["error"]["code"] == "VALIDATION_ERROR"


def test_office_admin_cannot_manage_users(client, admin_headers):
    response = client.get(f"{API}/admin/users", headers=admin_headers)

    assert response.status_code == 403
    assert response.json()["error"]["code"] == "FORBIDDEN"


def test_list_users_paginated(client, super_admin_headers):
    for i in range(3):
        client.post(
            f"{API}/admin/users",
            json=_new_user(email=f"crew{i}@example.com", last_name=f"Crew{i}"),
            headers=super_admin_headers
        )

    response = client.get(f"{API}/admin/users?page=1&limit=2&role=FIELD_WORKER", headers=super_admin_headers)

    assert response.status_code == 200
    body = response.json()
    assert len(body["data"]) == 2
    assert body["pagination"] == {"page": 1, "limit": 2, "total": 3, "total_pages": 2}


def test_cannot_change_own_role(client, super_admin, super_admin_headers):
    response = client.put(
        f"{API}/admin/users/{super_admin.id}", json={"role": "FIELD_WORKER"}, headers=super_admin_headers
    )
    assert response.status_code == 400


def test_cannot_delete_self(client, super_admin, super_admin_headers):
    response = client.delete(f"{API}/admin/users/{super_admin.id}", headers=super_admin_headers)
    assert response.status_code == 400


def test_delete_user_blocks_login(client, super_admin_headers):
    created = client.post(f"{API}/admin/users", json=_new_user(), headers=super_admin_headers).json()["data"]

    response = client.delete(f"{API}/admin/users/{created['id']}", headers=super_admin_headers)
    assert response.status_code == 200

    response = client.post(f"{API}/auth/login", json={"email": "new.hire@example.com", "password": "Welcome123"})
    assert response.status_code == 401

    response = client.get(f"{API}/admin/users/{created['id']}", headers=super_admin_headers)
    assert response.status_code == 404


def test_reset_password(client, super_admin_headers):
    created = client.post(f"{API}/admin/users", json=_new_user(), headers=super_admin_headers).json()["data"]

    response = client.post(
        f"{API}/admin/users/{created['id']}/reset-password",
        json={"new_password": "Replaced456"},
        headers=super_admin_headers
    )

    assert response.status_code == 200
    login(client, "new.hire@example.com", "Replaced456")


def test_update_user_role(client, super_admin_headers):
    created = client.post(f"{API}/admin/users", json=_new_user(), headers=super_admin_headers).json()["data"]

    response = client.put(
        f"{API}/admin/users/{created['id']}",
        json={"role": Role.FIELD_SUPERVISOR.value},
        headers=super_admin_headers
    )

    assert response.status_code == 200
    assert response.json()["data"]["role"] == "FIELD_SUPERVISOR"
