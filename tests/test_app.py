from conftest import API


def test_health(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "healthy"


def test_unknown_route_uses_error_envelope(client):
    response = client.get(f"{API}/does-not-exist")

    assert response.status_code == 404
    assert response.json() == {"success": False, "error": {"code": "NOT_FOUND", "message": "Not Found"}}


def test_missing_token_is_unauthorized(client):
    response = client.get(f"{API}/projects")

    assert response.status_code == 401
    body = response.json()
    assert body["success"] is False
    assert body["error"]["code"] == "UNAUTHORIZED"


def test_garbage_token_is_unauthorized(client):
    response = client.get(f"{API}/projects", headers={"Authorization": "Bearer not-a-jwt"})
    assert response.status_code == 401


def test_validation_error_lists_fields(client, admin_headers):
    response = client.post(f"{API}/clients", json={"type": "HOMEOWNER"}, headers=admin_headers)

    assert response.status_code == 400
    error = response.json()["error"]
    assert error["code"] == "VALIDATION_ERROR"
    assert error["details"][0]["field"] == "name"
