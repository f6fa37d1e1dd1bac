from io import BytesIO
import pytest
from PIL import Image
from electrical_pm.core.permissions import Role
from electrical_pm.services.file_service import file_service
from conftest import API


@pytest.fixture(autouse=True)
def upload_dir(tmp_path, monkeypatch):
    """Keep stored files inside the test's temp directory."""
    monkeypatch.setattr(file_service, "upload_dir", tmp_path)
    monkeypatch.setattr(file_service, "use_s3", False)
    return tmp_path


@pytest.fixture
def worker_headers(headers_for):
    return headers_for(Role.FIELD_WORKER)


def create_test_image(color="red", size=(640, 480)):
    """Create a test image file."""
    img = Image.new('RGB', size, color=color)
    img_bytes = BytesIO()
    img.save(img_bytes, format='PNG')
    img_bytes.seek(0)
    return img_bytes


def upload(client, headers, name="panel.png", content=None, mime="image/png", **form):
    content = content if content is not None else create_test_image()
    return client.post(
        f"{API}/files/upload",
        headers=headers,
        files={"file": (name, content, mime)},
        data=form
    )


def test_upload_image_creates_thumbnail(client, worker_headers, project, upload_dir):
    """Images are stored with dimensions and a thumbnail."""
    response = upload(client, worker_headers, project_id=str(project.id), description="Panel LP-2")

    assert response.status_code == 201
    data = response.json()["data"]
    assert data["category"] == "PHOTO"
    assert data["original_filename"] == "panel.png"
    assert data["width"] == 640
    assert data["height"] == 480
    assert data["has_thumbnail"] is True
    assert data["project_id"] == project.id
    assert len(list((upload_dir / "thumbnails").iterdir())) == 1


def test_upload_document_defaults_category(client, worker_headers):
    response = upload(client, worker_headers, name="notes.txt", content=BytesIO(b"conduit fill"), mime="text/plain")

    assert response.status_code == 201
    data = response.json()["data"]
    assert data["category"] == "DOCUMENT"
    assert data["has_thumbnail"] is False


def test_upload_empty_file(client, worker_headers):
    response = upload(client, worker_headers, name="empty.txt", content=BytesIO(b""), mime="text/plain")

    assert response.status_code == 400
    assert response.json()["error"]["message"] == "File is empty"


def test_upload_invalid_file_type(client, worker_headers):
    """Executables are rejected."""
    response = upload(
        client, worker_headers, name="malware.exe",
        content=BytesIO(b"fake executable content"), mime="application/x-msdownload"
    )

    assert response.status_code == 400
    assert "not allowed" in response.json()["error"]["message"]


def test_upload_duplicate_content(client, worker_headers):
    first = upload(client, worker_headers).json()["data"]

    response = upload(client, worker_headers, name="copy.png")

    assert response.status_code == 409
    assert response.json()["error"]["details"] == {"file_id": first["id"]}


def test_upload_to_unknown_project(client, worker_headers, upload_dir):
    response = upload(client, worker_headers, project_id="999")

    assert response.status_code == 404
    assert not any(upload_dir.rglob("*.png"))


def test_upload_without_auth(client):
    """Test uploading without authentication."""
    response = client.post(
        f"{API}/files/upload",
        files={"file": ("test.png", create_test_image(), "image/png")}
    )
    assert response.status_code == 401


def test_upload_multiple_files(client, worker_headers):
    """Each file in a batch succeeds or fails on its own."""
    files = [
        ("files", ("red.png", create_test_image("red"), "image/png")),
        ("files", ("blue.png", create_test_image("blue"), "image/png")),
        ("files", ("tool.exe", BytesIO(b"MZ"), "application/x-msdownload")),
    ]

    response = client.post(f"{API}/files/upload-multiple", headers=worker_headers, files=files)

    assert response.status_code == 201
    data = response.json()["data"]
    assert data["total"] == 3
    assert [f["original_filename"] for f in data["uploaded"]] == ["red.png", "blue.png"]
    assert data["failed"][0]["filename"] == "tool.exe"


def test_download_and_preview(client, worker_headers):
    image = create_test_image().getvalue()
    record = upload(client, worker_headers, content=BytesIO(image)).json()["data"]

    download = client.get(f"{API}/files/{record['id']}/download", headers=worker_headers)
    assert download.status_code == 200
    assert download.content == image
    assert 'filename="panel.png"' in download.headers["content-disposition"]

    preview = client.get(f"{API}/files/{record['id']}/preview", headers=worker_headers)
    assert preview.status_code == 200
    assert preview.headers["content-type"] == "image/jpeg"
    with Image.open(BytesIO(preview.content)) as thumb:
        assert max(thumb.size) <= file_service.thumbnail_size


def test_preview_of_document(client, worker_headers):
    record = upload(
        client, worker_headers, name="notes.txt", content=BytesIO(b"text"), mime="text/plain"
    ).json()["data"]

    response = client.get(f"{API}/files/{record['id']}/preview", headers=worker_headers)
    assert response.status_code == 400


def test_update_list_and_stats(client, worker_headers, headers_for):
    record = upload(client, worker_headers).json()["data"]
    supervisor = headers_for(Role.FIELD_SUPERVISOR)

    updated = client.put(
        f"{API}/files/{record['id']}",
        json={"category": "DRAWING", "tags": ["as-built"]},
        headers=supervisor
    )
    assert updated.json()["data"]["tags"] == ["as-built"]

    listed = client.get(f"{API}/files?category=DRAWING", headers=worker_headers).json()
    assert listed["pagination"]["total"] == 1

    stats = client.get(f"{API}/files/stats", headers=worker_headers).json()["data"]
    assert stats["total_files"] == 1
    assert stats["total_size"] == record["file_size"]
    assert stats["by_category"] == {"DRAWING": 1}


def test_delete_file(client, worker_headers, admin_headers):
    """Field workers cannot delete; admins soft-delete."""
    record = upload(client, worker_headers).json()["data"]

    assert client.delete(f"{API}/files/{record['id']}", headers=worker_headers).status_code == 403

    response = client.delete(f"{API}/files/{record['id']}", headers=admin_headers)
    assert response.status_code == 200
    assert "deleted" in response.json()["message"].lower()
    assert client.get(f"{API}/files/{record['id']}", headers=admin_headers).status_code == 404

    again = upload(client, worker_headers)
    assert again.status_code == 201
