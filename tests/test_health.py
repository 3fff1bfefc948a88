def test_root(client):
    response = client.get("/")
    assert response.status_code == 200
    assert response.json()["status"] == "ok"


def test_health_reports_database_and_memory(client):
    response = client.get("/health")
    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "healthy"
    assert body["database"]["status"] == "connected"
    assert body["system"]["process_memory_mb"] > 0


def test_database_errors_become_generic_server_error(client, admin_headers, monkeypatch):
    from sqlalchemy.exc import OperationalError

    from eteeap.services import admin_service

    def broken(db):
        raise OperationalError("SELECT * FROM applications", {}, Exception("connection lost"))

    monkeypatch.setattr(admin_service, "fetch_application_rows", broken)

    response = client.get("/admin/applications", headers=admin_headers)
    assert response.status_code == 500
    assert response.json() == {"detail": "Server error"}
