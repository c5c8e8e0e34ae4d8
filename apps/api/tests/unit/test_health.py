def test_health_check(client):
    response = client.get("/health")

    assert response.status_code == 200
    assert response.json() == {"status": "ok", "store_backend": "memory"}


def test_readiness_check_uses_local_store_in_memory_mode(client):
    response = client.get("/ready")

    assert response.status_code == 200
    assert response.json() == {
        "status": "ok",
        "dependencies": [{"name": "local_store", "status": "ok"}],
    }


def test_readiness_check_probes_database_in_db_mode(client, db_backend):
    response = client.get("/ready")

    assert response.status_code == 200
    assert response.json() == {
        "status": "ok",
        "dependencies": [{"name": "database", "status": "ok"}],
    }


def test_readiness_check_degraded_when_database_unavailable(client, db_backend, monkeypatch):
    from app.routers import health

    monkeypatch.setattr(health, "_database_dependency_status", lambda *_args: "error")

    response = client.get("/ready")

    assert response.status_code == 503
    assert response.json() == {
        "status": "degraded",
        "dependencies": [{"name": "database", "status": "error"}],
    }


def test_readiness_check_degraded_when_local_store_not_writable(client, tmp_path, monkeypatch):
    from app.routers import health

    blocker = tmp_path / "not-a-directory"
    blocker.write_text("x", encoding="utf-8")
    monkeypatch.setattr(health.local_store, "path", blocker / "orders.json")

    response = client.get("/ready")

    assert response.status_code == 503
    assert response.json()["dependencies"] == [{"name": "local_store", "status": "error"}]


def test_health_endpoint_exposes_explicit_response_schema(client):
    openapi = client.get("/openapi.json")
    assert openapi.status_code == 200

    payload = openapi.json()
    health_get = payload["paths"]["/health"]["get"]
    ready_get = payload["paths"]["/ready"]["get"]

    assert health_get["responses"]["200"]["content"]["application/json"]["schema"]["$ref"] == (
        "#/components/schemas/HealthResponse"
    )
    assert ready_get["responses"]["503"]["content"]["application/json"]["schema"]["$ref"] == (
        "#/components/schemas/ReadinessResponse"
    )


def test_readiness_ok_when_local_store_directory_not_created_yet(client, tmp_path, monkeypatch):
    from app.routers import health

    monkeypatch.setattr(health.local_store, "path", tmp_path / "missing" / "orders.json")

    response = client.get("/ready")

    assert response.status_code == 200
    assert response.json()["dependencies"] == [{"name": "local_store", "status": "ok"}]
