def test_health_endpoints(client):
    assert client.get("/api/health").json() == {"status": "ok"}

    live = client.get("/api/health/live")
    assert live.status_code == 200
    assert live.json()["status"] == "ok"

    ready = client.get("/api/health/ready")
    assert ready.status_code in {200, 503}
    payload = ready.json()
    assert set(payload["database"]) == {"ok", "schema_ok", "missing_tables", "missing_columns", "error"}


def test_oversized_request_is_rejected(client):
    response = client.post(
        "/api/timetable/alternate",
        content=b"x" * 2_000_000,
        headers={"Content-Type": "application/json"},
    )

    assert response.status_code == 413
    assert response.json()["message"].startswith("Request body too large")
