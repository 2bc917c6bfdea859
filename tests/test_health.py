from fastapi.testclient import TestClient

from app.main import app


def test_health_returns_ok(monkeypatch):
    monkeypatch.setenv("APP__SERVICE_NAME", "order-management")
    client = TestClient(app)

    response = client.get("/health")

    assert response.status_code == 200
    body = response.json()
    assert body["service"] == "order-management"
    assert body["status"] == "ok"


def test_health_uses_default_service_name(monkeypatch):
    monkeypatch.delenv("APP__SERVICE_NAME", raising=False)
    client = TestClient(app)

    assert client.get("/health").json()["service"] == "order-management"
