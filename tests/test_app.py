from __future__ import annotations

from fastapi.testclient import TestClient

from moodwave.config import IN_MEMORY_DATABASE_URL, Settings
from moodwave.main import create_app


def test_unhandled_errors_become_logged_500s(app, caplog):
    @app.get("/api/explode")
    async def explode() -> None:
        raise RuntimeError("boom")

    with TestClient(app, raise_server_exceptions=False) as client:
        with caplog.at_level("ERROR", logger="moodwave.main"):
            response = client.get("/api/explode")
        healthy = client.get("/health")

    assert response.status_code == 500
    body = response.json()
    assert body["detail"] == "An internal server error occurred"
    assert len(body["error_id"]) == 8
    assert any(body["error_id"] in record.getMessage() for record in caplog.records)
    assert healthy.status_code == 200


def test_each_app_has_its_own_store(app, sign_in):
    _, headers = sign_in()
    other = create_app(Settings(database_url=IN_MEMORY_DATABASE_URL, log_level="WARNING"))

    with TestClient(app) as first, TestClient(other) as second:
        assert first.get("/api/friends", headers=headers).status_code == 200
        assert second.get("/api/friends", headers=headers).status_code == 401
