"""Smoke tests for the application wiring in app.main."""
import importlib

import pytest
from fastapi.testclient import TestClient


@pytest.fixture
def main_module(monkeypatch, tmp_path):
    monkeypatch.delenv("DATABASE_URL", raising=False)
    monkeypatch.setenv("USERS_DATA_PATH", str(tmp_path / "users.json"))
    monkeypatch.setenv("SEED_SAMPLE_USERS", "true")
    import app.main
    return importlib.reload(app.main)


def test_health_reports_json_store(main_module):
    resp = TestClient(main_module.app).get("/health")
    assert resp.status_code == 200
    assert resp.json()["persistence"] == "json"
    assert "database" not in resp.json()


def test_seeded_user_can_log_in(main_module):
    from app.infrastructure.database.seed import SAMPLE_PASSWORD

    client = TestClient(main_module.app)
    resp = client.post("/api/authentication/login", json={
        "email": "bob@test.com", "password": SAMPLE_PASSWORD,
    })
    assert resp.status_code == 200
    assert resp.json()["name"] == "Bob"
