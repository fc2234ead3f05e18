from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from aish.config import Settings, get_settings
from aish.main import create_app

VALID_CASE = {
    "name": "Ravi Kumar",
    "age": 34,
    "location": "Kothapalli",
    "lat": 17.385,
    "lng": 78.4867,
    "symptoms": "Diarrhoea, fever",
    "waterSource": "Well",
    "severity": "medium",
    "reportedBy": "Dr. Alice",
    "userId": "device-7",
}


@pytest.fixture()
def settings(tmp_path) -> Settings:
    return Settings(
        database_url=f"sqlite+aiosqlite:///{tmp_path / 'test.db'}",
        password_secret="test-secret",
        password_hash_iterations=1000,
        log_level="WARNING",
    )


@pytest.fixture()
def client(settings):
    app = create_app(settings)
    app.dependency_overrides[get_settings] = lambda: settings
    with TestClient(app) as c:
        yield c


@pytest.fixture()
def make_case(client):
    def _make(**overrides):
        payload = {**VALID_CASE, **overrides}
        r = client.post("/api/cases", json=payload)
        assert r.status_code == 201, r.text
        return r.json()

    return _make
