from __future__ import annotations

from sqlalchemy.ext.asyncio import AsyncSession

from conftest import VALID_CASE


def test_sync_creates_new_cases(client):
    r = client.post("/api/cases/sync", json={"cases": [VALID_CASE, {**VALID_CASE, "name": "Sita"}]})
    assert r.status_code == 200
    body = r.json()
    assert body["message"] == "Synced 2 cases successfully"
    assert [c["name"] for c in body["cases"]] == ["Ravi Kumar", "Sita"]
    assert all(c["synced"] for c in body["cases"])
    assert "errors" not in body
    assert len(client.get("/api/cases").json()) == 2


def test_sync_skips_existing_id(client, make_case):
    existing = make_case()

    r = client.post(
        "/api/cases/sync",
        json={"cases": [{**VALID_CASE, "_id": existing["_id"], "name": "Changed offline"}]},
    )
    assert r.status_code == 200
    synced = r.json()["cases"]
    assert len(synced) == 1
    assert synced[0]["_id"] == existing["_id"]
    assert synced[0]["name"] == existing["name"]
    assert len(client.get("/api/cases").json()) == 1


def test_sync_keeps_client_id_for_new_record(client):
    r = client.post("/api/cases/sync", json={"cases": [{**VALID_CASE, "_id": "offline-0001"}]})
    assert r.json()["cases"][0]["_id"] == "offline-0001"

    again = client.post("/api/cases/sync", json={"cases": [{**VALID_CASE, "_id": "offline-0001"}]})
    assert again.json()["cases"][0]["_id"] == "offline-0001"
    assert len(client.get("/api/cases").json()) == 1


def test_sync_without_id_does_not_dedupe(client):
    client.post("/api/cases/sync", json={"cases": [VALID_CASE]})
    client.post("/api/cases/sync", json={"cases": [VALID_CASE]})

    cases = client.get("/api/cases").json()
    assert len(cases) == 2
    assert cases[0]["_id"] != cases[1]["_id"]


def test_sync_collects_element_errors(client):
    batch = [
        VALID_CASE,
        {**VALID_CASE, "name": "Bad severity", "severity": "extreme"},
        {**VALID_CASE, "name": "Mohan"},
        "not a case",
    ]
    r = client.post("/api/cases/sync", json={"cases": batch})
    assert r.status_code == 200
    body = r.json()
    assert body["message"] == "Synced 2 cases successfully"
    assert [c["name"] for c in body["cases"]] == ["Ravi Kumar", "Mohan"]
    assert len(body["errors"]) == 2
    assert body["errors"][0]["case"] == "Bad severity"
    assert "severity" in body["errors"][0]["error"]
    assert body["errors"][1]["case"] is None


def test_sync_empty_batch(client):
    r = client.post("/api/cases/sync", json={"cases": []})
    assert r.status_code == 200
    assert r.json() == {"message": "Synced 0 cases successfully", "cases": []}


def test_sync_rejects_bad_payload(client):
    for payload in ({}, {"cases": "nope"}, {"cases": {"name": "x"}}, [VALID_CASE]):
        r = client.post("/api/cases/sync", json=payload)
        assert r.status_code == 400
        assert r.json() == {"error": "Invalid sync payload. Expected { cases: [...] }"}


def test_sync_blank_id_creates_new_record(client):
    r = client.post("/api/cases/sync", json={"cases": [{**VALID_CASE, "_id": ""}]})
    body = r.json()
    assert "errors" not in body
    assert len(body["cases"]) == 1
    assert body["cases"][0]["_id"]
    assert len(client.get("/api/cases").json()) == 1


def test_sync_returns_stored_record_when_insert_loses_race(client, make_case, monkeypatch):
    existing = make_case()
    original_get = AsyncSession.get
    calls = []

    async def get_missing_first(self, entity, ident, **kwargs):
        # the first lookup misses as if the other writer had not committed yet
        calls.append(ident)
        if len(calls) == 1:
            return None
        return await original_get(self, entity, ident, **kwargs)

    monkeypatch.setattr(AsyncSession, "get", get_missing_first)

    r = client.post(
        "/api/cases/sync",
        json={"cases": [{**VALID_CASE, "_id": existing["_id"], "name": "Changed offline"}]},
    )
    assert r.status_code == 200
    body = r.json()
    assert "errors" not in body
    assert body["cases"][0]["_id"] == existing["_id"]
    assert body["cases"][0]["name"] == existing["name"]
    assert calls == [existing["_id"], existing["_id"]]

    monkeypatch.undo()
    assert len(client.get("/api/cases").json()) == 1
