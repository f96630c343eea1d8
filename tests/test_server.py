"""
Tests for the HTTP layer.
"""

import sqlite3

import pytest
from fastapi.testclient import TestClient
from pyppeteer.errors import PageError, TimeoutError as BrowserTimeoutError

from site_catalog.server import create_app

from conftest import FakeLauncher, FakePage


@pytest.fixture
def client(config, store, launcher):
    return TestClient(create_app(config, store, launcher=launcher))


def _unreachable_launcher():
    return FakeLauncher(page_factory=lambda: FakePage(goto_errors=[
        BrowserTimeoutError("Navigation Timeout Exceeded"),
        PageError("net::ERR_CONNECTION_TIMED_OUT"),
    ]))


def test_health(client):
    r = client.get("/health")
    assert r.status_code == 200
    assert r.json()["status"] == "ok"


def test_add_and_list(client):
    r = client.post("/api/websites", json={"url": "https://example.com"})
    assert r.status_code == 201
    data = r.json()
    assert data["title"] == "Example Studio"
    assert data["category"] == "Design"
    assert data["screenshotPath"].startswith("/screenshots/")

    r = client.get("/api/websites")
    assert r.status_code == 200
    assert [w["url"] for w in r.json()] == ["https://example.com"]


def test_add_requires_url(client):
    assert client.post("/api/websites", json={}).status_code == 400
    assert client.post("/api/websites", json={"url": "nope"}).status_code == 400


def test_add_duplicate_conflict(client):
    client.post("/api/websites", json={"url": "https://example.com"})
    r = client.post("/api/websites", json={"url": "https://example.com"})
    assert r.status_code == 409


def test_add_timeout_maps_to_408(config, store):
    client = TestClient(create_app(config, store, launcher=_unreachable_launcher()))

    r = client.post("/api/websites", json={"url": "https://unreachable.invalid"})
    assert r.status_code == 408
    assert store.list_all() == []


def test_add_generic_failure_maps_to_500(config, store):
    launcher = FakeLauncher(error=OSError("Failed to launch browser"))
    client = TestClient(create_app(config, store, launcher=launcher))

    r = client.post("/api/websites", json={"url": "https://example.com"})
    assert r.status_code == 500
    assert "Failed to launch browser" in r.json()["detail"]


def test_add_store_failure_maps_to_500(client, store, monkeypatch):
    def locked(url):
        raise sqlite3.OperationalError("database is locked")

    monkeypatch.setattr(store, "get_by_url", locked)

    r = client.post("/api/websites", json={"url": "https://example.com"})
    assert r.status_code == 500
    assert r.json()["detail"] == "Failed to add website"


def test_get_and_delete(client):
    website_id = client.post("/api/websites", json={"url": "https://example.com"}).json()["id"]

    assert client.get(f"/api/websites/{website_id}").status_code == 200

    r = client.delete(f"/api/websites/{website_id}")
    assert r.status_code == 200
    assert r.json() == {"success": True}

    assert client.get(f"/api/websites/{website_id}").status_code == 404
    assert client.delete(f"/api/websites/{website_id}").status_code == 404


def test_invalid_id_rejected(client):
    assert client.delete("/api/websites/abc").status_code == 422


def test_update_tags(client):
    website_id = client.post("/api/websites", json={"url": "https://example.com"}).json()["id"]

    r = client.patch(f"/api/websites/{website_id}/tags", json={"tags": "dark, minimal,"})
    assert r.status_code == 200
    assert r.json()["tags"] == "dark, minimal"

    assert client.patch("/api/websites/999/tags", json={"tags": "x"}).status_code == 404


def test_rescan(client):
    created = client.post("/api/websites", json={"url": "https://example.com"}).json()

    r = client.post(f"/api/websites/{created['id']}/rescan")
    assert r.status_code == 200
    assert r.json()["id"] == created["id"]

    assert client.post("/api/websites/999/rescan").status_code == 404


def test_rescan_timeout_maps_to_408(config, store):
    website = store.add(url="https://unreachable.invalid", title="x", screenshot_path="/screenshots/x.jpg")
    client = TestClient(create_app(config, store, launcher=_unreachable_launcher()))

    assert client.post(f"/api/websites/{website.id}/rescan").status_code == 408


def test_rescan_store_failure_maps_to_500(client, store, monkeypatch):
    created = client.post("/api/websites", json={"url": "https://example.com"}).json()

    def locked(website_id, **fields):
        raise sqlite3.OperationalError("database is locked")

    monkeypatch.setattr(store, "update_capture", locked)

    r = client.post(f"/api/websites/{created['id']}/rescan")
    assert r.status_code == 500
    assert r.json()["detail"] == "Failed to rescan website"


def test_serves_screenshot(client):
    created = client.post("/api/websites", json={"url": "https://example.com"}).json()

    r = client.get(created["screenshotPath"])
    assert r.status_code == 200
    assert r.headers["content-type"] == "image/jpeg"

    assert client.get("/screenshots/missing.jpg").status_code == 404
