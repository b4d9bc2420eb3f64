"""Tests for the /add and /check endpoints."""

import json

import pytest
from fastapi.testclient import TestClient

from attractions.routes.dependencies import get_cache_repository
from attractions.services.cache_repository import CacheRepository
from main import app

from conftest import make_payload


@pytest.fixture
def client(cache):
    app.dependency_overrides[get_cache_repository] = lambda: cache
    yield TestClient(app)
    app.dependency_overrides.clear()


class TestAdd:
    def test_accepts_valid_submission(self, client, cache):
        response = client.post("/add", json=make_payload())

        assert response.status_code == 200
        assert response.content == b""
        records = cache.read_all_attractions()
        assert len(records) == 1
        record = records[0]
        assert record.id == "trakpilis"
        assert record.image_url == "https://img.test/trakai.jpg"
        assert record.image_copyright == "CC BY-SA 4.0"
        assert json.loads(record.description)["name"] == "Trakų Pilis"
        assert json.loads(record.location)["city"] == "Trakai"

    def test_name_trimmed_id_from_raw_name(self, client, cache):
        payload = make_payload()
        payload["description"]["name"] = "  Trakų Pilis  "

        assert client.post("/add", json=payload).status_code == 200

        record = cache.read_all_attractions()[0]
        assert record.id == "trakpilis"
        assert record.name == "Trakų Pilis"

    def test_missing_image_stored_as_null(self, client, cache):
        payload = make_payload()
        del payload["image"]

        assert client.post("/add", json=payload).status_code == 200
        assert cache.read_all_attractions()[0].image_url is None

    def test_duplicate_is_server_error(self, client):
        assert client.post("/add", json=make_payload()).status_code == 200

        response = client.post("/add", json=make_payload())

        assert response.status_code == 500
        assert "error" in response.json()

    def test_empty_body(self, client):
        response = client.post("/add", content=b"")
        assert response.status_code == 400
        assert response.json() == {"error": "Request body is empty"}

    def test_malformed_json(self, client):
        response = client.post("/add", content=b'{"category": ', headers={"Content-Type": "application/json"})
        assert response.status_code == 400
        assert response.json() == {"error": "Request body contains badly-formed JSON"}

    def test_unknown_field(self, client):
        response = client.post("/add", json=make_payload(rating=5))
        assert response.status_code == 400
        assert response.json() == {"error": 'Request body contains unknown field "rating"'}

    def test_missing_field(self, client):
        payload = make_payload()
        del payload["location"]
        response = client.post("/add", json=payload)
        assert response.status_code == 400
        assert response.json() == {"error": 'Request body is missing the "location" field'}

    @pytest.mark.parametrize("mutate, message", [
        (lambda p: p["description"].update(info="Too short."), "Object description is too short"),
        (lambda p: p["description"].update(name="Ab"), "Name is too short"),
        (lambda p: p["location"].update(city="123456"), "City is invalid"),
        (lambda p: p["location"].update(city="Vil"), "City is invalid"),
        (lambda p: p["description"]["hours"].update(std="closed"), "Invalid open hours"),
        (lambda p: p.update(category="shopping"), "Invalid category"),
        (lambda p: p["location"]["coordinates"].update(latitude=52.23), "Location is outside of Lithuania"),
        (lambda p: p["location"]["coordinates"].update(longitude=27.0), "Location is outside of Lithuania"),
    ])
    def test_rule_violations(self, client, cache, mutate, message):
        payload = make_payload()
        mutate(payload)

        response = client.post("/add", json=payload)

        assert response.status_code == 400
        assert response.json() == {"error": message}
        assert cache.count_attractions() == 0

    def test_lithuanian_city_accepted(self, client):
        payload = make_payload()
        payload["location"]["city"] = "Šiauliai"
        assert client.post("/add", json=payload).status_code == 200


class TestCheck:
    def test_finds_similar_names(self, client):
        client.post("/add", json=make_payload())

        response = client.get("/check", params={"name": "Trakų pilis"})

        assert response.status_code == 200
        assert response.json() == ["Trakų Pilis"]

    def test_no_match(self, client):
        client.post("/add", json=make_payload())

        response = client.get("/check", params={"name": "Curonian Spit"})

        assert response.json() == []

    def test_empty_cache(self, client):
        response = client.get("/check", params={"name": "anything"})
        assert response.status_code == 200
        assert response.json() == []

    def test_requires_name(self, client):
        assert client.get("/check").status_code == 422

    def test_read_fault(self, tmp_path):
        broken = CacheRepository(str(tmp_path / "bare.db"), init_schema=False)
        app.dependency_overrides[get_cache_repository] = lambda: broken
        try:
            response = TestClient(app).get("/check", params={"name": "Trakai"})
        finally:
            app.dependency_overrides.clear()
            broken.close()

        assert response.status_code == 500
        assert response.json() == {"error": "Failed to read cache"}


def test_health():
    response = TestClient(app).get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "healthy"}


def test_lifespan_opens_cache_for_requests(tmp_path, monkeypatch):
    monkeypatch.setenv("CACHE_DB_PATH", str(tmp_path / "served.db"))
    monkeypatch.delenv("COMMAND_CONSOLE", raising=False)

    with TestClient(app) as client:
        assert isinstance(app.state.cache, CacheRepository)
        assert client.post("/add", json=make_payload()).status_code == 200
        response = client.get("/check", params={"name": "Trakų Pilis"})

    assert response.status_code == 200
    assert response.json() == ["Trakų Pilis"]
