import logging
from datetime import datetime

import pytest
from fastapi.testclient import TestClient

from location_api.database import Base
from location_api.main import create_app
from location_api.store import LocationStore, StorageError

CORS = {
    "access-control-allow-origin": "*",
    "access-control-allow-methods": "POST, GET, OPTIONS",
    "access-control-allow-headers": "Content-Type",
}


def assert_cors(response):
    for name, value in CORS.items():
        assert response.headers[name] == value


def test_bangkok_scenario(client):
    r = client.get("/api/location/last")
    assert r.status_code == 404
    assert r.json()["detail"] == "No locations found"

    r = client.post("/api/location", json={"Latitude": 13.7563, "Longitude": 100.5018})
    assert r.status_code == 201
    assert r.json() == {"message": "Location saved successfully"}

    r = client.get("/api/location/last")
    assert r.status_code == 200
    assert r.headers["content-type"].startswith("application/json")
    body = r.json()
    assert set(body) == {"ID", "Latitude", "Longitude", "Timestamp"}
    assert body["ID"] == 1
    assert body["Latitude"] == 13.7563
    assert body["Longitude"] == 100.5018
    ts = datetime.fromisoformat(body["Timestamp"].replace("Z", "+00:00"))
    assert ts.tzinfo is not None


def test_latest_after_many_posts(client):
    coords = [(1.5, -2.5), (-33.8688, 151.2093), (51.5074, -0.1278)]
    for lat, lon in coords:
        assert client.post("/api/location", json={"Latitude": lat, "Longitude": lon}).status_code == 201
    body = client.get("/api/location/last").json()
    assert body["ID"] == 3
    assert (body["Latitude"], body["Longitude"]) == coords[-1]


def test_lowercase_field_names_accepted(client):
    r = client.post("/api/location", json={"latitude": 1.25, "longitude": 2.5})
    assert r.status_code == 201
    assert client.get("/api/location/last").json()["Latitude"] == 1.25


def test_integer_coordinates_accepted(client):
    assert client.post("/api/location", json={"Latitude": 10, "Longitude": -20}).status_code == 201
    body = client.get("/api/location/last").json()
    assert (body["Latitude"], body["Longitude"]) == (10.0, -20.0)


@pytest.mark.parametrize("payload", [
    b"not json",
    b"",
    b"[1, 2]",
    b'{"Latitude": "north", "Longitude": 1}',
    b'{"Latitude": 1.0}',
])
def test_bad_payload_rejected_without_insert(client, store, payload):
    r = client.post("/api/location", content=payload, headers={"Content-Type": "application/json"})
    assert r.status_code == 400
    assert r.json()["detail"].startswith("Invalid request payload: ")
    assert_cors(r)
    assert store.count() == 0


def test_wrong_methods(client):
    r = client.get("/api/location")
    assert r.status_code == 405
    assert_cors(r)

    r = client.post("/api/location/last", json={})
    assert r.status_code == 405
    assert_cors(r)


@pytest.mark.parametrize("path", ["/api/location", "/api/location/last"])
def test_preflight(client, path):
    r = client.options(path, headers={
        "Origin": "http://localhost:3000",
        "Access-Control-Request-Method": "POST",
    })
    assert r.status_code == 200
    assert r.content == b""
    assert_cors(r)


def test_preflight_ignores_store_state(client, store):
    Base.metadata.drop_all(bind=store.engine)
    r = client.options("/api/location/last")
    assert r.status_code == 200
    assert_cors(r)


def test_cors_headers_on_success_and_not_found(client):
    assert_cors(client.get("/api/location/last"))
    assert_cors(client.post("/api/location", json={"Latitude": 0.0, "Longitude": 0.0}))
    assert_cors(client.get("/api/location/last"))


def test_storage_error_maps_to_500_and_server_recovers(client, store):
    Base.metadata.drop_all(bind=store.engine)

    r = client.post("/api/location", json={"Latitude": 1.0, "Longitude": 2.0})
    assert r.status_code == 500
    assert r.json()["detail"].startswith("Failed to save location: ")
    assert_cors(r)

    r = client.get("/api/location/last")
    assert r.status_code == 500
    assert r.json()["detail"].startswith("Failed to retrieve last location: ")

    store.initialize()
    assert client.post("/api/location", json={"Latitude": 1.0, "Longitude": 2.0}).status_code == 201
    assert client.get("/api/location/last").status_code == 200


def test_unopenable_store_aborts_startup(tmp_path):
    s = LocationStore(f"sqlite:///{tmp_path / 'nope' / 'locations.db'}")
    with pytest.raises(StorageError):
        with TestClient(create_app(s)):
            pass


@pytest.mark.parametrize("payload", [
    {"LATITUDE": 5.5, "LONGITUDE": -6.5},
    {"lAtItUdE": 5.5, "Longitude": -6.5},
])
def test_field_names_match_case_insensitively(client, payload):
    assert client.post("/api/location", json=payload).status_code == 201
    body = client.get("/api/location/last").json()
    assert (body["Latitude"], body["Longitude"]) == (5.5, -6.5)


def test_later_spelling_wins(client):
    r = client.post(
        "/api/location",
        content=b'{"latitude": 1.0, "Latitude": 2.0, "Longitude": 3.0}',
        headers={"Content-Type": "application/json"},
    )
    assert r.status_code == 201
    assert client.get("/api/location/last").json()["Latitude"] == 2.0


def test_options_on_unknown_path_is_not_answered(client):
    r = client.options("/anything")
    assert r.status_code == 404
    assert_cors(r)


def test_saved_location_is_logged(client, caplog):
    caplog.set_level(logging.INFO, logger="LocationAPI")
    client.post("/api/location", json={"Latitude": 13.7563, "Longitude": 100.5018})
    assert "Received and saved location: Lat=13.756300, Lon=100.501800" in caplog.text
