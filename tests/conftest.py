# tests/conftest.py
import pytest
from fastapi.testclient import TestClient

from location_api.main import create_app
from location_api.store import LocationStore


@pytest.fixture
def store(tmp_path):
    # fresh SQLite file per test
    s = LocationStore(f"sqlite:///{tmp_path / 'locations.db'}")
    s.initialize()
    yield s
    s.close()


@pytest.fixture
def client(store):
    # entering the context runs the startup hook (initialize is idempotent)
    with TestClient(create_app(store)) as c:
        yield c
