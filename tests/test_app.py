import logging

import mongomock
import pytest
from fastapi.testclient import TestClient
from pymongo.errors import OperationFailure, ServerSelectionTimeoutError

import database
from config import Settings, parse_origins
from database import Database
from logging_config import setup_logging
from main import SECURITY_HEADERS, create_app


def test_root(client):
    response = client.get("/")
    assert response.status_code == 200
    assert response.text == "Hey"
    assert response.headers["content-type"].startswith("text/plain")


def test_security_headers(client):
    response = client.get("/")
    for header, value in SECURITY_HEADERS.items():
        assert response.headers[header] == value


@pytest.mark.parametrize("origin", [
    "http://localhost:3000",
    "https://sashakt-child-empowerment.vercel.app",
    "https://sashakt-five.vercel.app",
])
def test_cors_allowed_origins(client, origin):
    response = client.get("/", headers={"Origin": origin})
    assert response.headers["access-control-allow-origin"] == origin


def test_cors_rejects_other_origins(client):
    response = client.get("/", headers={"Origin": "https://evil.example"})
    assert "access-control-allow-origin" not in response.headers

    response = client.options("/users", headers={
        "Origin": "https://evil.example",
        "Access-Control-Request-Method": "POST",
    })
    assert response.status_code == 400


def test_parse_origins_strips_trailing_slash():
    assert parse_origins(" https://a.example/ ,http://b.example,,") == ["https://a.example", "http://b.example"]


def test_no_diagnostics_route(client):
    assert client.get("/test").status_code == 404


def test_startup_without_database_url_fails():
    app = create_app(settings=Settings(database_url=None))
    with pytest.raises(RuntimeError):
        with TestClient(app):
            pass


def test_connect_requires_url():
    with pytest.raises(RuntimeError):
        Database.connect("", "sashakt")


class RecordingClient(mongomock.MongoClient):
    instances = []

    def __init__(self, *args, **kwargs):
        super().__init__()
        self.closed = False
        RecordingClient.instances.append(self)

    def close(self):
        self.closed = True


@pytest.fixture
def recording_client(monkeypatch):
    RecordingClient.instances = []
    monkeypatch.setattr(database, "MongoClient", RecordingClient)
    return RecordingClient


def test_connect_failed_ping_closes_client(recording_client, monkeypatch):
    def unreachable(self):
        raise ServerSelectionTimeoutError("db-1:27017 timed out")

    monkeypatch.setattr(Database, "ping", unreachable)
    with pytest.raises(RuntimeError, match="MongoDB connection error"):
        Database.connect("mongodb://db-1:27017", "sashakt", timeout_ms=10)
    assert len(recording_client.instances) == 1
    assert recording_client.instances[0].closed


def test_startup_with_unreachable_database_fails(recording_client, monkeypatch):
    def unreachable(self):
        raise ServerSelectionTimeoutError("db-1:27017 timed out")

    monkeypatch.setattr(Database, "ping", unreachable)
    app = create_app(settings=Settings(database_url="mongodb://db-1:27017"))
    with pytest.raises(RuntimeError):
        with TestClient(app):
            pass
    assert recording_client.instances[0].closed


def test_startup_index_failure_closes_client(recording_client, monkeypatch):
    def duplicate_data(self):
        raise OperationFailure("E11000 duplicate key error")

    monkeypatch.setattr(Database, "ping", lambda self: None)
    monkeypatch.setattr(Database, "ensure_indexes", duplicate_data)
    app = create_app(settings=Settings(database_url="mongodb://db-1:27017"))
    with pytest.raises(OperationFailure):
        with TestClient(app):
            pass
    assert recording_client.instances[0].closed


def test_startup_and_shutdown_own_the_client(recording_client, monkeypatch):
    monkeypatch.setattr(Database, "ping", lambda self: None)
    app = create_app(settings=Settings(database_url="mongodb://db-1:27017"))
    with TestClient(app) as client:
        assert client.get("/").status_code == 200
        assert not recording_client.instances[0].closed
    assert recording_client.instances[0].closed


def test_setup_logging_quiets_driver():
    setup_logging("INFO")
    assert logging.getLogger("pymongo").level == logging.WARNING
    setup_logging("debug")
    assert logging.getLogger("pymongo").level == logging.DEBUG
    setup_logging("INFO")


def test_unique_nickname_index(store):
    store.ensure_indexes()
    indexes = store.db["user"].index_information()
    assert any(index.get("unique") for index in indexes.values())
