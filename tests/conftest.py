import mongomock
import pytest
from fastapi.testclient import TestClient

from config import Settings
from database import Database
from main import create_app


@pytest.fixture
def store():
    return Database(mongomock.MongoClient(), "sashakt_test")


@pytest.fixture
def settings():
    return Settings(database_url="mongodb://localhost:27017", database_name="sashakt_test")


@pytest.fixture
def client(settings, store):
    app = create_app(settings=settings, store=store)
    with TestClient(app) as c:
        yield c
