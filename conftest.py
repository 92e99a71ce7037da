import pytest
from fastapi.testclient import TestClient

from db import Database
from main import create_app


@pytest.fixture
def database(tmp_path):
    return Database(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}")


@pytest.fixture
def app(database):
    return create_app(database)


@pytest.fixture
def client(app):
    # entering the client runs startup, which creates the tables
    with TestClient(app) as client:
        yield client
