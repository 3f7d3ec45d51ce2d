import os

os.environ.setdefault("BUDGET_LOG_FILE", os.devnull)

import duckdb
import pytest

import config
from db import init_db


@pytest.fixture
def conn():
    connection = duckdb.connect(":memory:")
    init_db(connection)
    yield connection
    connection.close()


@pytest.fixture
def client(tmp_path, monkeypatch):
    from fastapi.testclient import TestClient

    from main import app
    from services.session_service import SessionState

    monkeypatch.setattr(config, "DB_FILE", str(tmp_path / "test.duckdb"))
    app.state.session = SessionState()
    with TestClient(app) as test_client:
        yield test_client
