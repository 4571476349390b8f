"""
pytest fixtures for the student records test suite.

Every test gets its own SQLite file so the suite needs no running
database server.
"""

import pytest
import requests
from fastapi.testclient import TestClient

from student_records_api.app.core.config import Settings
from student_records_api.app.main import create_app
from student_records_api.app.services.student_store import SQLiteStudentStore


@pytest.fixture
def store(tmp_path):
    sqlite_store = SQLiteStudentStore(str(tmp_path / "students.db"))
    sqlite_store.init()
    return sqlite_store


@pytest.fixture
def test_settings(tmp_path):
    return Settings(database_url=str(tmp_path / "unused.db"), log_level="DEBUG")


@pytest.fixture
def client(store, test_settings):
    app = create_app(store=store, settings=test_settings)
    with TestClient(app) as test_client:
        yield test_client


class ASGISession:
    """Minimal stand-in for ``requests.Session`` that talks to a TestClient.

    Responses are converted to ``requests.Response`` so the client under
    test sees exactly what it would get from a real server.
    """

    def __init__(self, test_client):
        self.test_client = test_client
        self.calls = []

    def request(self, method, url, json=None, timeout=None, **kwargs):
        self.calls.append((method, url, json))
        path = url.split("://", 1)[-1]
        path = path[path.index("/"):] if "/" in path else "/"
        result = self.test_client.request(method, path, json=json)
        response = requests.Response()
        response.status_code = result.status_code
        response._content = result.content
        response.headers.update(result.headers)
        response.url = url
        response.reason = result.reason_phrase
        return response


@pytest.fixture
def asgi_session(client):
    return ASGISession(client)
