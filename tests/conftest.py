"""
Shared fixtures for the planner tests.
"""

import threading
import time
from uuid import uuid4

import pytest
from fastapi.testclient import TestClient

from planner.controller import PlannerController
from planner.data.local_store import LocalStorage, LocalTarget
from planner.data.sync import SyncIndicator, WriteQueue
from planner.session import IdentitySession

TEST_SECRET = "test-backend-secret"


class FakeIdentityProvider:
    """In-memory identity provider with manual change notifications."""

    def __init__(self, session=None, startup_error=None, sign_in_error=None):
        self.session = session
        self.startup_error = startup_error
        self.sign_in_error = sign_in_error
        self.subscribers = []
        self.sign_in_calls = 0
        self.sign_out_calls = 0

    def get_session(self):
        if self.startup_error is not None:
            raise self.startup_error
        return self.session

    def subscribe(self, callback):
        self.subscribers.append(callback)

        def _unsubscribe():
            self.subscribers.remove(callback)

        return _unsubscribe

    def emit(self, session):
        self.session = session
        for callback in list(self.subscribers):
            callback(session)

    def sign_in(self):
        self.sign_in_calls += 1
        if self.sign_in_error is not None:
            raise self.sign_in_error

    def sign_out(self):
        self.sign_out_calls += 1


class FakeRemoteApi:
    """Stands in for ``api_client.request`` with an owner-partitioned store.

    ``delays`` is consumed one entry per PUT, in the order calls start.
    """

    def __init__(self):
        self.categories = {}
        self.todos = {}
        self.calls = []
        self.delays = []
        self.fail = False
        self._lock = threading.Lock()

    def __call__(self, method, path, params=None, json=None, timeout=10, user_id=None):
        with self._lock:
            self.calls.append((method, path, json, user_id))
            delay = self.delays.pop(0) if method == "PUT" and self.delays else 0
        if self.fail:
            raise RuntimeError("API error 503 Service Unavailable: down")
        if delay:
            time.sleep(delay)
        with self._lock:
            if path == "/v1/categories" and method == "GET":
                return {"items": [dict(item) for item in self.categories.get(user_id, [])]}
            if path == "/v1/categories" and method == "PUT":
                items = [
                    {"id": item.get("id") or uuid4().hex, "name": item["name"], "color": item["color"]}
                    for item in json["items"]
                ]
                self.categories[user_id] = items
                return {"items": items}
            if path == "/v1/todos" and method == "GET":
                days = self.todos.get(user_id, {})
                return {"items": {key: [dict(row) for row in rows] for key, rows in days.items() if rows}}
            if path.startswith("/v1/todos/") and method == "PUT":
                day_key = path.rsplit("/", 1)[1]
                items = [dict(item, created_at=item.get("created_at") or 0) for item in json["items"]]
                self.todos.setdefault(user_id, {})[day_key] = items
                return {"day_key": day_key, "items": items}
        raise RuntimeError(f"API error 404 Not Found: {method} {path}")


@pytest.fixture
def storage(tmp_path):
    return LocalStorage.from_url(f"sqlite:///{tmp_path / 'local.db'}")


@pytest.fixture
def local_target(storage):
    return LocalTarget(storage)


@pytest.fixture
def make_provider():
    return FakeIdentityProvider


@pytest.fixture
def fake_api():
    return FakeRemoteApi()


@pytest.fixture
def indicator():
    return SyncIndicator()


@pytest.fixture
def controller():
    ctrl = PlannerController(queue=WriteQueue(serialize=True), tz_name="Asia/Seoul")
    yield ctrl
    ctrl.close()


@pytest.fixture
def alice_session():
    return IdentitySession(
        user_id="kakao-1001",
        profile={"nickname": "alice", "avatar_url": "https://img.example/alice.png"},
    )


@pytest.fixture
def api_test_client(tmp_path, monkeypatch):
    """TestClient for the planner API on a throwaway SQLite file."""
    from planner_api import db, settings

    monkeypatch.setenv("DATABASE_URL", f"sqlite+aiosqlite:///{tmp_path / 'api.db'}")
    monkeypatch.setenv("BACKEND_SESSION_SECRET", TEST_SECRET)
    monkeypatch.delenv("ALLOWED_USER_IDS", raising=False)
    settings.reset_settings()
    monkeypatch.setattr(db, "_engine", None)
    monkeypatch.setattr(db, "_session_factory", None)

    from planner_api.main import create_app

    with TestClient(create_app()) as client:
        yield client
    settings.reset_settings()


@pytest.fixture
def api_request(api_test_client):
    """A drop-in for ``planner.data.api_client.request`` backed by the TestClient."""

    def _request(method, path, params=None, json=None, timeout=10, user_id=None):
        headers = {"X-Backend-Token": TEST_SECRET, "X-User-Id": user_id or ""}
        response = api_test_client.request(method, path, params=params, json=json, headers=headers)
        if not response.is_success:
            raise RuntimeError(f"API error {response.status_code}: {response.text}")
        return response.json()

    return _request
