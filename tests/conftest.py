"""
Shared fixtures: a recording stand-in for a psycopg connection, a render
cache in a temp dir, and TestClients wired to both.
"""

import os
import tempfile
from contextlib import contextmanager
from typing import Any, List, Optional, Sequence, Tuple

import pytest

os.environ.setdefault("CACHE_DIR", tempfile.mkdtemp(prefix="dashboard-test-cache-"))
os.environ.setdefault("AUTH_SECRET", "test-secret")

from fastapi.testclient import TestClient

from apps.dashboard.auth import get_auth_providers
from apps.dashboard.cache import RenderCache, get_render_cache
from apps.dashboard.db import get_conn
from apps.dashboard.main import app

CUSTOMER_ID = "3958dc9e-712f-4377-85e9-fec4b6a6442a"
INVOICE_ID = "cc27c14a-0acf-4f4a-a6c9-d45682c144b9"

USER_EMAIL = "user@nextmail.com"
USER_PASSWORD = "123456"


class FakeCursor:
    def __init__(self, conn: "FakeConnection") -> None:
        self.conn = conn
        self.rowcount = -1
        self.description = None
        self._rows: List[Tuple[Any, ...]] = []

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        return False

    def execute(self, sql: str, params: Any = None) -> None:
        self.conn.executed.append((" ".join(sql.split()), params))
        if self.conn.error is not None:
            raise self.conn.error
        self.rowcount = self.conn.rowcount
        if self.conn.results:
            columns, rows = self.conn.results.pop(0)
            self.description = [(c,) for c in columns]
            self._rows = list(rows)
        else:
            self.description = None
            self._rows = []

    def fetchone(self):
        return self._rows[0] if self._rows else None

    def fetchall(self):
        return list(self._rows)


class FakeConnection:
    """Records every statement; optionally fails or returns canned rows."""

    def __init__(self, rowcount: int = 1, error: Optional[Exception] = None) -> None:
        self.rowcount = rowcount
        self.error = error
        self.executed: List[Tuple[str, Any]] = []
        self.results: List[Tuple[Sequence[str], Sequence[Tuple[Any, ...]]]] = []
        self.commits = 0
        self.rollbacks = 0

    def cursor(self) -> FakeCursor:
        return FakeCursor(self)

    @contextmanager
    def transaction(self):
        try:
            yield
        except Exception:
            self.rollbacks += 1
            raise
        self.commits += 1

    def add_result(self, columns: Sequence[str], rows: Sequence[Tuple[Any, ...]]) -> None:
        self.results.append((columns, rows))


class StaticProvider:
    name = "credentials"

    def authorize(self, email, password):
        if email == USER_EMAIL and password == USER_PASSWORD:
            return {"email": email, "name": "User"}
        return None


@pytest.fixture
def conn():
    return FakeConnection()


@pytest.fixture
def cache(tmp_path):
    render_cache = RenderCache(tmp_path / "render-cache")
    yield render_cache
    render_cache.close()


@pytest.fixture
def client(conn, cache):
    app.dependency_overrides[get_conn] = lambda: conn
    app.dependency_overrides[get_render_cache] = lambda: cache
    app.dependency_overrides[get_auth_providers] = lambda: [StaticProvider()]
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def auth_client(client):
    res = client.post(
        "/login",
        data={"email": USER_EMAIL, "password": USER_PASSWORD},
        follow_redirects=False,
    )
    assert res.status_code == 303
    return client
