from datetime import datetime, timedelta
from types import SimpleNamespace

import pytest
from fastapi.testclient import TestClient

from fiszki.core.database import get_supabase
from fiszki.main import app

USER_ID = "1b80fade-ccb5-43e8-ba09-c2e07bd3ddf9"
OTHER_USER_ID = "9f0c1d2e-0000-4000-8000-000000000002"
TOKENS = {"token-user-1": USER_ID, "token-user-2": OTHER_USER_ID}

BASE_TIME = datetime(2025, 10, 25, 10, 0, 0)


class FakeResponse:
    def __init__(self, data, count=None):
        self.data = data
        self.count = count


class FakeQuery:
    """Just enough of the PostgREST builder for the services under test"""

    def __init__(self, db, table):
        self.db = db
        self.table = table
        self.op = "select"
        self.payload = None
        self.filters = []
        self.order_by = None
        self.bounds = None
        self.count = None

    def select(self, *columns, count=None):
        self.count = count
        return self

    def insert(self, rows):
        self.op, self.payload = "insert", rows
        return self

    def update(self, fields):
        self.op, self.payload = "update", fields
        return self

    def delete(self):
        self.op = "delete"
        return self

    def eq(self, column, value):
        self.filters.append(lambda row: row.get(column) == value)
        return self

    def in_(self, column, values):
        self.filters.append(lambda row: row.get(column) in values)
        return self

    def order(self, column, desc=False):
        self.order_by = (column, desc)
        return self

    def range(self, start, end):
        self.bounds = (start, end)
        return self

    def _matching(self):
        rows = self.db.tables.setdefault(self.table, [])
        return [row for row in rows if all(check(row) for check in self.filters)]

    async def execute(self):
        self.db.executed.append((self.table, self.op))
        failure = self.db.failures.pop(self.table, None)
        if failure is not None:
            raise failure

        rows = self.db.tables.setdefault(self.table, [])

        if self.op == "insert":
            payload = self.payload if isinstance(self.payload, list) else [self.payload]
            created = [self.db.new_row(self.table, item) for item in payload]
            rows.extend(created)
            return FakeResponse([dict(row) for row in created])

        matching = self._matching()

        if self.op == "update":
            for row in matching:
                row.update(self.payload)
            return FakeResponse([dict(row) for row in matching])

        if self.op == "delete":
            self.db.tables[self.table] = [row for row in rows if row not in matching]
            return FakeResponse([dict(row) for row in matching])

        total = len(matching)
        if self.order_by:
            column, desc = self.order_by
            matching = sorted(matching, key=lambda row: row.get(column), reverse=desc)
        if self.bounds:
            start, end = self.bounds
            matching = matching[start:end + 1]
        return FakeResponse([dict(row) for row in matching], total if self.count else None)


class FakeRpc:
    def __init__(self, db, name, params):
        self.db, self.name, self.params = db, name, params

    async def execute(self):
        self.db.rpc_calls.append((self.name, self.params))
        failure = self.db.failures.pop(self.name, None)
        if failure is not None:
            raise failure
        return FakeResponse(self.db.rpc_results.get(self.name))


class FakeAuth:
    def __init__(self):
        self.sign_in_result = None
        self.sign_up_result = None
        self.error = None
        self.signed_out = False
        self.calls = []

    async def get_user(self, token):
        user_id = TOKENS.get(token)
        if user_id is None:
            return None
        return SimpleNamespace(user=SimpleNamespace(id=user_id))

    async def sign_in_with_password(self, credentials):
        self.calls.append(("sign_in", credentials))
        if self.error is not None:
            raise self.error
        return self.sign_in_result

    async def sign_up(self, credentials):
        self.calls.append(("sign_up", credentials))
        if self.error is not None:
            raise self.error
        return self.sign_up_result

    async def sign_out(self):
        self.signed_out = True


class FakePostgrest:
    def __init__(self):
        self.token = None

    def auth(self, token):
        self.token = token


class FakeSupabase:
    def __init__(self):
        self.tables = {}
        self.failures = {}
        self.rpc_results = {}
        self.rpc_calls = []
        self.executed = []
        self.auth = FakeAuth()
        self.postgrest = FakePostgrest()
        self._ids = {}

    def table(self, name):
        return FakeQuery(self, name)

    def rpc(self, name, params=None):
        return FakeRpc(self, name, params or {})

    def new_row(self, table, values):
        next_id = self._ids.get(table, 0) + 1
        self._ids[table] = next_id
        stamp = (BASE_TIME + timedelta(seconds=next_id)).isoformat()
        row = {"id": next_id, "created_at": stamp, "updated_at": stamp}
        row.update(values)
        return row

    def seed(self, table, **values):
        row = self.new_row(table, values)
        self.tables.setdefault(table, []).append(row)
        return row


@pytest.fixture
def fake_supabase():
    return FakeSupabase()


@pytest.fixture
def client(fake_supabase):
    app.dependency_overrides[get_supabase] = lambda: fake_supabase
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def lenient_client(fake_supabase):
    """Client that returns 500 responses instead of re-raising server errors"""
    app.dependency_overrides[get_supabase] = lambda: fake_supabase
    yield TestClient(app, raise_server_exceptions=False)
    app.dependency_overrides.clear()


@pytest.fixture
def auth_headers():
    return {"Authorization": "Bearer token-user-1"}


@pytest.fixture
def user_id():
    return USER_ID


@pytest.fixture
def other_user_id():
    return OTHER_USER_ID
