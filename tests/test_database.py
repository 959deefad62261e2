from types import SimpleNamespace

import pytest

from fiszki.core import database


class ClosableClient:
    def __init__(self, auth_error=None):
        self.closed = []
        self.auth_error = auth_error
        self.postgrest = SimpleNamespace(aclose=self._close_postgrest)
        self.auth = SimpleNamespace(close=self._close_auth)

    async def _close_postgrest(self):
        self.closed.append("postgrest")

    async def _close_auth(self):
        if self.auth_error is not None:
            raise self.auth_error
        self.closed.append("auth")


@pytest.fixture
def supabase_client(monkeypatch):
    client = ClosableClient()

    async def create():
        return client

    monkeypatch.setattr(database, "create_supabase_client", create)
    return client


async def test_get_supabase_closes_sessions_after_request(supabase_client):
    dependency = database.get_supabase()

    assert await dependency.__anext__() is supabase_client
    assert supabase_client.closed == []

    with pytest.raises(StopAsyncIteration):
        await dependency.__anext__()

    assert supabase_client.closed == ["postgrest", "auth"]


async def test_get_supabase_closes_sessions_when_handler_fails(supabase_client):
    dependency = database.get_supabase()
    await dependency.__anext__()

    with pytest.raises(RuntimeError):
        await dependency.athrow(RuntimeError("handler failed"))

    assert supabase_client.closed == ["postgrest", "auth"]


async def test_close_failure_is_only_logged(caplog):
    client = ClosableClient(auth_error=RuntimeError("already closed"))

    await database.close_supabase_client(client)

    assert client.closed == ["postgrest"]
    assert "Failed to close Supabase auth session" in caplog.text
