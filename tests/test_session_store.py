import pytest
import requests

from conftest import ADMIN_PHONE, PASSWORD
from tiri.client.session_store import (
    SessionRequestFailed,
    SessionStatus,
    StudioSessionClient,
    read_api_error,
)


class _BrokenHttp:
    def get(self, url, **kwargs):
        raise requests.ConnectionError("connection refused")

    post = get


class _Response:
    def __init__(self, body):
        self._body = body

    def json(self):
        if isinstance(self._body, Exception):
            raise self._body
        return self._body


@pytest.fixture
def store(client):
    return StudioSessionClient(http=client)


class TestStudioSessionClient:
    def test_starts_idle(self, store):
        assert store.state.status == SessionStatus.IDLE
        assert store.state.data is None
        assert not store.is_authenticated

    def test_fetch_without_cookie(self, store):
        with pytest.raises(SessionRequestFailed) as error:
            store.fetch_session()

        assert error.value.message == "Unauthorized"
        assert store.state.status == SessionStatus.UNAUTHENTICATED
        assert store.state.error == "Unauthorized"

    def test_login_fetch_logout(self, store):
        data = store.login(ADMIN_PHONE, PASSWORD)

        assert store.is_authenticated
        assert data["user"]["id"] == "admin-id"
        assert store.fetch_session()["studio"] == {"id": "acme-id", "name": "Acme"}

        store.logout()
        assert store.state.status == SessionStatus.UNAUTHENTICATED
        assert store.state.data is None
        assert store.state.error is None

    def test_failed_login(self, store):
        with pytest.raises(SessionRequestFailed):
            store.login(ADMIN_PHONE, "wrong-password")

        assert store.state.status == SessionStatus.UNAUTHENTICATED
        assert store.state.error == "Invalid credentials"

        store.clear_error()
        assert store.state.error is None

    def test_ensure_session_loads_once(self, store):
        assert store.ensure_session() is None
        assert store.state.status == SessionStatus.UNAUTHENTICATED

        store.login(ADMIN_PHONE, PASSWORD)
        assert store.ensure_session()["user"]["phone"] == ADMIN_PHONE

    def test_network_failure_uses_fallback_message(self):
        store = StudioSessionClient(base_url="http://studio.invalid", http=_BrokenHttp())

        with pytest.raises(SessionRequestFailed):
            store.fetch_session()
        assert store.state.error == "Unable to load session"

        with pytest.raises(SessionRequestFailed):
            store.logout()
        assert store.state.error == "Logout failed"


def test_read_api_error():
    assert read_api_error(_Response({"error": "Nope"})) == "Nope"
    assert read_api_error(_Response({})) == "Request failed"
    assert read_api_error(_Response(["not", "a", "dict"])) == "Request failed"
    assert read_api_error(_Response(ValueError("no body"))) == "Request failed"
