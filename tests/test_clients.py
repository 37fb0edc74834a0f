"""
tests/test_clients.py -- Client providers, provider selection and the local router.

Covers:
  - make_client() picks the provider named by BACKEND_MODE
  - HttpBackendClient: URL joining, non-JSON responses, session ownership,
    per-call timeout on requests sessions only
  - LocalBackend: never raises, JSON round trip, query strings, snapshots,
    path decoding and dot segments as Starlette sees them
"""

from __future__ import annotations

import pytest
import requests

from client.factory import make_client
from client.http import HttpBackendClient
from client.local import LocalBackendClient
from local.router import LocalBackend, _remove_dot_segments


class _FakeResponse:
    def __init__(self, status_code: int, payload=None, text: str = "") -> None:
        self.status_code = status_code
        self._payload = payload
        self.text = text

    def json(self):
        if self._payload is None:
            raise ValueError("No JSON object could be decoded")
        return self._payload


class _FakeSession:
    def __init__(self, response: _FakeResponse) -> None:
        self.response = response
        self.sent: list[dict] = []
        self.closed = False

    def request(self, method, url, json=None, headers=None):
        self.sent.append({"method": method, "url": url, "json": json, "headers": headers})
        return self.response

    def close(self) -> None:
        self.closed = True


class _RecordingRequestsSession(requests.Session):
    def __init__(self) -> None:
        super().__init__()
        self.kwargs: list[dict] = []

    def request(self, method, url, **kwargs):
        self.kwargs.append(kwargs)
        return _FakeResponse(200, {"success": True})


class TestMakeClient:
    def test_local_mode(self, settings) -> None:
        client = make_client(settings.model_copy(update={"backend_mode": "local", "local_store_path": ""}))
        try:
            assert isinstance(client, LocalBackendClient)
            assert client.health().status_code == 200
        finally:
            client.close()

    def test_http_mode(self, settings) -> None:
        client = make_client(settings.model_copy(update={"backend_mode": "http", "api_base_url": "http://api:9000/"}))
        try:
            assert isinstance(client, HttpBackendClient)
            assert client.base_url == "http://api:9000"
        finally:
            client.close()


class TestHttpBackendClient:
    def test_sends_camelcase_body_to_joined_url(self) -> None:
        session = _FakeSession(_FakeResponse(200, {"success": True, "message": "ok"}))
        client = HttpBackendClient("http://api/", session=session)
        resp = client.set_rank("root", "alice", 3)
        assert resp.success
        assert session.sent == [
            {
                "method": "POST",
                "url": "http://api/admin/set-rank",
                "json": {"adminUsername": "root", "targetUsername": "alice", "rank": 3},
                "headers": None,
            }
        ]

    def test_profile_path_is_quoted(self) -> None:
        session = _FakeSession(_FakeResponse(200, {"success": True}))
        HttpBackendClient("http://api", session=session).profile("Mark 2.0/x")
        assert session.sent[0]["url"] == "http://api/profile/Mark%202.0%2Fx"

    def test_code_sends_username_header(self) -> None:
        session = _FakeSession(_FakeResponse(200, {"success": True}))
        HttpBackendClient("http://api", session=session).code("root")
        assert session.sent[0]["headers"] == {"X-Username": "root"}

    def test_non_json_response_becomes_error_envelope(self) -> None:
        session = _FakeSession(_FakeResponse(502, text="Bad Gateway"))
        resp = HttpBackendClient("http://api", session=session).health()
        assert resp.status_code == 502
        assert not resp.success
        assert resp.error == "Bad Gateway"

    def test_injected_session_is_not_closed(self) -> None:
        session = _FakeSession(_FakeResponse(200, {"success": True}))
        with HttpBackendClient("http://api", session=session):
            pass
        assert session.closed is False

    def test_requests_session_gets_timeout(self) -> None:
        session = _RecordingRequestsSession()
        HttpBackendClient("http://api", session=session, timeout=2.5).health()
        assert session.kwargs[0]["timeout"] == 2.5

    def test_other_sessions_get_no_timeout(self) -> None:
        session = _FakeSession(_FakeResponse(200, {"success": True}))
        assert HttpBackendClient("http://api", session=session, timeout=2.5).health().success


class TestLocalBackend:
    def test_unexpected_exception_is_500_envelope(self, memory_services, monkeypatch) -> None:
        def boom() -> list[str]:
            raise RuntimeError("store offline")

        monkeypatch.setattr(memory_services.auth, "list_usernames", boom)
        resp = LocalBackend(memory_services).handle("GET", "/public/users")
        assert resp.status_code == 500
        assert resp.body == {"success": False, "error": "store offline"}

    def test_query_string_ignored_for_routing(self, memory_services) -> None:
        resp = LocalBackend(memory_services).handle("GET", "/public/users?page=2")
        assert resp.status_code == 200
        assert resp.body == {"success": True, "users": []}

    def test_method_is_case_insensitive(self, memory_services) -> None:
        assert LocalBackend(memory_services).handle("get", "/health").status_code == 200

    def test_device_info_round_trips_as_json(self, memory_services) -> None:
        backend = LocalBackend(memory_services)
        body = {"username": "alice", "password": "pw123", "ageConfirmed": True, "deviceInfo": {"screens": (1, 2)}}
        assert backend.handle("POST", "/auth/signup", body).status_code == 200
        assert memory_services.auth.users.get("alice").device_info == {"screens": [1, 2]}

    def test_header_lookup_is_case_insensitive(self, memory_services) -> None:
        resp = LocalBackend(memory_services).handle("GET", "/code", headers={"x-USERNAME": "ghost"})
        assert resp.status_code == 403

    def test_snapshot_persists_between_instances(self, settings, tmp_path) -> None:
        configured = settings.model_copy(update={"local_store_path": str(tmp_path / "mockdb.json")})
        first = LocalBackendClient(LocalBackend.from_settings(configured))
        assert first.signup("alice", "pw123").status_code == 200
        first.close()

        second = LocalBackendClient(LocalBackend.from_settings(configured))
        try:
            assert second.login("ALICE", "pw123").status_code == 200
            assert second.list_users().body["users"] == ["alice"]
        finally:
            second.close()

    def test_non_object_body_message(self, memory_services) -> None:
        resp = LocalBackend(memory_services).handle("POST", "/auth/login", [1, 2])
        assert resp.status_code == 400
        assert resp.body["error"] == (
            "Invalid request body: Input should be a valid dictionary or object to extract fields from"
        )

    @pytest.mark.parametrize("path", ["/profile/a%2Fb", "/profile/..", "/profile/."])
    def test_unaddressable_profile_paths_are_not_found(self, memory_services, path) -> None:
        resp = LocalBackend(memory_services).handle("GET", path)
        assert resp.status_code == 404
        assert resp.body == {"success": False, "error": "Not found"}

    def test_dot_segments_resolve_before_routing(self, memory_services) -> None:
        resp = LocalBackend(memory_services).handle("GET", "/auth/../public/./users")
        assert resp.status_code == 200


@pytest.mark.parametrize(
    "path,expected",
    [
        ("/profile/..", "/"),
        ("/profile/.", "/profile/"),
        ("/a/b/../c", "/a/c"),
        ("/../health", "/health"),
        ("/profile/j.doe", "/profile/j.doe"),
    ],
)
def test_remove_dot_segments(path, expected) -> None:
    assert _remove_dot_segments(path) == expected
