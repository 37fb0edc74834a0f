"""
tests/test_health.py -- GET /health on both backends.

Covers:
  - 200 with success, message and an ISO 8601 timestamp
  - identical message across backends
  - no headers required, trailing slash is not the same route
"""

from __future__ import annotations

from datetime import datetime

from contract.operations import HEALTH_MESSAGE


def test_health_returns_200_with_message(api_client):
    """Health endpoint returns 200 with the fixed message and a timestamp."""
    resp = api_client.get("/health")
    assert resp.status_code == 200
    data = resp.json()
    assert data["success"] is True
    assert data["message"] == HEALTH_MESSAGE
    # Parses as ISO 8601; raises ValueError otherwise.
    datetime.fromisoformat(data["timestamp"])


def test_health_same_message_on_every_backend(backend):
    resp = backend.health()
    assert resp.status_code == 200
    assert resp.success
    assert resp.body["message"] == HEALTH_MESSAGE
    assert set(resp.body) == {"success", "message", "timestamp"}


def test_health_no_headers_required(api_client):
    resp = api_client.get("/health", headers={})
    assert resp.status_code == 200


def test_health_trailing_slash_is_not_found(backend):
    """No slash redirect: /health/ is an unknown route on both backends."""
    resp = backend.request("GET", "/health/")
    assert resp.status_code == 404
    assert resp.body == {"success": False, "error": "Not found"}
