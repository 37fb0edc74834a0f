"""
client/http.py -- BackendClient over HTTP (the persistent service).

Uses a requests.Session by default. Any object with a compatible
request(method, url, json=, headers=) method can be injected instead -- the
test suite passes FastAPI's TestClient so the full ASGI stack runs without a
socket. The timeout applies to requests sessions only.

Network failures (requests.ConnectionError, timeouts) propagate to the
caller; there are no retries. A response whose body is not JSON is reported
as a failure envelope carrying the raw text.
"""

from __future__ import annotations

import logging
from typing import Any

import requests

from client.base import BackendClient
from contract.transport import ContractResponse

logger = logging.getLogger("safecord.client")

_DEFAULT_TIMEOUT = 10.0  # seconds


class HttpBackendClient(BackendClient):
    def __init__(self, base_url: str, session: Any = None, timeout: float = _DEFAULT_TIMEOUT) -> None:
        self.base_url = base_url.rstrip("/")
        self._owns_session = session is None
        self.session = session if session is not None else requests.Session()
        self.timeout = timeout

    def request(
        self,
        method: str,
        path: str,
        body: Any = None,
        headers: dict[str, str] | None = None,
    ) -> ContractResponse:
        # Only requests takes a per-call timeout; an injected TestClient warns on it.
        extra = {"timeout": self.timeout} if isinstance(self.session, requests.Session) else {}
        resp = self.session.request(method, f"{self.base_url}{path}", json=body, headers=headers, **extra)
        try:
            payload = resp.json()
        except ValueError:
            logger.warning("Non-JSON response from %s %s (HTTP %d)", method, path, resp.status_code)
            payload = {"success": False, "error": resp.text}
        if not isinstance(payload, dict):
            payload = {"success": False, "error": str(payload)}
        return ContractResponse(status_code=resp.status_code, body=payload)

    def close(self) -> None:
        if self._owns_session:
            self.session.close()
