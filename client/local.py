"""
client/local.py -- BackendClient over the in-process simulation.
"""

from __future__ import annotations

from typing import Any

from client.base import BackendClient
from contract.transport import ContractResponse
from local.router import LocalBackend


class LocalBackendClient(BackendClient):
    def __init__(self, backend: LocalBackend) -> None:
        self.backend = backend

    def request(
        self,
        method: str,
        path: str,
        body: Any = None,
        headers: dict[str, str] | None = None,
    ) -> ContractResponse:
        return self.backend.handle(method, path, body, headers)

    def close(self) -> None:
        self.backend.close()
