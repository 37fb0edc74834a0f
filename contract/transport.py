"""
contract/transport.py -- What a backend hands back for one request.

Both client providers normalize their backend's answer into this shape, so
the conformance suite and the admin console compare and read responses
without knowing which backend produced them.
"""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True)
class ContractResponse:
    status_code: int
    body: dict = field(default_factory=dict)

    @property
    def success(self) -> bool:
        return bool(self.body.get("success"))

    @property
    def error(self) -> str | None:
        return self.body.get("error")
