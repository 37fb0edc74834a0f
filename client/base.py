"""
client/base.py -- The BackendClient interface.

Providers implement request(); the route helpers below are shared so both
providers send exactly the same method, path, body and headers for a given
call.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any
from urllib.parse import quote

from contract.transport import ContractResponse


class BackendClient(ABC):
    @abstractmethod
    def request(
        self,
        method: str,
        path: str,
        body: Any = None,
        headers: dict[str, str] | None = None,
    ) -> ContractResponse:
        """Send one request and return the backend's status and JSON body."""

    def close(self) -> None:  # noqa: B027 -- optional hook, no-op by default
        pass

    def __enter__(self) -> "BackendClient":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    # ------------------------------------------------------------------
    # Route helpers
    # ------------------------------------------------------------------

    def health(self) -> ContractResponse:
        return self.request("GET", "/health")

    def signup(self, username: str, password: str, age_confirmed: bool = True, device_info: Any = None) -> ContractResponse:
        body = {"username": username, "password": password, "ageConfirmed": age_confirmed}
        if device_info is not None:
            body["deviceInfo"] = device_info
        return self.request("POST", "/auth/signup", body)

    def login(self, username: str, password: str, device_info: Any = None) -> ContractResponse:
        body = {"username": username, "password": password}
        if device_info is not None:
            body["deviceInfo"] = device_info
        return self.request("POST", "/auth/login", body)

    def list_users(self) -> ContractResponse:
        return self.request("GET", "/public/users")

    def profile(self, username: str) -> ContractResponse:
        return self.request("GET", f"/profile/{quote(username, safe='')}")

    def update_profile(self, username: str, **fields: Any) -> ContractResponse:
        return self.request("POST", "/profile/update", {"username": username, **fields})

    def set_rank(self, admin_username: str, target_username: str, rank: Any) -> ContractResponse:
        return self.request(
            "POST",
            "/admin/set-rank",
            {"adminUsername": admin_username, "targetUsername": target_username, "rank": rank},
        )

    def publish_update(self, admin_username: str, target: str | None = None) -> ContractResponse:
        body = {"adminUsername": admin_username}
        if target is not None:
            body["target"] = target
        return self.request("POST", "/admin/publish-update", body)

    def init_rank5(self, secret: str) -> ContractResponse:
        return self.request("POST", "/admin/init-rank5", {"secret": secret})

    def ban(self, admin_username: str, target_username: str, reason: str | None = None) -> ContractResponse:
        body = {"adminUsername": admin_username, "targetUsername": target_username}
        if reason is not None:
            body["reason"] = reason
        return self.request("POST", "/admin/ban", body)

    def unban(self, admin_username: str, target_username: str) -> ContractResponse:
        return self.request(
            "POST",
            "/admin/unban",
            {"adminUsername": admin_username, "targetUsername": target_username},
        )

    def code(self, username: str) -> ContractResponse:
        return self.request("GET", "/code", headers={"X-Username": username})
