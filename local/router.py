"""
local/router.py -- The local simulation backend.

Answers the same routes as api/main.py with the same status codes and bodies,
without a network or a database: requests are dispatched in-process against
identity services built over a MemoryCredentialStore.

Differences from the HTTP service, by construction:
  - No rate limiting on /auth/login.
  - Storage is private to this process. Two processes (or two LocalBackend
    instances) never see each other's writes, so multi-client scenarios
    diverge from the shared persistent service.

Bodies and responses are round-tripped through JSON so that values which
would not survive the wire (tuples, sets, datetimes) behave as they would
over HTTP.
"""

from __future__ import annotations

import json
import logging
import re
from pathlib import Path
from typing import Any, Callable, Optional
from urllib.parse import unquote, urlsplit

from pydantic import BaseModel
from pydantic import ValidationError as SchemaError

from auth.services import IdentityServices, build_services
from contract import operations
from contract.envelope import error_response, format_validation_errors, not_found_response
from contract.models import (
    BanRequest,
    InitRank5Request,
    LoginRequest,
    ProfileUpdateRequest,
    PublishUpdateRequest,
    SetRankRequest,
    SignupRequest,
    UnbanRequest,
)
from contract.transport import ContractResponse
from core.config import Settings
from core.errors import SafecordError, ValidationError
from store.memory import MemoryCredentialStore

logger = logging.getLogger("safecord.local")

# Handler signature: (services, parsed body or None, path params, lowercased headers) -> response model
_Handler = Callable[[IdentityServices, Optional[BaseModel], dict, dict], BaseModel]


class _Route:
    def __init__(self, method: str, pattern: str, handler: _Handler, body_model: type[BaseModel] | None = None):
        self.method = method
        # "{name}" segments match a single path segment, as in FastAPI.
        regex = re.sub(r"\{(\w+)\}", r"(?P<\1>[^/]+)", pattern)
        self.pattern = re.compile(f"^{regex}$")
        self.handler = handler
        self.body_model = body_model


_ROUTES = (
    _Route("GET", "/health", lambda s, b, p, h: operations.health()),
    _Route("POST", "/auth/signup", lambda s, b, p, h: operations.signup(s, b), SignupRequest),
    _Route("POST", "/auth/login", lambda s, b, p, h: operations.login(s, b), LoginRequest),
    _Route("GET", "/public/users", lambda s, b, p, h: operations.list_users(s)),
    _Route("POST", "/profile/update", lambda s, b, p, h: operations.update_profile(s, b), ProfileUpdateRequest),
    _Route("GET", "/profile/{username}", lambda s, b, p, h: operations.get_profile(s, p["username"])),
    _Route("GET", "/code", lambda s, b, p, h: operations.source_code(s, h.get("x-username"))),
    _Route("POST", "/admin/set-rank", lambda s, b, p, h: operations.set_rank(s, b), SetRankRequest),
    _Route("POST", "/admin/publish-update", lambda s, b, p, h: operations.publish_update(s, b), PublishUpdateRequest),
    _Route("POST", "/admin/init-rank5", lambda s, b, p, h: operations.init_rank5(s, b), InitRank5Request),
    _Route("POST", "/admin/ban", lambda s, b, p, h: operations.ban(s, b), BanRequest),
    _Route("POST", "/admin/unban", lambda s, b, p, h: operations.unban(s, b), UnbanRequest),
)


class LocalBackend:
    """Route table + dispatcher over one set of identity services.

    Usage:
        backend = LocalBackend.from_settings(get_settings())
        resp = backend.handle("POST", "/auth/signup", {"username": "alice", ...})
        resp.status_code, resp.body
    """

    def __init__(self, services: IdentityServices) -> None:
        self.services = services

    @classmethod
    def from_settings(cls, settings: Settings) -> "LocalBackend":
        path = Path(settings.local_store_path) if settings.local_store_path else None
        store = MemoryCredentialStore(path)
        logger.info("Local simulation backend ready (snapshot=%s)", path or "memory only")
        return cls(build_services(store, settings))

    def handle(
        self,
        method: str,
        path: str,
        body: Any = None,
        headers: dict[str, str] | None = None,
    ) -> ContractResponse:
        """Dispatch one request. Never raises: every failure becomes an envelope."""
        try:
            status, payload = self._dispatch(method.upper(), path, body, headers or {})
        except SafecordError as exc:
            status, payload = error_response(exc)
        except Exception as exc:
            logger.exception("Unhandled exception on %s %s", method, path)
            status, payload = error_response(exc)
        return ContractResponse(status_code=status, body=json.loads(json.dumps(payload)))

    def _dispatch(self, method: str, path: str, body: Any, headers: dict[str, str]) -> tuple[int, dict]:
        # Clients collapse dot segments before sending and Starlette matches on
        # the fully percent-decoded path; "a%2Fb" is two segments by then.
        route_path = unquote(_remove_dot_segments(urlsplit(path).path))
        for route in _ROUTES:
            match = route.pattern.match(route_path)
            if match is None or route.method != method:
                continue
            params = match.groupdict()
            parsed = _parse_body(route.body_model, body) if route.body_model else None
            lowered = {k.lower(): v for k, v in headers.items()}
            result = route.handler(self.services, parsed, params, lowered)
            return 200, result.model_dump(by_alias=True)
        return not_found_response()

    def close(self) -> None:
        self.services.close()


def _parse_body(model: type[BaseModel], body: Any) -> BaseModel:
    """Validate body against model the way FastAPI does for a JSON body.

    FastAPI validates request bodies with from_attributes=True, which decides
    the wording of the error for a body that is not a JSON object.

    Schema failures raise ValidationError carrying the same message the HTTP
    service produces.
    """
    # A JSON null body counts as missing, as it does for FastAPI.
    if body is None:
        raise ValidationError(format_validation_errors([{"loc": ("body",), "msg": "Field required"}]))
    try:
        return model.model_validate(json.loads(json.dumps(body)), from_attributes=True)
    except SchemaError as exc:
        raise ValidationError(format_validation_errors(exc.errors())) from exc


def _remove_dot_segments(path: str) -> str:
    """Resolve "." and ".." segments of an absolute path (RFC 3986, 5.2.4).

    "/profile/.." -> "/" and "/profile/." -> "/profile/", as httpx and
    requests rewrite them before the request leaves the client.
    """
    output: list[str] = []
    for segment in path.split("/"):
        if segment == "..":
            if len(output) > 1:
                output.pop()
        elif segment != ".":
            output.append(segment)
    if path.endswith(("/.", "/..")):
        output.append("")
    return "/".join(output) or "/"
