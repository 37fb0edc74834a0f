"""
contract/envelope.py -- Exception -> (status, body) translation.

The one place that decides what a failure looks like on the wire. Both
api/main.py's exception handlers and local/router.py call error_response(),
so a given exception produces the same status and body on either backend.

Internal failures expose str(exc) in the body. That leaks more than it
should, but clients already display it and both backends must match.
"""

from __future__ import annotations

from typing import Any, Iterable

from contract.models import ErrorResponse
from core.errors import InternalError, SafecordError

NOT_FOUND_MESSAGE = "Not found"
RATE_LIMITED_MESSAGE = "Too many requests"


def envelope(message: str) -> dict:
    return ErrorResponse(error=message).model_dump(by_alias=True)


def error_response(exc: BaseException) -> tuple[int, dict]:
    """Map any exception to (status_code, {"success": false, "error": ...}).

    Anything that is not a SafecordError is reported as an InternalError.
    """
    if not isinstance(exc, SafecordError):
        exc = InternalError(str(exc))
    return exc.status_code, envelope(exc.message)


def not_found_response() -> tuple[int, dict]:
    return 404, envelope(NOT_FOUND_MESSAGE)


def format_validation_errors(errors: Iterable[dict[str, Any]]) -> str:
    """Render pydantic validation errors as one human-readable line.

    FastAPI prefixes body locations with "body"; model_validate() does not.
    The prefix is stripped so both backends print the same text, e.g.
    "Invalid request body: ageConfirmed: Input should be a valid boolean".
    """
    parts = []
    for err in errors:
        loc = [str(p) for p in err.get("loc", ())]
        if loc and loc[0] == "body":
            loc = loc[1:]
        msg = err.get("msg", "invalid value")
        parts.append(f"{'.'.join(loc)}: {msg}" if loc else msg)
    return "Invalid request body: " + "; ".join(parts)
