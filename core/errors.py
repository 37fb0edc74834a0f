"""
core/errors.py -- Domain exception taxonomy shared by every layer.

Every exception carries the HTTP-style status code it maps to at the contract
boundary. Services raise these; api/ and local/ translate them into the
{success: false, error} envelope via contract.envelope.error_response().

Conflict maps to 400, not 409: the UI already treats a duplicate username as
an ordinary input error and both backends must agree on the status.
"""


class SafecordError(Exception):
    """Base class for all expected failures in the identity backend."""

    status_code = 500

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class ValidationError(SafecordError):
    """Malformed or missing input."""

    status_code = 400


class AuthError(SafecordError):
    """Bad credentials. Deliberately generic to prevent username enumeration."""

    status_code = 401


class AuthorizationError(SafecordError):
    """Missing or insufficient privilege."""

    status_code = 403


class NotFound(SafecordError):
    status_code = 404


class Conflict(SafecordError):
    status_code = 400


class InternalError(SafecordError):
    """Unexpected store or runtime failure."""

    status_code = 500
