"""
api/routes/auth.py -- Signup and login endpoints.

Routes:
  POST /auth/signup   -- create an account; 400 on missing fields, age, duplicate
  POST /auth/login    -- verify credentials; 400 missing fields, 401 bad credentials

Security:
  [H2] POST /auth/login is rate-limited per client address (LOGIN_RATE_LIMIT).
  [C1] AuthService.authenticate() equalizes timing for unknown usernames.
  [M5] Cache-Control: no-store on both responses -- they carry identity data.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Request, Response

from api.dependencies import get_services
from api.limiter import LOGIN_RATE_LIMIT, limiter
from auth.services import IdentityServices
from contract import operations
from contract.models import LoginRequest, LoginResponse, SignupRequest, SignupResponse

# Auth policy:
# - POST /auth/signup: public
# - POST /auth/login:  public, rate-limited
router = APIRouter()


@router.post("/auth/signup", response_model=SignupResponse)
def signup(
    body: SignupRequest,
    response: Response,
    services: IdentityServices = Depends(get_services),
) -> SignupResponse:
    """Register a new account. The password hash is never part of the response."""
    response.headers["Cache-Control"] = "no-store"  # [M5]
    return operations.signup(services, body)


@limiter.limit(LOGIN_RATE_LIMIT)  # [H2] must be ABOVE @router to preserve FastAPI introspection
@router.post("/auth/login", response_model=LoginResponse)
def login(
    request: Request,
    body: LoginRequest,
    response: Response,
    services: IdentityServices = Depends(get_services),
) -> LoginResponse:
    """Authenticate with username and password.

    Wrong username and wrong password both yield 401 "Invalid username or
    password" to avoid leaking which accounts exist.
    """
    response.headers["Cache-Control"] = "no-store"  # [M5]
    return operations.login(services, body)
