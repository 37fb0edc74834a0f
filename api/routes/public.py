"""
api/routes/public.py -- Directory, profile and developer-access endpoints.

Routes:
  GET  /public/users          -- every registered username
  GET  /profile/{username}    -- profile view; 404 if unknown
  POST /profile/update        -- update own profile fields
  GET  /code                  -- rank-5 developer access (X-Username header)
"""

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Header

from api.dependencies import get_services
from auth.services import IdentityServices
from contract import operations
from contract.models import CodeResponse, ProfileResponse, ProfileUpdateRequest, UsersResponse

router = APIRouter()


@router.get("/public/users", response_model=UsersResponse)
def list_users(services: IdentityServices = Depends(get_services)) -> UsersResponse:
    return operations.list_users(services)


# /profile/update is declared before /profile/{username} only for readability;
# the methods differ, so the two never shadow each other.
@router.post("/profile/update", response_model=ProfileResponse)
def update_profile(
    body: ProfileUpdateRequest,
    services: IdentityServices = Depends(get_services),
) -> ProfileResponse:
    return operations.update_profile(services, body)


@router.get("/profile/{username}", response_model=ProfileResponse)
def get_profile(username: str, services: IdentityServices = Depends(get_services)) -> ProfileResponse:
    """Return the display profile for username (case-insensitive lookup)."""
    return operations.get_profile(services, username)


@router.get("/code", response_model=CodeResponse)
def source_code(
    x_username: Optional[str] = Header(default=None, alias="X-Username"),
    services: IdentityServices = Depends(get_services),
) -> CodeResponse:
    """Developer access for rank-5 accounts. 400 without header, 403 below rank 5."""
    return operations.source_code(services, x_username)
