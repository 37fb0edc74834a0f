"""
contract/models.py -- Pydantic v2 models for every route body.

These models define the transport contract. They are intentionally separate
from the dataclasses in auth/models.py, which own the internal domain
representation; contract/operations.py maps between the two.

Wire names are camelCase (adminUsername, ageConfirmed, ...). Python attribute
names stay snake_case; the alias generator bridges the two. Always dump with
by_alias=True -- FastAPI does this for response_model automatically, the
local simulation does it explicitly.

Request fields are all optional at the schema level. Missing values are a
domain error (ValidationError with a specific message), not a schema error,
so both backends report them identically and in the same order as the
service checks them.
"""

from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class _ContractModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# ---------------------------------------------------------------------------
# Request models
# ---------------------------------------------------------------------------


class SignupRequest(_ContractModel):
    username: Optional[str] = None
    password: Optional[str] = None
    age_confirmed: Optional[bool] = None
    device_info: Any = None


class LoginRequest(_ContractModel):
    username: Optional[str] = None
    password: Optional[str] = None
    device_info: Any = None


class ProfileUpdateRequest(_ContractModel):
    username: Optional[str] = None
    nickname: Optional[str] = None
    profile_picture: Optional[str] = None
    banner: Optional[str] = None
    about_me: Optional[str] = None
    status: Optional[str] = None
    custom_status: Optional[str] = None


class SetRankRequest(_ContractModel):
    admin_username: Optional[str] = None
    target_username: Optional[str] = None
    # Untyped on purpose: RankEngine validates it after the caller check, so
    # an unprivileged caller gets 403 regardless of what it sends here.
    rank: Any = None


class PublishUpdateRequest(_ContractModel):
    admin_username: Optional[str] = None
    target: Optional[str] = None


class InitRank5Request(_ContractModel):
    secret: Optional[str] = None


class BanRequest(_ContractModel):
    admin_username: Optional[str] = None
    target_username: Optional[str] = None
    reason: Optional[str] = None


class UnbanRequest(_ContractModel):
    admin_username: Optional[str] = None
    target_username: Optional[str] = None


# ---------------------------------------------------------------------------
# Response models
# ---------------------------------------------------------------------------


class HealthResponse(_ContractModel):
    success: bool = True
    message: str
    timestamp: str


class SignupUser(_ContractModel):
    user_id: str
    username: str


class SignupResponse(_ContractModel):
    success: bool = True
    user: SignupUser


class LoginUser(_ContractModel):
    user_id: str
    username: str
    banned: bool
    rank: int


class LoginResponse(_ContractModel):
    success: bool = True
    user: LoginUser


class UsersResponse(_ContractModel):
    success: bool = True
    users: list[str]


class Profile(_ContractModel):
    username: str
    nickname: str
    profile_picture: Optional[str] = None
    banner: Optional[str] = None
    about_me: Optional[str] = None
    status: str = "online"
    custom_status: Optional[str] = None
    rank: int = 0


class ProfileResponse(_ContractModel):
    success: bool = True
    profile: Profile


class MessageResponse(_ContractModel):
    success: bool = True
    message: str


class CodeResponse(_ContractModel):
    success: bool = True
    source_code: str
    message: str
    available_files: list[str]


class ErrorResponse(_ContractModel):
    """Uniform error envelope. Every non-2xx response uses this shape."""

    success: bool = False
    error: str
