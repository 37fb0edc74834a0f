"""
contract/operations.py -- Route semantics shared by both backends.

One function per route: validated request model in, response model out,
domain exceptions propagate. The backends own only transport concerns
(routing, body parsing, status codes, envelope conversion).

This is the Factory Method layer of the contract: the mapping from domain
results to wire models lives here, next to nothing else, rather than being
repeated in api/routes/ and local/router.py.
"""

from __future__ import annotations

from datetime import datetime, timezone

from auth.models import ProfileView
from auth.services import IdentityServices
from contract.models import (
    BanRequest,
    CodeResponse,
    HealthResponse,
    InitRank5Request,
    LoginRequest,
    LoginResponse,
    LoginUser,
    MessageResponse,
    Profile,
    ProfileResponse,
    ProfileUpdateRequest,
    PublishUpdateRequest,
    SetRankRequest,
    SignupRequest,
    SignupResponse,
    SignupUser,
    UnbanRequest,
    UsersResponse,
)

HEALTH_MESSAGE = "SAFECORD server healthy"


def health() -> HealthResponse:
    return HealthResponse(message=HEALTH_MESSAGE, timestamp=datetime.now(timezone.utc).isoformat())


def signup(services: IdentityServices, body: SignupRequest) -> SignupResponse:
    user = services.auth.register(body.username, body.password, body.age_confirmed, body.device_info)
    return SignupResponse(user=SignupUser(user_id=user["userId"], username=user["username"]))


def login(services: IdentityServices, body: LoginRequest) -> LoginResponse:
    user = services.auth.authenticate(body.username, body.password, body.device_info)
    return LoginResponse(
        user=LoginUser(
            user_id=user["userId"],
            username=user["username"],
            banned=user["banned"],
            rank=user["rank"],
        )
    )


def list_users(services: IdentityServices) -> UsersResponse:
    return UsersResponse(users=services.auth.list_usernames())


def get_profile(services: IdentityServices, username: str) -> ProfileResponse:
    return ProfileResponse(profile=_profile(services.auth.get_profile(username)))


def update_profile(services: IdentityServices, body: ProfileUpdateRequest) -> ProfileResponse:
    view = services.auth.update_profile(
        body.username,
        nickname=body.nickname,
        profilePicture=body.profile_picture,
        banner=body.banner,
        aboutMe=body.about_me,
        status=body.status,
        customStatus=body.custom_status,
    )
    return ProfileResponse(profile=_profile(view))


def set_rank(services: IdentityServices, body: SetRankRequest) -> MessageResponse:
    return MessageResponse(message=services.ranks.set_rank(body.admin_username, body.target_username, body.rank))


def publish_update(services: IdentityServices, body: PublishUpdateRequest) -> MessageResponse:
    return MessageResponse(message=services.ranks.publish_update(body.admin_username, body.target))


def init_rank5(services: IdentityServices, body: InitRank5Request) -> MessageResponse:
    return MessageResponse(message=services.bootstrap.initialize_rank5(body.secret))


def ban(services: IdentityServices, body: BanRequest) -> MessageResponse:
    return MessageResponse(message=services.ranks.ban(body.admin_username, body.target_username, body.reason))


def unban(services: IdentityServices, body: UnbanRequest) -> MessageResponse:
    return MessageResponse(message=services.ranks.unban(body.admin_username, body.target_username))


def source_code(services: IdentityServices, username: str | None) -> CodeResponse:
    payload = services.ranks.source_code(username)
    return CodeResponse(
        source_code=payload["sourceCode"],
        message=payload["message"],
        available_files=payload["availableFiles"],
    )


def _profile(view: ProfileView) -> Profile:
    return Profile(
        username=view.username,
        nickname=view.nickname,
        profile_picture=view.profile_picture,
        banner=view.banner,
        about_me=view.about_me,
        status=view.status,
        custom_status=view.custom_status,
        rank=view.rank,
    )
