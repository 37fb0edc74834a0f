"""
auth/service.py -- Signup, login and profile operations.

Both backends (api/ and local/) call into this module; neither re-implements
any of the rules below. That is what keeps the two contracts identical.

Invariants enforced here (the store enforces none of them):
  - Usernames are unique case-insensitively.
  - The password hash never leaves this module.
  - lastLogin is strictly increasing per account, even when two logins land
    in the same clock tick.
"""

from __future__ import annotations

import logging
import uuid
from datetime import datetime, timedelta, timezone
from typing import Any

from auth.models import ProfileView, User
from auth.passwords import hash_password, verify_against_missing, verify_password
from auth.users import UserRepository
from core.errors import AuthError, Conflict, NotFound, ValidationError
from store.base import CredentialStore
from store.directory import DirectoryIndex

logger = logging.getLogger("safecord.auth")

_INVALID_CREDENTIALS = "Invalid username or password"
_UNADDRESSABLE_USERNAME = "Username cannot contain '/' or consist only of dots"

# Fields update_profile() accepts, keyed by their record/JSON name.
PROFILE_FIELDS = {
    "nickname": "nickname",
    "profilePicture": "profile_picture",
    "banner": "banner",
    "aboutMe": "about_me",
    "status": "status",
    "customStatus": "custom_status",
}


def _now() -> datetime:
    return datetime.now(timezone.utc)


def _next_login_stamp(previous: str) -> str:
    """Return an ISO timestamp strictly after previous.

    Wall clocks can repeat or step backwards; login bookkeeping must not.
    """
    now = _now()
    if previous:
        try:
            last = datetime.fromisoformat(previous)
        except ValueError:
            last = None
        if last is not None and now <= last:
            now = last + timedelta(microseconds=1)
    return now.isoformat()


def _addressable(username: str) -> bool:
    """True if username survives as a single /profile/{username} path segment.

    "/" splits the segment and clients resolve "." and ".." away before sending.
    """
    return "/" not in username and username.strip(".") != ""


def new_user_id() -> str:
    return f"user-{uuid.uuid4().hex}"


class AuthService:
    """Register and authenticate accounts.

    Usage:
        service = AuthService(MemoryCredentialStore())
        service.register("alice", "pw123", age_confirmed=True)
        service.authenticate("ALICE", "pw123")
    """

    def __init__(self, store: CredentialStore, bcrypt_rounds: int = 10) -> None:
        self.users = UserRepository(store)
        self.directory = DirectoryIndex(store)
        self.bcrypt_rounds = bcrypt_rounds

    def register(
        self,
        username: str | None,
        password: str | None,
        age_confirmed: bool | None,
        device_info: Any = None,
    ) -> dict:
        """Create an account and add it to the public directory.

        Raises ValidationError for missing fields, a username that cannot be
        addressed by /profile/{username}, or unconfirmed age; Conflict if any
        case variant of the username is taken.

        The existence check and the write are two separate store calls. Two
        simultaneous signups for the same name can both pass the check; the
        later write wins. Distinct names never interfere (see DirectoryIndex).
        """
        if not username or not password:
            raise ValidationError("Missing username or password")
        if not _addressable(username):
            raise ValidationError(_UNADDRESSABLE_USERNAME)
        if age_confirmed is not True:
            raise ValidationError("Age not confirmed")
        if self.users.exists(username):
            raise Conflict("Username already exists")

        stamp = _now().isoformat()
        user = User(
            user_id=new_user_id(),
            username=username,
            password_hash=hash_password(password, self.bcrypt_rounds),
            device_info=device_info,
            created_at=stamp,
            last_login=stamp,
        )
        self.users.save(user)
        self.directory.add(username)
        logger.info("Registered user %s (%s)", username, user.user_id)
        return {"userId": user.user_id, "username": user.username}

    def authenticate(self, username: str | None, password: str | None, device_info: Any = None) -> dict:
        """Verify credentials and stamp lastLogin.

        Unknown username and wrong password raise the same AuthError after the
        same amount of bcrypt work [C1].

        Banned accounts authenticate normally; banned is returned for the
        caller to act on.
        """
        if not username or not password:
            raise ValidationError("Missing username or password")

        user = self.users.get(username)
        if user is None:
            verify_against_missing(password, self.bcrypt_rounds)
            raise AuthError(_INVALID_CREDENTIALS)
        if not verify_password(password, user.password_hash):
            raise AuthError(_INVALID_CREDENTIALS)

        user.last_login = _next_login_stamp(user.last_login)
        if device_info is not None:
            user.device_info = device_info
        self.users.save(user)
        return {
            "userId": user.user_id,
            "username": user.username,
            "banned": user.banned,
            "rank": user.rank,
        }

    def list_usernames(self) -> list[str]:
        return self.directory.list_usernames()

    def get_profile(self, username: str | None) -> ProfileView:
        user = self.users.get(username) if username else None
        if user is None:
            raise NotFound("User not found")
        return _to_profile(user)

    def update_profile(self, username: str | None, **fields: Any) -> ProfileView:
        """Update the supplied profile fields (JSON names, see PROFILE_FIELDS).

        Fields passed as None are left untouched. Unknown field names raise
        ValidationError rather than being silently dropped.
        """
        if not username:
            raise ValidationError("Missing username")
        unknown = set(fields) - set(PROFILE_FIELDS)
        if unknown:
            raise ValidationError(f"Unknown profile fields: {', '.join(sorted(unknown))}")
        user = self.users.get(username)
        if user is None:
            raise NotFound("User not found")
        for name, value in fields.items():
            if value is not None:
                setattr(user, PROFILE_FIELDS[name], value)
        self.users.save(user)
        return _to_profile(user)


def _to_profile(user: User) -> ProfileView:
    return ProfileView(
        username=user.username,
        nickname=user.nickname or user.username,
        rank=user.rank,
        status=user.status or "online",
        profile_picture=user.profile_picture,
        banner=user.banner,
        about_me=user.about_me,
        custom_status=user.custom_status,
    )
