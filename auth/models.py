"""
auth/models.py -- Domain dataclasses for identity entities.

Pattern: Data class (pure data container, zero logic). auth/users.py maps
these to and from Credential Store records; services do the work.

Layer rule: no imports from api/, contract/, local/, client/, or console/.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass
class User:
    """A registered identity.

    username keeps the spelling chosen at signup; identity comparisons use the
    case-folded form (store.base.fold_username).

    password_hash is None only for records written by hand or by an older
    deployment -- such accounts can never authenticate.

    rank and banned are the only fields admin operations mutate. Profile
    fields are owned by the account itself via update_profile().
    """

    user_id: str
    username: str
    password_hash: str | None = None
    rank: int = 0  # 0 = Member ... 5 = Developer, see core/ranks.py
    banned: bool = False
    ban_reason: str | None = None
    banned_at: str | None = None
    created_at: str = ""  # ISO 8601 UTC
    last_login: str = ""  # ISO 8601 UTC, stamped on every successful login
    device_info: Any = None  # opaque client metadata, stored as-is
    nickname: str | None = None
    profile_picture: str | None = None
    banner: str | None = None
    about_me: str | None = None
    status: str | None = None
    custom_status: str | None = None


@dataclass
class ProfileView:
    """Read-only projection of a User for display code.

    Defaults mirror what the UI shows when a field was never set:
    nickname falls back to the username and status to "online".
    """

    username: str
    nickname: str
    rank: int
    status: str = "online"
    profile_picture: str | None = None
    banner: str | None = None
    about_me: str | None = None
    custom_status: str | None = None
