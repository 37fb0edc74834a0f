"""
auth/users.py -- Repository for User records over a Credential Store.

Pattern: Repository + Data Mapper. UserRepository is the repository;
_record_to_user / _user_to_record are the mappers. Services never build store
keys or record dicts themselves.

Record field names are camelCase (userId, passwordHash, lastLogin, ...) to
match the JSON the original clients already read out of storage. The Python
side stays snake_case.

Each user is one record under user:<folded name>. userId is carried inside the
record; nothing looks accounts up by id.
"""

from __future__ import annotations

from auth.models import User
from store.base import CredentialStore, user_key

# (dataclass attribute, record field) pairs. Order is irrelevant; records are
# serialized with sorted keys.
_FIELDS = (
    ("user_id", "userId"),
    ("username", "username"),
    ("password_hash", "passwordHash"),
    ("rank", "rank"),
    ("banned", "banned"),
    ("ban_reason", "banReason"),
    ("banned_at", "bannedAt"),
    ("created_at", "createdAt"),
    ("last_login", "lastLogin"),
    ("device_info", "deviceInfo"),
    ("nickname", "nickname"),
    ("profile_picture", "profilePicture"),
    ("banner", "banner"),
    ("about_me", "aboutMe"),
    ("status", "status"),
    ("custom_status", "customStatus"),
)


class UserRepository:
    def __init__(self, store: CredentialStore) -> None:
        self.store = store

    def get(self, username: str) -> User | None:
        """Look up a user by username, case-insensitively. Returns None if absent."""
        record = self.store.get(user_key(username))
        return _record_to_user(record) if record is not None else None

    def exists(self, username: str) -> bool:
        return self.store.get(user_key(username)) is not None

    def save(self, user: User) -> None:
        self.store.put(user_key(user.username), _user_to_record(user))


# ---------------------------------------------------------------------------
# Record mappers (Data Mapper pattern)
# ---------------------------------------------------------------------------


def _user_to_record(user: User) -> dict:
    return {field: getattr(user, attr) for attr, field in _FIELDS}


def _record_to_user(record: dict) -> User:
    # Older records may lack rank/banned entirely (the original signup path
    # never wrote them); fall back to the dataclass defaults.
    values = {attr: record[field] for attr, field in _FIELDS if field in record and record[field] is not None}
    values.setdefault("rank", 0)
    values.setdefault("banned", False)
    return User(**values)
