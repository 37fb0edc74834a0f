"""
auth/admin.py -- Rank & Authorization Engine.

Operations:
  set_rank        -- rank 5 only; the caller's own rank is checked first
  publish_update  -- acknowledgment only; the broadcast itself lives elsewhere
  source_code     -- rank 5 only
  ban / unban     -- rank >= 1 (MODERATOR_RANK)

Check order in every operation: caller identity -> caller privilege -> input
validity -> target existence -> mutation. An unprivileged caller therefore
learns nothing about whether a target account exists.

Layer rule: no imports from api/, contract/, local/, client/, or console/.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone

from auth.models import User
from auth.users import UserRepository
from core.errors import AuthorizationError, NotFound, ValidationError
from core.ranks import MAX_RANK, MODERATOR_RANK, is_valid_rank, rank_name
from store.base import CredentialStore

logger = logging.getLogger("safecord.auth")

# Files a rank-5 account may browse through the code editor.
SOURCE_FILES = (
    "/App.tsx",
    "/components/AdminPanel.tsx",
    "/components/FriendsView.tsx",
    "/components/HomePage.tsx",
    "/components/LoginPage.tsx",
    "/components/ProfileSettings.tsx",
    "/components/ServerView.tsx",
    "/components/UserProfileCard.tsx",
    "/styles/globals.css",
)


class RankEngine:
    def __init__(self, store: CredentialStore) -> None:
        self.users = UserRepository(store)

    # ------------------------------------------------------------------
    # Authorization helpers
    # ------------------------------------------------------------------

    def _require_caller(self, admin_username: str | None, min_rank: int, denial: str) -> User:
        """Return the calling account or raise AuthorizationError.

        Presence of a username is not authorization: the account must exist
        and hold at least min_rank.
        """
        if not admin_username:
            raise AuthorizationError("Unauthorized")
        caller = self.users.get(admin_username)
        if caller is None or caller.rank < min_rank:
            logger.warning("Denied privileged operation for %r (needs rank %d)", admin_username, min_rank)
            raise AuthorizationError(denial)
        return caller

    def _require_target(self, target_username: str | None) -> User:
        if not target_username:
            raise ValidationError("Missing target username")
        target = self.users.get(target_username)
        if target is None:
            raise NotFound("User not found")
        return target

    # ------------------------------------------------------------------
    # Operations
    # ------------------------------------------------------------------

    def set_rank(self, admin_username: str | None, target_username: str | None, rank) -> str:
        """Set target's rank and return a confirmation message."""
        caller = self._require_caller(
            admin_username,
            MAX_RANK,
            f"Unauthorized. Only Rank {MAX_RANK} administrators can change ranks.",
        )
        if not is_valid_rank(rank):
            raise ValidationError("Rank must be between 0 and 5")
        target = self._require_target(target_username)

        old_rank = target.rank
        target.rank = rank
        self.users.save(target)
        logger.info("%s changed rank of %s: %d -> %d", caller.username, target.username, old_rank, rank)
        return (
            f"{caller.username} changed {target.username} from {rank_name(old_rank)} (Rank {old_rank}) "
            f"to {rank_name(rank)} (Rank {rank})"
        )

    def publish_update(self, admin_username: str | None, target: str | None = None) -> str:
        if not admin_username:
            raise AuthorizationError("Unauthorized")
        target = target or "all"
        logger.info("Update publish requested by %s for %s", admin_username, target)
        return f"Publish to {target} acknowledged"

    def source_code(self, username: str | None) -> dict:
        """Return the developer-access payload for a rank-5 account."""
        if not username:
            raise ValidationError("Username header required")
        self._require_caller(
            username,
            MAX_RANK,
            f"Unauthorized. Only Rank {MAX_RANK} (Developer) users can access source code.",
        )
        return {
            "sourceCode": "Access granted to SAFECORD source code repository",
            "message": "Developer access verified.",
            "availableFiles": list(SOURCE_FILES),
        }

    def ban(self, admin_username: str | None, target_username: str | None, reason: str | None = None) -> str:
        caller = self._require_caller(admin_username, MODERATOR_RANK, "Unauthorized")
        target = self._require_target(target_username)
        if target.rank >= MAX_RANK:
            raise AuthorizationError(f"Rank {MAX_RANK} accounts cannot be banned")
        target.banned = True
        target.ban_reason = reason or "Banned by admin"
        target.banned_at = datetime.now(timezone.utc).isoformat()
        self.users.save(target)
        logger.info("%s banned %s (%s)", caller.username, target.username, target.ban_reason)
        return f"User {target.username} has been banned"

    def unban(self, admin_username: str | None, target_username: str | None) -> str:
        caller = self._require_caller(admin_username, MODERATOR_RANK, "Unauthorized")
        target = self._require_target(target_username)
        target.banned = False
        target.ban_reason = None
        target.banned_at = None
        self.users.save(target)
        logger.info("%s unbanned %s", caller.username, target.username)
        return f"User {target.username} has been unbanned"
