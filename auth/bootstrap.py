"""
auth/bootstrap.py -- One-time grant of rank 5 to the designated account.

set_rank() needs an existing rank-5 caller, so the first rank-5 account has to
come from somewhere else: a shared secret known only to the deploying
operator.

Security:
  [B1] No secret configured -> every call is refused.
  [B2] Secret compared in constant time.
  [B3] Consume-once (default): the first successful grant writes the
       bootstrap:rank5 marker; every later call is refused even with the
       right secret, so a leaked secret cannot be replayed. With
       consume_once=False repeated calls are idempotent -- the target stays
       at rank 5 and nothing else changes.

The marker is written after the rank. A crash between the two writes leaves
the grant repeatable, which is the safe direction: the target is already
rank 5, so a replay changes nothing.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone

from auth.passwords import constant_time_equals
from auth.users import UserRepository
from core.errors import AuthorizationError, NotFound
from core.ranks import MAX_RANK
from store.base import BOOTSTRAP_MARKER_KEY, CredentialStore

logger = logging.getLogger("safecord.auth")


class BootstrapInitializer:
    def __init__(
        self,
        store: CredentialStore,
        secret: str,
        target_username: str,
        consume_once: bool = True,
    ) -> None:
        self.store = store
        self.users = UserRepository(store)
        self._secret = secret
        self.target_username = target_username
        self.consume_once = consume_once

    def is_consumed(self) -> bool:
        return self.store.get(BOOTSTRAP_MARKER_KEY) is not None

    def initialize_rank5(self, secret: str | None) -> str:
        """Grant rank 5 to the configured target and return a success message."""
        if not self._secret or not secret or not constant_time_equals(secret, self._secret):
            logger.warning("Rank-5 bootstrap refused: invalid secret")
            raise AuthorizationError("Invalid secret key")
        if self.consume_once and self.is_consumed():
            logger.warning("Rank-5 bootstrap refused: already consumed")
            raise AuthorizationError("Bootstrap already consumed")

        target = self.users.get(self.target_username)
        if target is None:
            raise NotFound(f"Bootstrap account {self.target_username} does not exist")
        if target.rank != MAX_RANK:
            target.rank = MAX_RANK
            self.users.save(target)

        if self.consume_once:
            self.store.put(
                BOOTSTRAP_MARKER_KEY,
                {"username": target.username, "consumedAt": datetime.now(timezone.utc).isoformat()},
            )
        logger.info("Rank-5 bootstrap granted to %s", target.username)
        return f"Rank {MAX_RANK} successfully assigned to {target.username}"
