"""
auth/passwords.py -- Password hashing and constant-time credential checks.

Security design decisions:
  Passwords: bcrypt, used directly (no passlib wrapper). Bcrypt is the right
       choice for low-entropy secrets because its cost factor makes offline
       brute force expensive. The cost factor comes from
       Settings.bcrypt_rounds (default 10, tens of milliseconds per check).

  Timing equalization [C1]: verify_against_missing() runs a full bcrypt check
       against a dummy hash when the username does not exist, so response time
       does not reveal whether an account exists.

  Secrets: constant_time_equals() wraps hmac.compare_digest for the bootstrap
       secret comparison.

Layer rule: no imports from api/, contract/, local/, client/, or console/.
"""

from __future__ import annotations

import hmac
import logging

import bcrypt

logger = logging.getLogger("safecord.auth")

# Lazily computed per cost factor so the dummy check costs exactly what a real
# check costs under the active configuration.
_DUMMY_HASHES: dict[int, str] = {}


def hash_password(plain: str, rounds: int = 10) -> str:
    """Return a bcrypt hash of the given plaintext password.

    bcrypt only looks at the first 72 bytes of its input. Longer passwords
    are accepted and silently truncated by the library.
    """
    encoded = plain.encode("utf-8")[:72]
    return bcrypt.hashpw(encoded, bcrypt.gensalt(rounds=rounds)).decode("utf-8")


def verify_password(plain: str, hashed: str | None) -> bool:
    """Return True if the plaintext password matches the bcrypt hash.

    A missing or malformed hash never matches.
    """
    if not hashed:
        return False
    try:
        return bcrypt.checkpw(plain.encode("utf-8")[:72], hashed.encode("utf-8"))
    except ValueError:
        logger.warning("Stored password hash is not a valid bcrypt hash")
        return False


def verify_against_missing(plain: str, rounds: int = 10) -> bool:
    """Burn one bcrypt verification for a username that does not exist [C1]. Always False."""
    dummy = _DUMMY_HASHES.get(rounds)
    if dummy is None:
        dummy = _DUMMY_HASHES[rounds] = hash_password("safecord_timing_dummy", rounds)
    verify_password(plain, dummy)
    return False


def constant_time_equals(supplied: str, expected: str) -> bool:
    """Compare two secrets without leaking the length of the common prefix."""
    return hmac.compare_digest(supplied.encode("utf-8"), expected.encode("utf-8"))
