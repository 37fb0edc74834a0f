"""
store/base.py -- The Credential Store contract.

A key-value store of opaque JSON-compatible records:

    get(key)          -> dict | None
    put(key, record)  -> None
    scan(prefix)      -> list[dict], ordered by key
    close()

There are no transactions across keys and no compare-and-swap. Uniqueness,
directory consistency and every other invariant above single-key writes are
the caller's job (see auth/service.py and store/directory.py).

Key layout used by the services:
    user:<folded username>       -- User record
    directory:<folded username>  -- {"username": <display username>}
    bootstrap:rank5              -- consume-once marker
"""

from __future__ import annotations

from typing import Protocol


class CredentialStore(Protocol):
    def get(self, key: str) -> dict | None: ...

    def put(self, key: str, record: dict) -> None: ...

    def scan(self, prefix: str) -> list[dict]: ...

    def close(self) -> None: ...


def fold_username(username: str) -> str:
    """Return the case-insensitive identity of a username.

    "Alice" and "alice" are the same account. casefold() rather than lower()
    so that e.g. German sharp s compares equal to "ss".
    """
    return username.casefold()


def user_key(username: str) -> str:
    return f"user:{fold_username(username)}"


def directory_key(username: str) -> str:
    return f"directory:{fold_username(username)}"


BOOTSTRAP_MARKER_KEY = "bootstrap:rank5"
