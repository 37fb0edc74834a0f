"""
store/directory.py -- Directory Index: the public roster of usernames.

Each username owns its own record under directory:<folded username>. Listing
is a prefix scan. There is no shared list to read-modify-write, so two signups
processed at the same time cannot overwrite each other's roster entry: each
writes a different key.

The roster is still a denormalized projection of the user:* records and is
written after the user record; a crash between the two writes leaves a user
that logs in fine but is missing from the roster. add() is idempotent, so
re-running it repairs the gap.
"""

from __future__ import annotations

from store.base import CredentialStore, directory_key

_PREFIX = "directory:"


class DirectoryIndex:
    def __init__(self, store: CredentialStore) -> None:
        self.store = store

    def add(self, username: str) -> None:
        self.store.put(directory_key(username), {"username": username})

    def list_usernames(self) -> list[str]:
        """Return display usernames ordered by their case-folded form."""
        return [record["username"] for record in self.store.scan(_PREFIX)]
