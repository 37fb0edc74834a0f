"""
store/memory.py -- In-process provider of the Credential Store.

Backs the local simulation. Records live in a dict of JSON strings (not live
dicts) so callers can never mutate stored state by holding on to a returned
record -- the same copy-on-read behavior the SQL provider gets for free.

When a snapshot path is given, the whole keyspace is rewritten to that JSON
file after every put() and reloaded on construction. The file is private to
one process: two processes pointed at the same path do not see each other's
writes until restart, and the last writer wins.

Usage:
    store = MemoryCredentialStore()                      # pure memory
    store = MemoryCredentialStore(Path("mockdb.json"))   # survives restarts
"""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Optional

logger = logging.getLogger("safecord.store")


class MemoryCredentialStore:
    def __init__(self, snapshot_path: Optional[Path] = None) -> None:
        self.snapshot_path = snapshot_path
        self._records: dict[str, str] = {}
        if snapshot_path is not None and snapshot_path.is_file():
            self._load()

    def get(self, key: str) -> dict | None:
        raw = self._records.get(key)
        return json.loads(raw) if raw is not None else None

    def put(self, key: str, record: dict) -> None:
        self._records[key] = json.dumps(record, sort_keys=True)
        if self.snapshot_path is not None:
            self._write_snapshot()

    def scan(self, prefix: str) -> list[dict]:
        """Return every record whose key starts with prefix, ordered by key."""
        items = dict(self._records)
        return [json.loads(items[k]) for k in sorted(items) if k.startswith(prefix)]

    def close(self) -> None:
        if self.snapshot_path is not None:
            self._write_snapshot()

    def _load(self) -> None:
        """Read the snapshot file into memory.

        A corrupt snapshot is an operator problem, not something to paper over:
        json.JSONDecodeError propagates so the process fails loudly at startup.
        """
        data = json.loads(self.snapshot_path.read_text(encoding="utf-8"))
        self._records = {k: json.dumps(v, sort_keys=True) for k, v in data.items()}
        logger.info("Loaded %d records from %s", len(self._records), self.snapshot_path)

    def _write_snapshot(self) -> None:
        # Write-then-rename so a crash mid-write never leaves a truncated file.
        items = dict(self._records)
        data = {k: json.loads(v) for k, v in items.items()}
        tmp = self.snapshot_path.with_suffix(self.snapshot_path.suffix + ".tmp")
        tmp.write_text(json.dumps(data, sort_keys=True, indent=2), encoding="utf-8")
        os.replace(tmp, self.snapshot_path)
