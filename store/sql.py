"""
store/sql.py -- SQLAlchemy Core provider of the Credential Store.

Pattern: Repository over a single key-value table. Records are stored as JSON
text so the persistent service and the local simulation hold byte-identical
record shapes.

Security:
  All queries use bound parameters. scan() uses startswith(autoescape=True) so
  "%" and "_" in a prefix are matched literally, not as LIKE wildcards.

DB URL: Settings.database_url (default sqlite:///safecord.db).

Layer rule: no imports from api/, auth/, contract/, local/, client/, or console/.
"""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone

from sqlalchemy import Column, MetaData, String, Table, Text, create_engine, event
from sqlalchemy.engine import Engine

logger = logging.getLogger("safecord.store")

# ---------------------------------------------------------------------------
# Schema
# ---------------------------------------------------------------------------

_metadata = MetaData()

_records = Table(
    "kv_records",
    _metadata,
    Column("key", String(512), primary_key=True),
    Column("value", Text, nullable=False),  # JSON document
    Column("updated_at", String(32), nullable=False),
)


# ---------------------------------------------------------------------------
# WAL mode
# ---------------------------------------------------------------------------


def _set_wal_mode(dbapi_conn, connection_record) -> None:
    """Enable WAL journal mode so readers are not blocked during writes.

    Set per-connection because SQLite PRAGMAs are not inherited by new
    connections from the pool.
    """
    dbapi_conn.execute("PRAGMA journal_mode=WAL")


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


# ---------------------------------------------------------------------------
# Repository
# ---------------------------------------------------------------------------


class SqlCredentialStore:
    """Credential Store backed by a relational database.

    Usage:
        store = SqlCredentialStore("sqlite:///safecord.db")
        store.put("user:alice", {"username": "alice", "rank": 0})
        store.get("user:alice")
        store.close()
    """

    def __init__(self, db_url: str) -> None:
        connect_args: dict = {}
        if db_url.startswith("sqlite"):
            connect_args["check_same_thread"] = False
        self.engine: Engine = create_engine(db_url, connect_args=connect_args)
        if db_url.startswith("sqlite"):
            event.listen(self.engine, "connect", _set_wal_mode)
        _metadata.create_all(self.engine)
        logger.info("SQL credential store ready (%s)", self.engine.url.render_as_string(hide_password=True))

    def get(self, key: str) -> dict | None:
        """Return the record stored under key, or None if absent."""
        with self.engine.connect() as conn:
            row = conn.execute(_records.select().where(_records.c.key == key)).fetchone()
        return json.loads(row.value) if row is not None else None

    def put(self, key: str, record: dict) -> None:
        """Write record under key, replacing any previous value.

        Delete + insert inside one transaction is the portable single-key
        upsert; it says nothing about other keys.
        """
        payload = json.dumps(record, sort_keys=True)
        with self.engine.begin() as conn:
            conn.execute(_records.delete().where(_records.c.key == key))
            conn.execute(_records.insert().values(key=key, value=payload, updated_at=_now_iso()))

    def scan(self, prefix: str) -> list[dict]:
        """Return every record whose key starts with prefix, ordered by key."""
        with self.engine.connect() as conn:
            rows = conn.execute(
                _records.select()
                .where(_records.c.key.startswith(prefix, autoescape=True))
                .order_by(_records.c.key)
            ).fetchall()
        return [json.loads(r.value) for r in rows]

    def close(self) -> None:
        self.engine.dispose()
