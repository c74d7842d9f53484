# SPDX-License-Identifier: MIT
"""Session warning state — which (rule, file) pairs were already surfaced per session.

Two stores share one protocol:
- SqliteWarningStore: durable, survives process exit, safe across
  concurrent hook processes (BEGIN IMMEDIATE + unique key)
- MemoryWarningStore: in-process, for tests and as the fail-open fallback

Timestamps are timezone-aware datetimes supplied by the caller, so the
clock stays injectable. SQLite stores them as epoch seconds.
"""

from __future__ import annotations

import logging
import sqlite3
from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta
from pathlib import Path
from typing import Protocol, runtime_checkable

from editguard.rules.config import DEFAULT_RETENTION_DAYS

log = logging.getLogger(__name__)

DEFAULT_RETENTION = timedelta(days=DEFAULT_RETENTION_DAYS)


@runtime_checkable
class WarningStore(Protocol):
    """Protocol for session warning stores."""

    def has_been_warned(self, session_id: str, rule_id: str, file_path: str) -> bool: ...

    def record_warning(
        self, session_id: str, rule_id: str, file_path: str, now: datetime
    ) -> bool: ...

    def prune(self, now: datetime, retention: timedelta = DEFAULT_RETENTION) -> int: ...

    def close(self) -> None: ...


# --- SQLite schema ---

_PRAGMAS = [
    "PRAGMA journal_mode=WAL",
    "PRAGMA foreign_keys=ON",
    "PRAGMA busy_timeout=5000",
    "PRAGMA synchronous=NORMAL",
]

_SESSIONS_TABLE_SQL = """
CREATE TABLE IF NOT EXISTS sessions (
    session_id  TEXT PRIMARY KEY,
    created_at  REAL NOT NULL,
    updated_at  REAL NOT NULL
)
"""

_WARNINGS_TABLE_SQL = """
CREATE TABLE IF NOT EXISTS warnings (
    session_id  TEXT NOT NULL,
    rule_id     TEXT NOT NULL,
    file_path   TEXT NOT NULL,
    warned_at   REAL NOT NULL,
    PRIMARY KEY (session_id, rule_id, file_path),
    FOREIGN KEY (session_id) REFERENCES sessions(session_id) ON DELETE CASCADE
)
"""

_INDEXES_SQL = [
    "CREATE INDEX IF NOT EXISTS idx_sessions_updated ON sessions(updated_at)",
]


class SqliteWarningStore:
    """Durable warning store — one SQLite database, one row per session."""

    def __init__(self, db_path: Path | str) -> None:
        self._db_path = Path(db_path)
        self._db_path.parent.mkdir(parents=True, exist_ok=True)
        try:
            self._conn = self._connect()
        except sqlite3.OperationalError:
            # Locked or unopenable; the file itself may be fine
            raise
        except sqlite3.DatabaseError as exc:
            # State is ephemeral: an unreadable file is discarded, not repaired
            log.warning("Discarding unreadable state database %s: %s", self._db_path, exc)
            self._discard_files()
            self._conn = self._connect()

    def _connect(self) -> sqlite3.Connection:
        conn = sqlite3.connect(str(self._db_path), timeout=5.0, isolation_level=None)
        conn.row_factory = sqlite3.Row
        try:
            cur = conn.cursor()
            for pragma in _PRAGMAS:
                cur.execute(pragma)
            cur.execute(_SESSIONS_TABLE_SQL)
            cur.execute(_WARNINGS_TABLE_SQL)
            for idx_sql in _INDEXES_SQL:
                cur.execute(idx_sql)
        except sqlite3.DatabaseError:
            conn.close()
            raise
        return conn

    def _discard_files(self) -> None:
        for suffix in ("", "-wal", "-shm"):
            Path(f"{self._db_path}{suffix}").unlink(missing_ok=True)

    @property
    def db_path(self) -> Path:
        return self._db_path

    def close(self) -> None:
        self._conn.close()

    # --- Lookups ---

    def has_been_warned(self, session_id: str, rule_id: str, file_path: str) -> bool:
        cur = self._conn.execute(
            "SELECT 1 FROM warnings WHERE session_id = ? AND rule_id = ? AND file_path = ? LIMIT 1",
            (session_id, rule_id, file_path),
        )
        return cur.fetchone() is not None

    def get_session_warnings(self, session_id: str) -> dict[tuple[str, str], datetime]:
        """Return {(rule_id, file_path): first warning time} for one session."""
        cur = self._conn.execute(
            "SELECT rule_id, file_path, warned_at FROM warnings WHERE session_id = ?",
            (session_id,),
        )
        return {
            (row["rule_id"], row["file_path"]): datetime.fromtimestamp(row["warned_at"], tz=UTC)
            for row in cur.fetchall()
        }

    def list_sessions(self) -> list[str]:
        cur = self._conn.execute("SELECT session_id FROM sessions ORDER BY session_id")
        return [row["session_id"] for row in cur.fetchall()]

    # --- Writes ---

    def record_warning(self, session_id: str, rule_id: str, file_path: str, now: datetime) -> bool:
        """Insert the triple if absent. Return True only if this call inserted it.

        The write lock is taken up front so concurrent hook processes
        serialize; an existing triple keeps its original timestamp.
        """
        ts = now.timestamp()
        cur = self._conn.cursor()
        cur.execute("BEGIN IMMEDIATE")
        try:
            cur.execute(
                "INSERT OR IGNORE INTO sessions (session_id, created_at, updated_at) VALUES (?, ?, ?)",
                (session_id, ts, ts),
            )
            cur.execute(
                """INSERT OR IGNORE INTO warnings (session_id, rule_id, file_path, warned_at)
                VALUES (?, ?, ?, ?)""",
                (session_id, rule_id, file_path, ts),
            )
            inserted = cur.rowcount == 1
            if inserted:
                cur.execute(
                    "UPDATE sessions SET updated_at = MAX(updated_at, ?) WHERE session_id = ?",
                    (ts, session_id),
                )
            self._conn.commit()
        except Exception:
            self._conn.rollback()
            raise
        return inserted

    def prune(self, now: datetime, retention: timedelta = DEFAULT_RETENTION) -> int:
        """Delete sessions whose last write is older than ``now - retention``."""
        cutoff = (now - retention).timestamp()
        cur = self._conn.cursor()
        cur.execute("BEGIN IMMEDIATE")
        try:
            cur.execute("DELETE FROM sessions WHERE updated_at < ?", (cutoff,))
            removed = cur.rowcount
            self._conn.commit()
        except Exception:
            self._conn.rollback()
            raise
        return removed


@dataclass
class _SessionRecord:
    updated_at: datetime
    warnings: dict[tuple[str, str], datetime] = field(default_factory=dict)


class MemoryWarningStore:
    """In-process warning store with the same semantics as the SQLite one."""

    def __init__(self) -> None:
        self._sessions: dict[str, _SessionRecord] = {}

    def close(self) -> None:
        pass

    def has_been_warned(self, session_id: str, rule_id: str, file_path: str) -> bool:
        record = self._sessions.get(session_id)
        return record is not None and (rule_id, file_path) in record.warnings

    def get_session_warnings(self, session_id: str) -> dict[tuple[str, str], datetime]:
        record = self._sessions.get(session_id)
        return dict(record.warnings) if record else {}

    def list_sessions(self) -> list[str]:
        return sorted(self._sessions)

    def record_warning(self, session_id: str, rule_id: str, file_path: str, now: datetime) -> bool:
        record = self._sessions.setdefault(session_id, _SessionRecord(updated_at=now))
        key = (rule_id, file_path)
        if key in record.warnings:
            return False
        record.warnings[key] = now
        record.updated_at = max(record.updated_at, now)
        return True

    def prune(self, now: datetime, retention: timedelta = DEFAULT_RETENTION) -> int:
        cutoff = now - retention
        stale = [sid for sid, record in self._sessions.items() if record.updated_at < cutoff]
        for sid in stale:
            del self._sessions[sid]
        return len(stale)


def open_store(db_path: Path | str) -> WarningStore:
    """Open the durable store, falling back to an empty in-memory one.

    Never raises: a guard that cannot keep its books still has to decide.
    """
    try:
        return SqliteWarningStore(db_path)
    except (OSError, sqlite3.Error) as exc:
        log.warning("State store unavailable at %s (%s); using in-memory state", db_path, exc)
        return MemoryWarningStore()
