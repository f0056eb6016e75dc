# src/taskledger/tasks/task_store.py

from __future__ import annotations

import contextlib
import logging
import sqlite3
from pathlib import Path

from ..core.errors import TaskNotFound
from .task_models import Task

logger = logging.getLogger(__name__)

_META_LAST_ID = "last_task_id"
_META_OWNER = "owner"

# SQLite INTEGER is a signed 64-bit value.
_SQLITE_INT_MIN = -(2**63)
_SQLITE_INT_MAX = 2**63 - 1


def _storable_id(task_id: int) -> bool:
    return _SQLITE_INT_MIN <= int(task_id) <= _SQLITE_INT_MAX


class TaskStore:
    """
    SQLite task store.

    Layout:
    - tasks: one row per live task; a missing row means "never created or deleted"
    - meta:  key/value slots for the id counter (high-water mark) and the owner

    Ids come from the persisted counter, not from SQLite rowids, so a deleted id
    is never handed out again (even after a restart).

    Thread-safety:
    - each method opens its own SQLite connection
    - insert_new() bumps the counter and writes the row in one transaction
    - callers that need several calls to be atomic serialize them (TaskService does)
    """

    def __init__(self, db_path: str | Path = "tasks.sqlite3") -> None:
        self._db_path = Path(db_path)
        self._db_path.parent.mkdir(parents=True, exist_ok=True)
        self._ensure_schema()
        logger.info(
            "TaskStore ready db=%s live=%s issued=%s",
            self._db_path,
            self.count_live(),
            self.total_count(),
        )

    def close(self) -> None:
        """Compatibility hook for shutdown (no persistent connections to close)."""
        return

    # ---- low-level helpers ----

    def _get_conn(self) -> sqlite3.Connection:
        conn = sqlite3.connect(str(self._db_path), timeout=30.0)
        conn.row_factory = sqlite3.Row
        self._configure_conn(conn)
        return conn

    @staticmethod
    def _configure_conn(conn: sqlite3.Connection) -> None:
        # WAL is best-effort (unsupported on some filesystems).
        with contextlib.suppress(sqlite3.DatabaseError):
            conn.execute("PRAGMA journal_mode=WAL")

    def _ensure_schema(self) -> None:
        conn = self._get_conn()
        try:
            cur = conn.cursor()
            cur.execute(
                """
                CREATE TABLE IF NOT EXISTS tasks (
                    id INTEGER PRIMARY KEY,
                    title TEXT NOT NULL DEFAULT '',
                    description TEXT NOT NULL DEFAULT '',
                    completed INTEGER NOT NULL DEFAULT 0
                )
                """
            )
            cur.execute(
                """
                CREATE TABLE IF NOT EXISTS meta (
                    key TEXT PRIMARY KEY,
                    value TEXT NOT NULL
                )
                """
            )
            cur.execute(
                "INSERT OR IGNORE INTO meta(key, value) VALUES (?, '0')",
                (_META_LAST_ID,),
            )
            conn.commit()
        finally:
            conn.close()

    @staticmethod
    def _row_to_task(row: sqlite3.Row) -> Task:
        return Task(
            id=int(row["id"]),
            title=str(row["title"]),
            description=str(row["description"]),
            completed=bool(row["completed"]),
        )

    def _find(self, task_id: int) -> Task | None:
        if not _storable_id(task_id):
            return None
        conn = self._get_conn()
        try:
            cur = conn.execute(
                "SELECT id, title, description, completed FROM tasks WHERE id = ?",
                (int(task_id),),
            )
            row = cur.fetchone()
            return self._row_to_task(row) if row else None
        finally:
            conn.close()

    # ---- id counter ----

    def allocate(self) -> int:
        """Advance the high-water mark and return the new id (first id is 1)."""
        conn = self._get_conn()
        try:
            conn.execute(
                "UPDATE meta SET value = CAST(value AS INTEGER) + 1 WHERE key = ?",
                (_META_LAST_ID,),
            )
            (value,) = conn.execute(
                "SELECT value FROM meta WHERE key = ?", (_META_LAST_ID,)
            ).fetchone()
            conn.commit()
            task_id = int(value)
            logger.debug("Allocated task id=%s", task_id)
            return task_id
        finally:
            conn.close()

    def insert_new(self, *, title: str, description: str) -> int:
        """
        Allocate an id and insert an open task in one transaction.

        If the insert fails, the counter bump is rolled back with it.
        """
        conn = self._get_conn()
        try:
            with conn:
                conn.execute(
                    "UPDATE meta SET value = CAST(value AS INTEGER) + 1 WHERE key = ?",
                    (_META_LAST_ID,),
                )
                (value,) = conn.execute(
                    "SELECT value FROM meta WHERE key = ?", (_META_LAST_ID,)
                ).fetchone()
                task_id = int(value)
                conn.execute(
                    "INSERT INTO tasks(id, title, description, completed) VALUES (?, ?, ?, 0)",
                    (task_id, title, description),
                )
            logger.debug("Task inserted id=%s", task_id)
            return task_id
        finally:
            conn.close()

    def total_count(self) -> int:
        """Number of ids ever issued (never decremented)."""
        conn = self._get_conn()
        try:
            row = conn.execute("SELECT value FROM meta WHERE key = ?", (_META_LAST_ID,)).fetchone()
            return int(row["value"]) if row else 0
        finally:
            conn.close()

    # ---- records ----

    def put(self, task_id: int, *, title: str, description: str, completed: bool) -> None:
        """Unconditional upsert; the task is live afterwards."""
        conn = self._get_conn()
        try:
            conn.execute(
                """
                INSERT INTO tasks(id, title, description, completed)
                VALUES (?, ?, ?, ?)
                ON CONFLICT(id) DO UPDATE SET
                    title = excluded.title,
                    description = excluded.description,
                    completed = excluded.completed
                """,
                (int(task_id), title, description, 1 if completed else 0),
            )
            conn.commit()
            logger.debug("Task put id=%s completed=%s", task_id, completed)
        finally:
            conn.close()

    def get(self, task_id: int) -> Task:
        task = self._find(task_id)
        if task is None:
            raise TaskNotFound(task_id)
        return task

    def exists(self, task_id: int) -> bool:
        return self._find(task_id) is not None

    def remove(self, task_id: int) -> None:
        if not _storable_id(task_id):
            raise TaskNotFound(task_id)
        conn = self._get_conn()
        try:
            cur = conn.execute("DELETE FROM tasks WHERE id = ?", (int(task_id),))
            conn.commit()
            if cur.rowcount != 1:
                raise TaskNotFound(task_id)
            logger.debug("Task removed id=%s", task_id)
        finally:
            conn.close()

    def list_all(self) -> list[Task]:
        """Live tasks in ascending id order (snapshot at call time)."""
        conn = self._get_conn()
        try:
            cur = conn.execute(
                "SELECT id, title, description, completed FROM tasks ORDER BY id ASC"
            )
            return [self._row_to_task(r) for r in cur.fetchall()]
        finally:
            conn.close()

    def count_live(self) -> int:
        conn = self._get_conn()
        try:
            (n,) = conn.execute("SELECT COUNT(*) FROM tasks").fetchone()
            return int(n)
        finally:
            conn.close()

    # ---- owner slot (OwnerRepo) ----

    def load_owner(self) -> str | None:
        conn = self._get_conn()
        try:
            row = conn.execute("SELECT value FROM meta WHERE key = ?", (_META_OWNER,)).fetchone()
            return str(row["value"]) if row else None
        finally:
            conn.close()

    def save_owner(self, owner: str) -> None:
        conn = self._get_conn()
        try:
            conn.execute(
                """
                INSERT INTO meta(key, value) VALUES (?, ?)
                ON CONFLICT(key) DO UPDATE SET value = excluded.value
                """,
                (_META_OWNER, owner),
            )
            conn.commit()
        finally:
            conn.close()
