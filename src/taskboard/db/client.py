"""SQLite connection handling and schema."""

import sqlite3
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator

SCHEMA = (
    """
    CREATE TABLE IF NOT EXISTS users (
        id TEXT PRIMARY KEY,
        name TEXT NOT NULL,
        email TEXT NOT NULL UNIQUE,
        password_hash TEXT NOT NULL,
        role TEXT NOT NULL DEFAULT 'user',
        created_at REAL NOT NULL
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS tasks (
        id TEXT PRIMARY KEY,
        owner_id TEXT NOT NULL REFERENCES users(id) ON DELETE CASCADE,
        title TEXT NOT NULL,
        description TEXT,
        status TEXT NOT NULL DEFAULT 'pending',
        priority TEXT NOT NULL DEFAULT 'medium',
        due_date TEXT,
        created_at REAL NOT NULL,
        updated_at REAL NOT NULL
    )
    """,
    """
    CREATE INDEX IF NOT EXISTS idx_tasks_owner_created_at
    ON tasks(owner_id, created_at)
    """,
    """
    CREATE INDEX IF NOT EXISTS idx_tasks_owner_status
    ON tasks(owner_id, status)
    """,
)


def contains_casefold(haystack: str | None, needle: str) -> int:
    """Case-insensitive literal substring test, registered as a SQL function."""
    if haystack is None:
        return 0
    return int(needle.casefold() in haystack.casefold())


class Database:
    """A SQLite database file; hands out one connection per unit of work."""

    def __init__(self, path: Path | str, timeout: float = 5.0):
        self.path = Path(path)
        self.timeout = timeout

    def get_connection(self) -> sqlite3.Connection:
        """Get a database connection with WAL mode enabled."""
        conn = sqlite3.connect(self.path, timeout=self.timeout)
        conn.row_factory = sqlite3.Row
        conn.execute("PRAGMA journal_mode=WAL")
        conn.execute("PRAGMA foreign_keys=ON")
        conn.create_function("contains_casefold", 2, contains_casefold, deterministic=True)
        return conn

    @contextmanager
    def connect(self) -> Iterator[sqlite3.Connection]:
        """Context manager for database connections."""
        conn = self.get_connection()
        try:
            yield conn
            conn.commit()
        except Exception:
            conn.rollback()
            raise
        finally:
            conn.close()

    def init_schema(self) -> None:
        """Initialize the database schema."""
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with self.connect() as conn:
            for statement in SCHEMA:
                conn.execute(statement)
