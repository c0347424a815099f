"""User account persistence."""

import sqlite3

from .client import Database


class DuplicateEmail(Exception):
    """An account with this e-mail address already exists."""


def create_user(
    db: Database,
    user_id: str,
    name: str,
    email: str,
    password_hash: str,
    created_at: float,
    role: str = "user",
) -> dict:
    """Insert a user row and return it."""
    try:
        with db.connect() as conn:
            conn.execute(
                """
                INSERT INTO users (id, name, email, password_hash, role, created_at)
                VALUES (?, ?, ?, ?, ?, ?)
                """,
                (user_id, name, email, password_hash, role, created_at),
            )
    except sqlite3.IntegrityError as e:
        raise DuplicateEmail(email) from e
    return get_user_by_id(db, user_id)


def get_user_by_id(db: Database, user_id: str) -> dict | None:
    with db.connect() as conn:
        row = conn.execute("SELECT * FROM users WHERE id = ?", (user_id,)).fetchone()
        return dict(row) if row else None


def get_user_by_email(db: Database, email: str) -> dict | None:
    with db.connect() as conn:
        row = conn.execute("SELECT * FROM users WHERE email = ?", (email,)).fetchone()
        return dict(row) if row else None
