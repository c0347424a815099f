"""Owner-scoped task persistence.

:class:`OwnedTaskStore` is the only way to reach the ``tasks`` table. It is
bound to one owner at construction and every statement it issues carries
``owner_id = ?``, so a task belonging to someone else is indistinguishable
from one that does not exist.
"""

from typing import Any

from ..query import SortKey, TaskFilter
from .client import Database

SORTABLE_COLUMNS = frozenset(
    {"created_at", "updated_at", "due_date", "title", "status", "priority"}
)
UPDATABLE_COLUMNS = frozenset(
    {"title", "description", "status", "priority", "due_date", "updated_at"}
)


class OwnedTaskStore:
    """Task repository restricted to a single owner."""

    def __init__(self, db: Database, owner_id: str):
        if not owner_id:
            raise ValueError("owner_id is required")
        self._db = db
        self._owner_id = owner_id

    @property
    def owner_id(self) -> str:
        return self._owner_id

    def _where(self, task_filter: TaskFilter | None) -> tuple[str, list[Any]]:
        clauses = ["owner_id = ?"]
        params: list[Any] = [self._owner_id]
        if task_filter is not None:
            if task_filter.search:
                clauses.append(
                    "(contains_casefold(title, ?) OR contains_casefold(description, ?))"
                )
                params.extend([task_filter.search, task_filter.search])
            if task_filter.status:
                clauses.append("status = ?")
                params.append(task_filter.status)
        return " AND ".join(clauses), params

    @staticmethod
    def _order_by(sort: tuple[SortKey, ...]) -> str:
        terms = []
        for key in sort:
            if key.column not in SORTABLE_COLUMNS:
                raise ValueError(f"Cannot sort by {key.column!r}")
            terms.append(f"{key.column} {'DESC' if key.descending else 'ASC'}")
        tiebreak_desc = sort[0].descending if sort else True
        terms.append(f"id {'DESC' if tiebreak_desc else 'ASC'}")
        return ", ".join(terms)

    def find(
        self,
        task_filter: TaskFilter | None = None,
        *,
        sort: tuple[SortKey, ...] = (SortKey("created_at", descending=True),),
        skip: int = 0,
        limit: int | None = None,
    ) -> list[dict]:
        """Return matching tasks, ordered by ``sort`` and windowed."""
        where, params = self._where(task_filter)
        sql = f"SELECT * FROM tasks WHERE {where} ORDER BY {self._order_by(sort)}"
        if limit is not None:
            sql += " LIMIT ? OFFSET ?"
            params.extend([limit, skip])
        elif skip:
            sql += " LIMIT -1 OFFSET ?"
            params.append(skip)

        with self._db.connect() as conn:
            return [dict(row) for row in conn.execute(sql, params).fetchall()]

    def count(self, task_filter: TaskFilter | None = None) -> int:
        """Count matching tasks, ignoring any pagination window."""
        where, params = self._where(task_filter)
        with self._db.connect() as conn:
            row = conn.execute(f"SELECT COUNT(*) FROM tasks WHERE {where}", params).fetchone()
            return row[0]

    def get(self, task_id: str) -> dict | None:
        """Get a task by ID."""
        with self._db.connect() as conn:
            row = conn.execute(
                "SELECT * FROM tasks WHERE id = ? AND owner_id = ?",
                (task_id, self._owner_id),
            ).fetchone()
            return dict(row) if row else None

    def insert(
        self,
        task_id: str,
        title: str,
        created_at: float,
        *,
        description: str | None = None,
        status: str = "pending",
        priority: str = "medium",
        due_date: str | None = None,
    ) -> dict:
        """Create a new task owned by this store's owner."""
        with self._db.connect() as conn:
            conn.execute(
                """
                INSERT INTO tasks (
                    id, owner_id, title, description, status, priority,
                    due_date, created_at, updated_at
                )
                VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    task_id,
                    self._owner_id,
                    title,
                    description,
                    status,
                    priority,
                    due_date,
                    created_at,
                    created_at,
                ),
            )
        return self.get(task_id)

    def update(self, task_id: str, changes: dict[str, Any]) -> dict | None:
        """Apply ``changes`` to a task; returns None if it is not this owner's."""
        unknown = set(changes) - UPDATABLE_COLUMNS
        if unknown:
            raise ValueError(f"Cannot update columns: {sorted(unknown)}")

        with self._db.connect() as conn:
            if changes:
                assignments = ", ".join(f"{column} = ?" for column in changes)
                cursor = conn.execute(
                    f"UPDATE tasks SET {assignments} WHERE id = ? AND owner_id = ?",
                    [*changes.values(), task_id, self._owner_id],
                )
                if cursor.rowcount == 0:
                    return None
        return self.get(task_id)

    def delete(self, task_id: str) -> bool:
        """Delete a task by ID."""
        with self._db.connect() as conn:
            cursor = conn.execute(
                "DELETE FROM tasks WHERE id = ? AND owner_id = ?",
                (task_id, self._owner_id),
            )
            return cursor.rowcount > 0
