"""Translate raw list-request parameters into a normalized task query.

Everything here is pure: no store access, no identity. The owner predicate
is never part of a :class:`TaskQuery`; it is applied by the store itself.
"""

import math
from dataclasses import dataclass, field

DEFAULT_PAGE = 1
# Largest value SQLite accepts for LIMIT and OFFSET.
MAX_SQL_INTEGER = 2**63 - 1

# Wire name (and snake_case spelling) -> column.
SORT_FIELDS = {
    "createdAt": "created_at",
    "created_at": "created_at",
    "updatedAt": "updated_at",
    "updated_at": "updated_at",
    "dueDate": "due_date",
    "due_date": "due_date",
    "title": "title",
    "status": "status",
    "priority": "priority",
}


@dataclass(frozen=True)
class SortKey:
    column: str
    descending: bool = False


@dataclass(frozen=True)
class TaskFilter:
    """Content predicates on tasks, conjoined with each other."""

    search: str | None = None
    status: str | None = None


@dataclass(frozen=True)
class TaskQuery:
    filter: TaskFilter = field(default_factory=TaskFilter)
    page: int = DEFAULT_PAGE
    limit: int = 10
    sort: tuple[SortKey, ...] = (SortKey("created_at", descending=True),)

    @property
    def skip(self) -> int:
        return (self.page - 1) * self.limit


def parse_positive_int(value: str | int | None, default: int) -> int:
    """Parse ``value`` as an integer >= 1, falling back to ``default``."""
    if value is None:
        return default
    try:
        number = int(str(value).strip())
    except ValueError:
        return default
    return number if number >= 1 else default


def parse_sort(value: str | None) -> tuple[SortKey, ...]:
    """Parse ``-createdAt`` style sort expressions.

    Fields are separated by commas or spaces; a leading ``-`` means
    descending. Unknown fields are dropped, and if nothing usable remains the
    default (newest first) applies.
    """
    keys: list[SortKey] = []
    seen: set[str] = set()
    for token in (value or "").replace(",", " ").split():
        descending = token.startswith("-")
        name = token.lstrip("+-")
        column = SORT_FIELDS.get(name)
        if column is None or column in seen:
            continue
        seen.add(column)
        keys.append(SortKey(column, descending))

    if not keys:
        keys.append(SortKey("created_at", descending=True))
    return tuple(keys)


def build_task_query(
    search: str | None = None,
    status: str | None = None,
    page: str | int | None = None,
    limit: str | int | None = None,
    sort: str | None = None,
    *,
    default_limit: int = 10,
    max_limit: int | None = None,
) -> TaskQuery:
    """Build a :class:`TaskQuery` from request parameters.

    Empty ``search``/``status`` strings mean "no filter". ``status`` is not
    validated: an unknown value is an equality filter that matches nothing.
    ``limit`` is clamped to ``max_limit`` when one is given.
    ``page`` is clamped so the row offset still fits in a SQL integer; such
    a page is past the last row and simply comes back empty.
    """
    page_number = parse_positive_int(page, DEFAULT_PAGE)
    page_size = parse_positive_int(limit, default_limit)
    if max_limit is not None:
        page_size = min(page_size, max_limit)
    page_size = min(page_size, MAX_SQL_INTEGER)
    page_number = min(page_number, MAX_SQL_INTEGER // page_size + 1)

    return TaskQuery(
        filter=TaskFilter(search=search or None, status=status or None),
        page=page_number,
        limit=page_size,
        sort=parse_sort(sort),
    )


def page_count(total: int, limit: int) -> int:
    """Number of pages needed for ``total`` items; never less than 1."""
    return max(1, math.ceil(total / limit))
