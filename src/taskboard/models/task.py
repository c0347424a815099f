"""Pydantic models for task API."""

from datetime import date, datetime
from enum import Enum
from typing import Annotated, Any

from pydantic import BeforeValidator, Field, StringConstraints, field_validator

from .base import CamelModel

Title = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=500)]
Description = Annotated[str, StringConstraints(strip_whitespace=True)]


def _blank_to_none(value: Any) -> Any:
    if isinstance(value, str) and not value.strip():
        return None
    return value


# An empty string means "no due date".
DueDate = Annotated[date | None, BeforeValidator(_blank_to_none)]


class TaskStatus(str, Enum):
    """Task status enumeration."""

    PENDING = "pending"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"


class TaskPriority(str, Enum):
    """Task priority enumeration."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class TaskCreate(CamelModel):
    """Request model for creating a task.

    Unknown keys (``owner``, ``id``, ...) are ignored.
    """

    title: Title
    description: Description | None = None
    status: TaskStatus = TaskStatus.PENDING
    priority: TaskPriority = TaskPriority.MEDIUM
    due_date: DueDate = None


class TaskUpdate(CamelModel):
    """Request model for a partial task update.

    Only keys present in the payload are applied; ``model_fields_set`` tells
    an omitted field from one explicitly set to null.
    """

    title: Title | None = None
    description: Description | None = None
    status: TaskStatus | None = None
    priority: TaskPriority | None = None
    due_date: DueDate = None

    @field_validator("title", "status", "priority", mode="before")
    @classmethod
    def reject_null(cls, value: Any) -> Any:
        if value is None:
            raise ValueError("may not be null")
        return value

    def changes(self) -> dict[str, Any]:
        """Return the explicitly supplied fields as storable column values."""
        return self.model_dump(include=self.model_fields_set, mode="json")


class TaskResponse(CamelModel):
    """Response model for a task."""

    id: str
    owner: str
    title: str
    description: str | None = None
    status: TaskStatus
    priority: TaskPriority
    due_date: date | None = None
    created_at: datetime
    updated_at: datetime


class Pagination(CamelModel):
    page: int
    limit: int
    total: int
    pages: int


class TaskListResponse(CamelModel):
    """Response model for task list."""

    tasks: list[TaskResponse]
    pagination: Pagination


class DashboardSummary(CamelModel):
    total: int = 0
    completed: int = 0
    pending: int = 0
    in_progress: int = 0


class DashboardResponse(CamelModel):
    """Per-user counts and the most recently created tasks."""

    summary: DashboardSummary
    recent_activity: list[TaskResponse] = Field(default_factory=list)


class MessageResponse(CamelModel):
    message: str
