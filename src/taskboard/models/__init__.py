"""Models package."""

from .task import (
    DashboardResponse,
    DashboardSummary,
    MessageResponse,
    Pagination,
    TaskCreate,
    TaskListResponse,
    TaskPriority,
    TaskResponse,
    TaskStatus,
    TaskUpdate,
)
from .user import AuthResponse, Identity, UserLogin, UserRegister

__all__ = [
    "TaskStatus",
    "TaskPriority",
    "TaskCreate",
    "TaskUpdate",
    "TaskResponse",
    "TaskListResponse",
    "Pagination",
    "DashboardSummary",
    "DashboardResponse",
    "MessageResponse",
    "Identity",
    "UserRegister",
    "UserLogin",
    "AuthResponse",
]
