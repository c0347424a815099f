"""Service layer."""

from .auth import AccountService, IdentityGuard
from .dashboard import DashboardAggregator
from .tasks import TaskService

__all__ = ["AccountService", "IdentityGuard", "DashboardAggregator", "TaskService"]
