"""Per-user dashboard summary."""

from ..db import OwnedTaskStore
from ..models import DashboardSummary, TaskStatus
from ..query import SortKey, TaskFilter

RECENT_ACTIVITY_SIZE = 5


class DashboardAggregator:
    """Derives summary counts and recent activity from one owner's tasks.

    The counts are independent reads, not one snapshot; under concurrent
    writes they may disagree slightly with each other.
    """

    def __init__(self, store: OwnedTaskStore):
        self.store = store

    def summary(self) -> DashboardSummary:
        return DashboardSummary(
            total=self.store.count(),
            completed=self.store.count(TaskFilter(status=TaskStatus.COMPLETED.value)),
            pending=self.store.count(TaskFilter(status=TaskStatus.PENDING.value)),
            in_progress=self.store.count(TaskFilter(status=TaskStatus.IN_PROGRESS.value)),
        )

    def recent_activity(self, size: int = RECENT_ACTIVITY_SIZE) -> list[dict]:
        return self.store.find(sort=(SortKey("created_at", descending=True),), limit=size)
