"""Task access service: every operation is scoped to the caller's identity."""

import time
from typing import Any, Callable, Mapping

from pydantic import ValidationError
from ulid import ULID

from ..config import Settings
from ..db import Database, OwnedTaskStore
from ..errors import InvalidInput, NotFound, invalid_input_from
from ..logging_setup import get_logger
from ..models import (
    DashboardResponse,
    Identity,
    MessageResponse,
    Pagination,
    TaskCreate,
    TaskListResponse,
    TaskResponse,
    TaskUpdate,
)
from ..query import build_task_query, page_count
from .dashboard import DashboardAggregator

CREATE_MESSAGES = {
    "title": "Title is required",
    "description": "Description must be text",
    "status": "Invalid status",
    "priority": "Invalid priority",
    "dueDate": "Invalid due date",
}
UPDATE_MESSAGES = {**CREATE_MESSAGES, "title": "Title cannot be empty"}

logger = get_logger("taskboard.tasks")


def to_task(row: dict) -> TaskResponse:
    return TaskResponse.model_validate({**row, "owner": row["owner_id"]})


def _require_object(payload: Any) -> Mapping[str, Any]:
    if not isinstance(payload, Mapping):
        raise InvalidInput([{"field": "body", "msg": "Request body must be a JSON object"}])
    return payload


class TaskService:
    """List, fetch, create, update and delete the caller's tasks."""

    def __init__(
        self,
        db: Database,
        settings: Settings,
        clock: Callable[[], float] = time.time,
    ):
        self.db = db
        self.settings = settings
        self.clock = clock

    def store_for(self, identity: Identity) -> OwnedTaskStore:
        return OwnedTaskStore(self.db, identity.id)

    def list_tasks(
        self,
        identity: Identity,
        *,
        search: str | None = None,
        status: str | None = None,
        page: str | int | None = None,
        limit: str | int | None = None,
        sort: str | None = None,
    ) -> TaskListResponse:
        query = build_task_query(
            search=search,
            status=status,
            page=page,
            limit=limit,
            sort=sort,
            default_limit=self.settings.default_page_limit,
            max_limit=self.settings.max_page_limit,
        )
        store = self.store_for(identity)
        rows = store.find(query.filter, sort=query.sort, skip=query.skip, limit=query.limit)
        total = store.count(query.filter)

        return TaskListResponse(
            tasks=[to_task(row) for row in rows],
            pagination=Pagination(
                page=query.page,
                limit=query.limit,
                total=total,
                pages=page_count(total, query.limit),
            ),
        )

    def get_task(self, identity: Identity, task_id: str) -> TaskResponse:
        row = self.store_for(identity).get(task_id)
        if row is None:
            raise NotFound()
        return to_task(row)

    def create_task(self, identity: Identity, payload: Any) -> TaskResponse:
        try:
            data = TaskCreate.model_validate(_require_object(payload))
        except ValidationError as e:
            raise invalid_input_from(e, CREATE_MESSAGES) from e

        values = data.model_dump(mode="json")
        row = self.store_for(identity).insert(
            str(ULID()),
            values["title"],
            self.clock(),
            description=values["description"],
            status=values["status"],
            priority=values["priority"],
            due_date=values["due_date"],
        )
        logger.info("Task created", task_id=row["id"], user_id=identity.id)
        return to_task(row)

    def update_task(self, identity: Identity, task_id: str, payload: Any) -> TaskResponse:
        try:
            data = TaskUpdate.model_validate(_require_object(payload))
        except ValidationError as e:
            raise invalid_input_from(e, UPDATE_MESSAGES) from e

        changes = data.changes()
        if not changes:
            return self.get_task(identity, task_id)

        row = self.store_for(identity).update(task_id, {**changes, "updated_at": self.clock()})
        if row is None:
            raise NotFound()
        logger.info(
            "Task updated", task_id=task_id, user_id=identity.id, fields=sorted(changes)
        )
        return to_task(row)

    def delete_task(self, identity: Identity, task_id: str) -> MessageResponse:
        if not self.store_for(identity).delete(task_id):
            raise NotFound()
        logger.info("Task deleted", task_id=task_id, user_id=identity.id)
        return MessageResponse(message="Task removed")

    def dashboard(self, identity: Identity) -> DashboardResponse:
        aggregator = DashboardAggregator(self.store_for(identity))
        return DashboardResponse(
            summary=aggregator.summary(),
            recent_activity=[to_task(row) for row in aggregator.recent_activity()],
        )
