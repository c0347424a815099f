"""Task API router."""

from fastapi import APIRouter, status

from ..dependencies import CurrentIdentity, JsonBody, TaskServiceDep
from ..models import (
    DashboardResponse,
    MessageResponse,
    TaskListResponse,
    TaskResponse,
)

router = APIRouter(prefix="/api/tasks", tags=["tasks"])


# =============================================================================
# Static routes - Must be defined BEFORE /{task_id} routes
# =============================================================================


@router.get("/dashboard", response_model=DashboardResponse)
def dashboard(identity: CurrentIdentity, service: TaskServiceDep):
    """Summary counts and the five newest tasks."""
    return service.dashboard(identity)


@router.get("", response_model=TaskListResponse)
def list_tasks(
    identity: CurrentIdentity,
    service: TaskServiceDep,
    search: str | None = None,
    status: str | None = None,
    page: str | None = None,
    limit: str | None = None,
    sort: str | None = None,
):
    """List tasks with optional search, status filter, pagination and sort."""
    return service.list_tasks(
        identity, search=search, status=status, page=page, limit=limit, sort=sort
    )


@router.post("", response_model=TaskResponse, status_code=status.HTTP_201_CREATED)
def create_task(identity: CurrentIdentity, payload: JsonBody, service: TaskServiceDep):
    """Create a new task."""
    return service.create_task(identity, payload)


# =============================================================================
# Routes with task_id
# =============================================================================


@router.get("/{task_id}", response_model=TaskResponse)
def get_task(task_id: str, identity: CurrentIdentity, service: TaskServiceDep):
    """Get a task by ID."""
    return service.get_task(identity, task_id)


@router.put("/{task_id}", response_model=TaskResponse)
def update_task(
    task_id: str,
    identity: CurrentIdentity,
    payload: JsonBody,
    service: TaskServiceDep,
):
    """Apply the fields present in the body; omitted fields are left alone."""
    return service.update_task(identity, task_id, payload)


@router.delete("/{task_id}", response_model=MessageResponse)
def delete_task(task_id: str, identity: CurrentIdentity, service: TaskServiceDep):
    """Delete a task."""
    return service.delete_task(identity, task_id)
