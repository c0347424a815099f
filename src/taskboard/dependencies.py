"""FastAPI dependencies wiring request context to services."""

import json
from typing import Annotated, Any

from fastapi import Depends, Header, Request

from .config import Settings
from .db import Database
from .errors import InvalidInput
from .models import Identity
from .services import AccountService, IdentityGuard, TaskService


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_database(request: Request) -> Database:
    return request.app.state.db


def get_identity_guard(
    db: Annotated[Database, Depends(get_database)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> IdentityGuard:
    return IdentityGuard(db, settings)


def get_current_identity(
    guard: Annotated[IdentityGuard, Depends(get_identity_guard)],
    authorization: Annotated[str | None, Header()] = None,
) -> Identity:
    """Resolve the bearer credential on this request, or fail with 401."""
    return guard.authenticate(authorization)


def get_task_service(
    db: Annotated[Database, Depends(get_database)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> TaskService:
    return TaskService(db, settings)


def get_account_service(
    db: Annotated[Database, Depends(get_database)],
    guard: Annotated[IdentityGuard, Depends(get_identity_guard)],
) -> AccountService:
    return AccountService(db, guard)


async def json_body(request: Request) -> Any:
    """Parse the request body as JSON.

    Routes declare this after the identity dependency, so a bad credential
    is reported before a bad body.
    """
    raw = await request.body()
    if not raw:
        return None
    try:
        return json.loads(raw)
    except ValueError as e:
        raise InvalidInput([{"field": "body", "msg": "Malformed JSON body"}]) from e


CurrentIdentity = Annotated[Identity, Depends(get_current_identity)]
TaskServiceDep = Annotated[TaskService, Depends(get_task_service)]
AccountServiceDep = Annotated[AccountService, Depends(get_account_service)]
JsonBody = Annotated[Any, Depends(json_body)]
