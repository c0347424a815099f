"""Error types raised by the task service and their HTTP mapping."""

from typing import Any, Mapping

from pydantic import ValidationError


class TaskboardError(Exception):
    """Base class for errors that surface to API callers."""

    status_code = 500
    code = "UNEXPECTED"

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)

    def to_body(self) -> dict[str, Any]:
        return {"message": self.message}


class Unauthenticated(TaskboardError):
    """Missing, malformed, expired or unknown credential."""

    status_code = 401
    code = "UNAUTHENTICATED"

    def __init__(self, message: str = "Not authorized"):
        super().__init__(message)


class NotFound(TaskboardError):
    """Resource absent, or owned by someone else."""

    status_code = 404
    code = "NOT_FOUND"

    def __init__(self, message: str = "Task not found"):
        super().__init__(message)


class InvalidInput(TaskboardError):
    """Request payload failed validation.

    ``errors`` holds one ``{"field": ..., "msg": ...}`` entry per problem.
    """

    status_code = 400
    code = "INVALID_INPUT"

    def __init__(
        self,
        errors: list[dict[str, str]],
        message: str | None = None,
    ):
        self.errors = errors
        if message is None:
            message = ", ".join(error["msg"] for error in errors) or "Invalid input"
        super().__init__(message)

    def to_body(self) -> dict[str, Any]:
        return {"message": self.message, "errors": self.errors}


class Conflict(TaskboardError):
    """Unique constraint violated (e.g. an e-mail already registered)."""

    status_code = 400
    code = "CONFLICT"


class Unexpected(TaskboardError):
    """Store or infrastructure failure."""

    status_code = 500
    code = "UNEXPECTED"

    def __init__(self, message: str = "Server error"):
        super().__init__(message)


def invalid_input_from(
    exc: ValidationError, messages: Mapping[str, str] | None = None
) -> InvalidInput:
    """Convert a pydantic ``ValidationError`` into :class:`InvalidInput`.

    ``messages`` overrides the text reported for a field, except for
    length-limit failures which keep pydantic's own wording.
    """
    messages = messages or {}
    errors = []
    for error in exc.errors():
        field = ".".join(str(part) for part in error["loc"]) or "body"
        msg = messages.get(field)
        if msg is None or error["type"] == "string_too_long":
            msg = error["msg"]
        errors.append({"field": field, "msg": msg})
    return InvalidInput(errors)
