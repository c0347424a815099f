"""Database package."""

from .client import Database
from .tasks import OwnedTaskStore
from .users import DuplicateEmail, create_user, get_user_by_email, get_user_by_id

__all__ = [
    "Database",
    "OwnedTaskStore",
    "DuplicateEmail",
    "create_user",
    "get_user_by_id",
    "get_user_by_email",
]
