"""Pydantic models for accounts and authentication."""

from typing import Annotated

from pydantic import StringConstraints, field_validator

from .base import CamelModel

EMAIL_PATTERN = r"^\S+@\S+\.\S+$"

Name = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=100)]
Email = Annotated[
    str,
    StringConstraints(strip_whitespace=True, to_lower=True, pattern=EMAIL_PATTERN),
]


class Identity(CamelModel, frozen=True):
    """An authenticated user, as resolved from a bearer credential."""

    id: str
    name: str
    email: str
    role: str = "user"


class UserRegister(CamelModel):
    """Request model for registration."""

    name: Name
    email: Email
    password: str

    @field_validator("password")
    @classmethod
    def check_password_length(cls, value: str) -> str:
        if len(value) < 6:
            raise ValueError("Password must be at least 6 characters")
        return value


class UserLogin(CamelModel):
    """Request model for login."""

    email: Email
    password: str


class AuthResponse(Identity):
    """Identity plus a freshly issued bearer token."""

    token: str
