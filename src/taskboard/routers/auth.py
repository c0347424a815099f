"""Account API router."""

from typing import Any

from fastapi import APIRouter, status
from pydantic import ValidationError

from ..dependencies import AccountServiceDep, CurrentIdentity, JsonBody
from ..errors import invalid_input_from
from ..models import AuthResponse, Identity, UserLogin, UserRegister

router = APIRouter(prefix="/api/auth", tags=["auth"])

REGISTER_MESSAGES = {
    "name": "Name is required",
    "email": "Please include a valid email",
    "password": "Password must be at least 6 characters",
}
LOGIN_MESSAGES = {
    "email": "Please include a valid email",
    "password": "Password is required",
}


def _parse(model: type, payload: Any, messages: dict[str, str]):
    try:
        return model.model_validate(payload if payload is not None else {})
    except ValidationError as e:
        raise invalid_input_from(e, messages) from e


@router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
def register(payload: JsonBody, service: AccountServiceDep):
    """Create an account and return a bearer token for it."""
    return service.register(_parse(UserRegister, payload, REGISTER_MESSAGES))


@router.post("/login", response_model=AuthResponse)
def login(payload: JsonBody, service: AccountServiceDep):
    """Exchange e-mail and password for a bearer token."""
    return service.login(_parse(UserLogin, payload, LOGIN_MESSAGES))


@router.get("/me", response_model=Identity)
def me(identity: CurrentIdentity):
    """Return the caller's identity."""
    return identity
