"""Identity Guard and account operations.

Bearer credentials are HS256 JWTs whose ``sub`` claim is the user id. Every
way a credential can be wrong (absent, malformed, badly signed, expired, or
naming a user that no longer exists) ends in the same ``Unauthenticated``
error, so callers learn nothing about which check failed.
"""

import hashlib
import hmac
import secrets
import time
from datetime import datetime, timedelta, timezone
from typing import Callable

import jwt
from ulid import ULID

from ..config import Settings
from ..db import Database, DuplicateEmail, create_user, get_user_by_email, get_user_by_id
from ..errors import Conflict, Unauthenticated
from ..logging_setup import get_logger
from ..models import AuthResponse, Identity, UserLogin, UserRegister

PBKDF2_ITERATIONS = 240_000

logger = get_logger("taskboard.auth")


def hash_password(password: str, salt: str | None = None) -> str:
    """Return ``pbkdf2_sha256$iterations$salt$hexdigest``."""
    if salt is None:
        salt = secrets.token_hex(16)
    digest = hashlib.pbkdf2_hmac(
        "sha256", password.encode("utf-8"), salt.encode("utf-8"), PBKDF2_ITERATIONS
    )
    return f"pbkdf2_sha256${PBKDF2_ITERATIONS}${salt}${digest.hex()}"


def verify_password(password: str, encoded: str) -> bool:
    try:
        algorithm, iterations, salt, expected = encoded.split("$")
    except ValueError:
        return False
    if algorithm != "pbkdf2_sha256":
        return False
    digest = hashlib.pbkdf2_hmac(
        "sha256", password.encode("utf-8"), salt.encode("utf-8"), int(iterations)
    )
    return hmac.compare_digest(digest.hex(), expected)


def _identity(user: dict) -> Identity:
    return Identity(id=user["id"], name=user["name"], email=user["email"], role=user["role"])


class IdentityGuard:
    """Issues and verifies bearer credentials."""

    def __init__(
        self,
        db: Database,
        settings: Settings,
        clock: Callable[[], float] = time.time,
    ):
        self.db = db
        self.settings = settings
        self.clock = clock

    def issue_token(self, user_id: str) -> str:
        issued_at = datetime.fromtimestamp(self.clock(), tz=timezone.utc)
        payload = {
            "sub": user_id,
            "iat": issued_at,
            "exp": issued_at + timedelta(minutes=self.settings.token_ttl_minutes),
        }
        return jwt.encode(payload, self.settings.jwt_secret, algorithm=self.settings.jwt_algorithm)

    def resolve_token(self, token: str) -> Identity:
        """Decode ``token`` and load the user it names."""
        try:
            claims = jwt.decode(
                token,
                self.settings.jwt_secret,
                algorithms=[self.settings.jwt_algorithm],
                options={"require": ["exp", "sub"], "verify_exp": False, "verify_iat": False},
            )
        except jwt.PyJWTError as e:
            logger.info("Token rejected", reason=type(e).__name__)
            raise Unauthenticated() from e

        if claims["exp"] <= self.clock():
            logger.info("Token rejected", reason="ExpiredSignatureError")
            raise Unauthenticated()

        user = get_user_by_id(self.db, claims["sub"])
        if user is None:
            logger.info("Token rejected", reason="UnknownUser")
            raise Unauthenticated()
        return _identity(user)

    def authenticate(self, authorization: str | None) -> Identity:
        """Resolve an ``Authorization`` header value to an identity."""
        if not authorization:
            raise Unauthenticated()
        scheme, _, token = authorization.strip().partition(" ")
        token = token.strip()
        if scheme.lower() != "bearer" or not token:
            raise Unauthenticated()
        return self.resolve_token(token)


class AccountService:
    """Registration and login."""

    def __init__(self, db: Database, guard: IdentityGuard):
        self.db = db
        self.guard = guard

    def _with_token(self, user: dict) -> AuthResponse:
        identity = _identity(user)
        return AuthResponse(**identity.model_dump(), token=self.guard.issue_token(identity.id))

    def register(self, data: UserRegister) -> AuthResponse:
        if get_user_by_email(self.db, data.email) is not None:
            raise Conflict("User already exists")
        try:
            user = create_user(
                self.db,
                user_id=str(ULID()),
                name=data.name,
                email=data.email,
                password_hash=hash_password(data.password),
                created_at=self.guard.clock(),
            )
        except DuplicateEmail as e:
            raise Conflict("User already exists") from e

        logger.info("User registered", user_id=user["id"])
        return self._with_token(user)

    def login(self, data: UserLogin) -> AuthResponse:
        user = get_user_by_email(self.db, data.email)
        if user is None or not verify_password(data.password, user["password_hash"]):
            logger.info("Login failed")
            raise Unauthenticated("Invalid email or password")
        return self._with_token(user)
