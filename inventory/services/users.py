"""User accounts: registration, login, profile updates and the default admin bootstrap."""

import logging
from functools import lru_cache
from typing import TYPE_CHECKING

from pydantic import SecretStr
from sqlalchemy import or_
from sqlalchemy.dialects.postgresql import insert as postgresql_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.orm import Session

from inventory.core.database import UniqueConflict, commit_or_conflict
from inventory.core.security import hash_password, verify_password
from inventory.models import User
from inventory.schemas.auth import ProfileUpdateRequest, RegisterRequest

if TYPE_CHECKING:
    from inventory.core.config import Settings

logger = logging.getLogger(__name__)

# Checked when the username is unknown so both login failures cost one bcrypt verify.
_DUMMY_PASSWORD = SecretStr("not-a-real-password")

_INSERT_BY_DIALECT = {
    "postgresql": postgresql_insert,
    "sqlite": sqlite_insert,
}


@lru_cache(maxsize=1)
def _dummy_hash() -> str:
    return hash_password(_DUMMY_PASSWORD)


class DuplicateCredentialError(Exception):
    """Username or email is already taken."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class InvalidCredentialsError(Exception):
    """Unknown username or wrong password; deliberately indistinguishable."""


class UserNotFoundError(Exception):
    """No user with the requested id."""


def register_user(db: Session, body: RegisterRequest) -> User:
    """
    Create a user with a hashed password; role defaults to 'user'.

    Raises DuplicateCredentialError if the username or email already exists,
    including when a concurrent registration wins the race at commit time.
    """
    existing = (
        db.query(User.id)
        .filter(or_(User.username == body.username, User.email == body.email))
        .first()
    )
    if existing is not None:
        raise DuplicateCredentialError("Username or email already exists")

    user = User(username=body.username, email=body.email, role=body.role)
    user.set_password(body.password)
    db.add(user)
    try:
        commit_or_conflict(db, user)
    except UniqueConflict as e:
        raise DuplicateCredentialError("Username or email already exists") from e
    db.refresh(user)
    logger.info("Registered user id=%s username=%s role=%s", user.id, user.username, user.role)
    return user


def authenticate(db: Session, username: str, password: SecretStr) -> User:
    """Return the user for valid credentials, else raise InvalidCredentialsError."""
    user = db.query(User).filter(User.username == username).first()
    if user is None:
        verify_password(password, _dummy_hash())
        logger.info("Failed login for username=%s", username)
        raise InvalidCredentialsError()
    if not verify_password(password, user.password_hash):
        logger.info("Failed login for username=%s", username)
        raise InvalidCredentialsError()
    return user


def get_user(db: Session, user_id: int) -> User:
    user = db.get(User, user_id)
    if user is None:
        raise UserNotFoundError()
    return user


def list_users(db: Session) -> list[User]:
    return db.query(User).order_by(User.id).all()


def update_profile(db: Session, user_id: int, body: ProfileUpdateRequest) -> User:
    """
    Apply a partial profile update. Only fields present in the request change;
    a new password is rehashed.

    Raises UserNotFoundError, or DuplicateCredentialError when the email is taken.
    """
    user = get_user(db, user_id)
    changes = body.model_dump(exclude_unset=True, exclude_none=True)
    if "email" in changes:
        user.email = body.email
    if "password" in changes:
        user.set_password(body.password)
    try:
        commit_or_conflict(db, user)
    except UniqueConflict as e:
        raise DuplicateCredentialError("Email already exists") from e
    return user


def ensure_default_admin(db: Session, settings: "Settings") -> bool:
    """
    Create the well-known admin account if absent, in one INSERT ... ON CONFLICT DO NOTHING.

    Idempotent and safe against concurrent startups. Returns True when the
    account was created by this call.
    """
    dialect = db.get_bind().dialect.name
    insert = _INSERT_BY_DIALECT.get(dialect)
    if insert is None:
        raise RuntimeError(f"Unsupported database dialect for admin bootstrap: {dialect}")

    stmt = (
        insert(User)
        .values(
            username=settings.DEFAULT_ADMIN_USERNAME,
            email=settings.DEFAULT_ADMIN_EMAIL,
            password_hash=hash_password(settings.DEFAULT_ADMIN_PASSWORD),
            role="admin",
        )
        .on_conflict_do_nothing()
    )
    result = db.execute(stmt)
    db.commit()
    created = result.rowcount == 1
    if created:
        logger.info("Default admin user created (username: %s)", settings.DEFAULT_ADMIN_USERNAME)
    else:
        logger.info("Admin user already exists")
    return created
