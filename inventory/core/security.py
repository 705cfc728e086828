"""Password hashing and JWT creation/verification for authentication."""

from datetime import UTC, datetime, timedelta
from typing import Any, NewType

import bcrypt
import jwt
from pydantic import SecretStr

from inventory.core.config import settings
from inventory.schemas.auth import CurrentUser

# Stored form of a password. Only hash_password() produces one.
PasswordHash = NewType("PasswordHash", str)

# bcrypt only looks at the first 72 bytes of its input.
BCRYPT_MAX_BYTES = 72

INVALID_TOKEN_MESSAGE = "Invalid or expired token"

_REQUIRED_CLAIMS = ("sub", "username", "email", "role", "exp", "iat")


class TokenVerificationError(Exception):
    """Token could not be verified. Deliberately does not say why."""

    def __init__(self, message: str = INVALID_TOKEN_MESSAGE) -> None:
        self.message = message
        super().__init__(message)


def _password_bytes(password: SecretStr) -> bytes:
    return password.get_secret_value().encode("utf-8")[:BCRYPT_MAX_BYTES]


def hash_password(password: SecretStr) -> PasswordHash:
    """Hash a plain-text password for storage. Do not store plain passwords."""
    hashed = bcrypt.hashpw(
        _password_bytes(password),
        bcrypt.gensalt(rounds=settings.BCRYPT_ROUNDS),
    )
    return PasswordHash(hashed.decode("utf-8"))


def verify_password(password: SecretStr, hashed: PasswordHash | str) -> bool:
    """Verify a plain password against a stored hash."""
    try:
        return bcrypt.checkpw(_password_bytes(password), hashed.encode("utf-8"))
    except (ValueError, TypeError):
        return False


def create_access_token(identity: CurrentUser, *, now: datetime | None = None) -> str:
    """
    Create a signed JWT carrying the identity (sub, username, email, role) plus iat/exp.

    ``now`` pins the issuance time; it defaults to the current UTC time.
    """
    issued_at = now or datetime.now(UTC)
    payload: dict[str, Any] = {
        "sub": str(identity.id),
        "username": identity.username,
        "email": identity.email,
        "role": identity.role,
        "iat": issued_at,
        "exp": issued_at + timedelta(minutes=settings.JWT_EXPIRE_MINUTES),
    }
    return jwt.encode(
        payload,
        settings.JWT_SECRET.get_secret_value(),
        algorithm=settings.JWT_ALGORITHM,
    )


def verify_access_token(token: str) -> CurrentUser:
    """
    Check signature and expiry and return the identity the token carries.

    Raises TokenVerificationError on any failure: bad signature, expired,
    malformed, or missing claims all look the same to the caller.
    """
    try:
        payload = jwt.decode(
            token,
            settings.JWT_SECRET.get_secret_value(),
            algorithms=[settings.JWT_ALGORITHM],
            options={"require": list(_REQUIRED_CLAIMS)},
        )
        return CurrentUser(
            id=int(payload["sub"]),
            username=payload["username"],
            email=payload["email"],
            role=payload["role"],
        )
    except (jwt.PyJWTError, KeyError, TypeError, ValueError) as e:
        raise TokenVerificationError() from e
