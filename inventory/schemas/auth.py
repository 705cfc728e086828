"""Request/response schemas and validation rules for auth and user endpoints."""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, EmailStr, Field, SecretStr
from pydantic.alias_generators import to_camel

from inventory.core.validation import RuleSet, email, field, min_length, non_empty, one_of

Role = Literal["user", "admin"]

USERNAME_MIN_LEN = 3
PASSWORD_MIN_LEN = 6

REGISTER_RULES = RuleSet(
    field("username", min_length(USERNAME_MIN_LEN, "Username must be at least 3 characters")),
    field("email", email("Please enter a valid email")),
    field("password", min_length(PASSWORD_MIN_LEN, "Password must be at least 6 characters")),
    field("role", one_of(("user", "admin"), "Role must be either user or admin"), optional=True),
)

LOGIN_RULES = RuleSet(
    field("username", non_empty("Username is required")),
    field("password", non_empty("Password is required")),
)

PROFILE_UPDATE_RULES = RuleSet(
    field("email", email("Please enter a valid email"), optional=True),
    field(
        "password",
        min_length(PASSWORD_MIN_LEN, "Password must be at least 6 characters"),
        optional=True,
    ),
)


class RegisterRequest(BaseModel):
    """New account details. role defaults to 'user'."""

    username: str = Field(..., min_length=USERNAME_MIN_LEN, max_length=255)
    email: EmailStr
    password: SecretStr
    role: Role = "user"


class LoginRequest(BaseModel):
    """Credentials for login."""

    username: str = Field(..., min_length=1, max_length=255, description="Username")
    password: SecretStr = Field(..., description="Password")


class ProfileUpdateRequest(BaseModel):
    """Partial profile update; only fields present in the request are changed."""

    email: EmailStr | None = None
    password: SecretStr | None = None


class CurrentUser(BaseModel):
    """Authenticated identity carried by a token (id, username, email, role)."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    username: str
    email: str
    role: Role


class UserOut(BaseModel):
    """Public user fields returned with a token (no password)."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    username: str
    email: str
    role: Role


class UserProfile(UserOut):
    """Stored user record as shown to its owner or an admin."""

    model_config = ConfigDict(
        from_attributes=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )

    created_at: datetime | None = None
    updated_at: datetime | None = None


class AuthResponse(BaseModel):
    """Token plus user, returned after registration or login."""

    message: str
    token: str = Field(..., description="JWT; send as Authorization: Bearer <token>")
    user: UserOut


class ProfileResponse(BaseModel):
    user: UserProfile


class MessageResponse(BaseModel):
    message: str


class UsersListResponse(BaseModel):
    """Response for GET /users (admin only)."""

    users: list[UserProfile]
