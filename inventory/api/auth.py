"""Registration, login and profile routes plus the auth dependencies (get_current_user, require_admin, require_self_or_admin)."""

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from inventory.core.database import get_db
from inventory.core.security import (
    TokenVerificationError,
    create_access_token,
    verify_access_token,
)
from inventory.core.validation import validated_body
from inventory.schemas.auth import (
    LOGIN_RULES,
    PROFILE_UPDATE_RULES,
    REGISTER_RULES,
    AuthResponse,
    CurrentUser,
    LoginRequest,
    MessageResponse,
    ProfileResponse,
    ProfileUpdateRequest,
    RegisterRequest,
    UserOut,
    UserProfile,
)
from inventory.services.users import (
    DuplicateCredentialError,
    InvalidCredentialsError,
    UserNotFoundError,
    authenticate,
    get_user,
    register_user,
    update_profile,
)

router = APIRouter()
security = HTTPBearer(auto_error=False)

register_body = validated_body(REGISTER_RULES, RegisterRequest)
login_body = validated_body(LOGIN_RULES, LoginRequest)
profile_update_body = validated_body(PROFILE_UPDATE_RULES, ProfileUpdateRequest)


def get_current_user(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
) -> CurrentUser:
    """
    Dependency: require a valid Bearer JWT and return the identity it carries.

    401 when no token is sent, 403 when the token is invalid or expired. The
    token alone decides; no session or user lookup is involved.
    """
    if credentials is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Access token required",
            headers={"WWW-Authenticate": "Bearer"},
        )
    try:
        return verify_access_token(credentials.credentials)
    except TokenVerificationError as e:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail=e.message,
        ) from e


def require_admin(
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
) -> CurrentUser:
    """Dependency: require authenticated user with role 'admin'. Raises 403 for non-admin."""
    if current_user.role != "admin":
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Admin access required",
        )
    return current_user


def require_self_or_admin(
    user_id: int,
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
) -> CurrentUser:
    """Dependency: admit admins, or the user named by the ``user_id`` path parameter."""
    if current_user.role != "admin" and current_user.id != user_id:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Access denied",
        )
    return current_user


def _auth_response(message: str, user: UserOut) -> AuthResponse:
    identity = CurrentUser(**user.model_dump())
    return AuthResponse(message=message, token=create_access_token(identity), user=user)


@router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
def register(
    body: Annotated[RegisterRequest, Depends(register_body)],
    db: Annotated[Session, Depends(get_db)],
) -> AuthResponse:
    """
    Create an account and return a token for it straight away.
    role is optional and defaults to 'user'.
    """
    try:
        user = register_user(db, body)
    except DuplicateCredentialError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=e.message) from e
    return _auth_response("User created successfully", UserOut.model_validate(user))


@router.post("/login", response_model=AuthResponse)
def login(
    body: Annotated[LoginRequest, Depends(login_body)],
    db: Annotated[Session, Depends(get_db)],
) -> AuthResponse:
    """
    Authenticate with username and password; returns a JWT access token.
    Include the token in the Authorization header as: Bearer <token>
    """
    try:
        user = authenticate(db, body.username, body.password)
    except InvalidCredentialsError as e:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid credentials",
        ) from e
    # Claims come from the stored row, so a role change takes effect at next login.
    return _auth_response("Login successful", UserOut.model_validate(user))


@router.get("/profile", response_model=ProfileResponse)
def get_profile(
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
) -> ProfileResponse:
    """Return the stored record of the authenticated user."""
    try:
        user = get_user(db, current_user.id)
    except UserNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found") from e
    return ProfileResponse(user=UserProfile.model_validate(user))


@router.put("/profile", response_model=MessageResponse)
def put_profile(
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
    body: Annotated[ProfileUpdateRequest, Depends(profile_update_body)],
    db: Annotated[Session, Depends(get_db)],
) -> MessageResponse:
    """Change email and/or password of the authenticated user."""
    try:
        update_profile(db, current_user.id, body)
    except UserNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found") from e
    except DuplicateCredentialError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=e.message) from e
    return MessageResponse(message="Profile updated successfully")
