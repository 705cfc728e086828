"""User directory routes: admins list everyone, users may read their own record."""

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from inventory.api.auth import require_admin, require_self_or_admin
from inventory.core.database import get_db
from inventory.schemas.auth import CurrentUser, ProfileResponse, UserProfile, UsersListResponse
from inventory.services.users import UserNotFoundError, get_user, list_users

router = APIRouter()


@router.get("", response_model=UsersListResponse)
def get_users(
    _admin: Annotated[CurrentUser, Depends(require_admin)],
    db: Annotated[Session, Depends(get_db)],
) -> UsersListResponse:
    """List all users (admin only)."""
    return UsersListResponse(users=[UserProfile.model_validate(u) for u in list_users(db)])


@router.get("/{user_id}", response_model=ProfileResponse)
def get_user_by_id(
    user_id: int,
    _user: Annotated[CurrentUser, Depends(require_self_or_admin)],
    db: Annotated[Session, Depends(get_db)],
) -> ProfileResponse:
    """Return one user's record to that user or to an admin."""
    try:
        user = get_user(db, user_id)
    except UserNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found") from e
    return ProfileResponse(user=UserProfile.model_validate(user))
