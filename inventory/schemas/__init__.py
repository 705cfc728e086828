"""Pydantic request/response schemas."""

from inventory.schemas.auth import (
    AuthResponse,
    CurrentUser,
    LoginRequest,
    MessageResponse,
    ProfileResponse,
    ProfileUpdateRequest,
    RegisterRequest,
    UserOut,
    UserProfile,
    UsersListResponse,
)
from inventory.schemas.health import HealthResponse
from inventory.schemas.product import (
    ProductCreate,
    ProductDetailResponse,
    ProductListResponse,
    ProductOut,
    ProductResponse,
    ProductUpdate,
)

__all__ = [
    "AuthResponse",
    "CurrentUser",
    "HealthResponse",
    "LoginRequest",
    "MessageResponse",
    "ProductCreate",
    "ProductDetailResponse",
    "ProductListResponse",
    "ProductOut",
    "ProductResponse",
    "ProductUpdate",
    "ProfileResponse",
    "ProfileUpdateRequest",
    "RegisterRequest",
    "UserOut",
    "UserProfile",
    "UsersListResponse",
]
