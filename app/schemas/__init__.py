"""Pydantic request/response schemas."""

from app.schemas.auth import (
    AuthResponse,
    CurrentUser,
    LoginRequest,
    RegisterRequest,
    TokenClaims,
    UserListItem,
    UsersListResponse,
)
from app.schemas.health import HealthResponse
from app.schemas.roles import DEFAULT_ROLE, Role

__all__ = [
    "AuthResponse",
    "CurrentUser",
    "DEFAULT_ROLE",
    "HealthResponse",
    "LoginRequest",
    "RegisterRequest",
    "Role",
    "TokenClaims",
    "UserListItem",
    "UsersListResponse",
]
