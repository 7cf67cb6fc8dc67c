"""Register/login endpoints and bearer-token dependencies (get_current_user, require_admin)."""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from app.core.database import get_db
from app.core.tokens import TokenDecodeError, TokenService, get_token_service
from app.schemas.auth import (
    AuthResponse,
    CurrentUser,
    LoginRequest,
    RegisterRequest,
    UserListItem,
    UsersListResponse,
)
from app.schemas.roles import Role
from app.services.accounts import AuthenticationFailedError, login, register
from app.services.user_store import DuplicateUserError, UserStore

logger = logging.getLogger(__name__)
router = APIRouter()
security = HTTPBearer(auto_error=False)


def get_user_store(db: Annotated[Session, Depends(get_db)]) -> UserStore:
    """Dependency: request-scoped credential store."""
    return UserStore(db)


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


@router.post("/register", response_model=AuthResponse)
def post_register(
    body: RegisterRequest,
    store: Annotated[UserStore, Depends(get_user_store)],
    tokens: Annotated[TokenService, Depends(get_token_service)],
) -> AuthResponse:
    """
    Create an account with the default USER role and return a bearer token.
    Responds 400 when the username or email is already registered.
    """
    try:
        token = register(store, tokens, body.username, str(body.email), body.password)
    except DuplicateUserError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=e.message,
        ) from e
    return AuthResponse(token=token)


@router.post("/login", response_model=AuthResponse)
def post_login(
    body: LoginRequest,
    store: Annotated[UserStore, Depends(get_user_store)],
    tokens: Annotated[TokenService, Depends(get_token_service)],
) -> AuthResponse:
    """
    Authenticate with username and password; returns a JWT bearer token.
    Include the token in the Authorization header as: Bearer <token>
    """
    try:
        token = login(store, tokens, body.username, body.password)
    except AuthenticationFailedError as e:
        raise _unauthorized(e.message) from e
    return AuthResponse(token=token)


def get_current_user(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
    store: Annotated[UserStore, Depends(get_user_store)],
    tokens: Annotated[TokenService, Depends(get_token_service)],
) -> CurrentUser:
    """Dependency: require valid Bearer JWT and return the current user. Raises 401 if missing or invalid."""
    if credentials is None:
        raise _unauthorized("Not authenticated")
    token = credentials.credentials
    try:
        claims = tokens.decode(token)
    except TokenDecodeError as e:
        logger.info("Bearer token rejected", extra={"token_status": "undecodable"})
        raise _unauthorized("Invalid or expired token") from e

    token_status = tokens.validate(token, claims.sub)
    if not token_status.is_valid:
        logger.info("Bearer token rejected", extra={"token_status": token_status.value})
        raise _unauthorized("Invalid or expired token")

    user = store.find_by_username(claims.sub)
    if user is None:
        raise _unauthorized("User not found")
    # Authorization decisions use the roles the token was issued with.
    return CurrentUser(username=user.username, email=user.email, roles=claims.roles)


def require_admin(
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
) -> CurrentUser:
    """Dependency: require authenticated user with role 'ADMIN'. Raises 403 for non-admin."""
    if Role.ADMIN.value not in current_user.roles:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Admin access required",
        )
    return current_user


@router.get("/me", response_model=CurrentUser)
def get_me(
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
) -> CurrentUser:
    """Return the identity and roles carried by the caller's token."""
    return current_user


@router.get("/users", response_model=UsersListResponse)
def list_users(
    _admin: Annotated[CurrentUser, Depends(require_admin)],
    store: Annotated[UserStore, Depends(get_user_store)],
) -> UsersListResponse:
    """List all users (admin only)."""
    return UsersListResponse(
        users=[
            UserListItem(id=u.id, username=u.username, email=u.email, roles=u.roles)
            for u in store.list_users()
        ]
    )
