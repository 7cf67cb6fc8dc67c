"""Registration and login: compose the store, hasher, authenticator and token service."""

import logging
from collections.abc import Iterable

from app.core.security import hash_password
from app.core.tokens import TokenService
from app.models import User, UserRole
from app.schemas.roles import DEFAULT_ROLE, Role, role_names
from app.services.authentication import authenticate
from app.services.identity import load_principal
from app.services.user_store import DuplicateUserError, UserStore

logger = logging.getLogger(__name__)

AUTHENTICATION_FAILED_MESSAGE = "Invalid username or password."


class AuthenticationFailedError(Exception):
    """Raised when login credentials are rejected. Does not say which factor failed."""

    def __init__(self, message: str = AUTHENTICATION_FAILED_MESSAGE) -> None:
        self.message = message
        super().__init__(message)


def create_user(
    store: UserStore,
    username: str,
    email: str,
    password: str,
    roles: Iterable[Role | str] = (DEFAULT_ROLE,),
) -> User:
    """
    Create and persist a user after the uniqueness checks.

    Both existence checks run; a username conflict is reported ahead of an email conflict.
    Roles must be a non-empty selection from Role; anything else raises ValueError.
    """
    granted = role_names(Role(role) for role in roles)
    if not granted:
        raise ValueError("A user must be granted at least one role")

    username_taken = store.exists_by_username(username)
    email_taken = store.exists_by_email(email)
    if username_taken:
        raise DuplicateUserError.username()
    if email_taken:
        raise DuplicateUserError.email()

    user = User(
        username=username,
        email=email,
        password_hash=hash_password(password),
        role_grants=[UserRole(role=name) for name in granted],
    )
    return store.save(user)


def register(
    store: UserStore,
    tokens: TokenService,
    username: str,
    email: str,
    password: str,
) -> str:
    """Register a user with the default USER role and return a token for them."""
    try:
        user = create_user(store, username, email, password)
    except DuplicateUserError as e:
        logger.info(
            "Registration rejected",
            extra={"reason": "duplicate", "field": e.field},
        )
        raise
    principal = load_principal(store, user.username)
    logger.info("User registered", extra={"username": principal.username})
    return tokens.issue(principal.username, principal.roles)


def login(store: UserStore, tokens: TokenService, username: str, password: str) -> str:
    """Authenticate credentials and return a token; raises AuthenticationFailedError otherwise."""
    result = authenticate(store, username, password)
    if not result:
        logger.info("Login failed", extra={"username": username})
        raise AuthenticationFailedError()
    principal = result.principal
    logger.info("Login succeeded", extra={"username": principal.username})
    return tokens.issue(principal.username, principal.roles)
