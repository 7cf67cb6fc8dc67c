"""Identity loader: adapt stored users into authentication principals."""

from dataclasses import dataclass

from app.models import User
from app.services.user_store import UserStore


class PrincipalNotFoundError(Exception):
    """Raised when no user exists for the requested username."""

    def __init__(self, username: str) -> None:
        self.username = username
        self.message = f"User not found: {username}"
        super().__init__(self.message)


@dataclass(frozen=True)
class Principal:
    """Identity, credential hash and granted roles of a stored user."""

    username: str
    password_hash: str
    roles: tuple[str, ...]


def principal_from_user(user: User) -> Principal:
    return Principal(
        username=user.username,
        password_hash=user.password_hash,
        roles=tuple(user.roles),
    )


def find_principal(store: UserStore, username: str) -> Principal | None:
    user = store.find_by_username(username)
    return principal_from_user(user) if user is not None else None


def load_principal(store: UserStore, username: str) -> Principal:
    """Load the principal for username; raises PrincipalNotFoundError if absent."""
    principal = find_principal(store, username)
    if principal is None:
        raise PrincipalNotFoundError(username)
    return principal
