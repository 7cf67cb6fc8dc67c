"""Authenticator: turn a username/password pair into a trusted principal, or a failed result."""

from dataclasses import dataclass
from functools import lru_cache

from app.core.security import hash_password, verify_password
from app.services.identity import Principal, find_principal
from app.services.user_store import UserStore


@dataclass(frozen=True)
class AuthResult:
    """Outcome of authenticate(); truthy only when credentials were accepted."""

    success: bool
    principal: Principal | None = None

    def __bool__(self) -> bool:
        return self.success

    @classmethod
    def failed(cls) -> "AuthResult":
        return cls(success=False)


@lru_cache(maxsize=1)
def _dummy_hash() -> str:
    # Hashed once; compared against for unknown usernames so both failure paths cost a bcrypt check.
    return hash_password("unknown-user-placeholder")


def authenticate(store: UserStore, username: str, password: str) -> AuthResult:
    """
    Load the principal and verify the password.

    Unknown user and wrong password produce the same failed result.
    """
    principal = find_principal(store, username)
    if principal is None:
        verify_password(password, _dummy_hash())
        return AuthResult.failed()
    if not verify_password(password, principal.password_hash):
        return AuthResult.failed()
    return AuthResult(success=True, principal=principal)
