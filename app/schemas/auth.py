"""Request/response schemas for auth endpoints and the token claim set."""

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator

USERNAME_MAX_LEN = 255
PASSWORD_MAX_LEN = 128


def _not_blank(value: str) -> str:
    """Reject empty or whitespace-only strings."""
    if not value or not value.strip():
        raise ValueError("must not be blank")
    return value


class RegisterRequest(BaseModel):
    """New account: username, email and plaintext password (hashed before storage)."""

    username: str = Field(..., max_length=USERNAME_MAX_LEN, description="Unique username")
    email: EmailStr = Field(..., description="Unique email address")
    password: str = Field(..., max_length=PASSWORD_MAX_LEN, description="Password")

    @field_validator("username", "password")
    @classmethod
    def validate_not_blank(cls, v: str) -> str:
        return _not_blank(v)


class LoginRequest(BaseModel):
    """Credentials for login."""

    username: str = Field(..., max_length=USERNAME_MAX_LEN, description="Username")
    password: str = Field(..., max_length=PASSWORD_MAX_LEN, description="Password")

    @field_validator("username", "password")
    @classmethod
    def validate_not_blank(cls, v: str) -> str:
        return _not_blank(v)


class AuthResponse(BaseModel):
    """Signed bearer token returned after registration or login."""

    token: str = Field(..., description="JWT bearer token")


class TokenClaims(BaseModel):
    """
    Verified JWT claim set: subject, role names and epoch-second timestamps.

    Issued tokens carry whole seconds, but NumericDate may be fractional, so both are accepted.
    """

    model_config = ConfigDict(extra="ignore")

    sub: str = Field(..., min_length=1)
    roles: list[str]
    iat: float
    exp: float


class CurrentUser(BaseModel):
    """Authenticated user resolved from a bearer token."""

    username: str
    email: str
    roles: list[str]


class UserListItem(BaseModel):
    """User entry for admin list (no password hash)."""

    id: int
    username: str
    email: str
    roles: list[str]


class UsersListResponse(BaseModel):
    """Response for GET /auth/users (admin only)."""

    users: list[UserListItem]
