"""
Bearer token issuance and validation (HMAC-signed JWTs carrying role claims).

Tokens are stateless: nothing is stored server side, so validity is derived
only from the signature, the claims and the current time. Claims are signed,
not encrypted; anything placed in them is readable by the holder.
"""

from collections.abc import Callable, Sequence
from datetime import UTC, datetime, timedelta
from enum import Enum
from functools import lru_cache
from typing import Any

import jwt
from pydantic import ValidationError

from app.core.config import JWT_SECRET_MIN_BYTES, SUPPORTED_JWT_ALGORITHMS, get_settings
from app.schemas.auth import TokenClaims
from app.schemas.roles import DEFAULT_ROLE, Role

DEFAULT_TOKEN_LIFETIME = timedelta(hours=1)

REQUIRED_CLAIMS = ("sub", "roles", "iat", "exp")


class TokenDecodeError(Exception):
    """Raised when a token cannot be decoded: malformed, tampered or signed with another key."""

    def __init__(self, message: str, cause: Exception | None = None) -> None:
        self.message = message
        self.cause = cause
        super().__init__(message)


class InvalidTokenSignatureError(TokenDecodeError):
    """Raised when the signature or algorithm does not match the configured key."""


class TokenStatus(str, Enum):
    """Outcome of validating a token against an expected identity."""

    VALID = "valid"
    EXPIRED = "expired"
    SUBJECT_MISMATCH = "subject_mismatch"
    INVALID_SIGNATURE = "invalid_signature"
    MALFORMED = "malformed"

    @property
    def is_valid(self) -> bool:
        return self is TokenStatus.VALID

    def __bool__(self) -> bool:
        return self.is_valid


class Claim(str, Enum):
    """Selectors for extract_claim."""

    SUBJECT = "sub"
    ROLES = "roles"
    ISSUED_AT = "iat"
    EXPIRATION = "exp"


def _utcnow() -> datetime:
    return datetime.now(UTC)


class TokenService:
    """
    Mint and validate HMAC-signed bearer tokens.

    Configuration is fixed at construction. Instances hold no mutable state
    and can be shared across concurrent requests.
    """

    def __init__(
        self,
        secret: str | bytes,
        lifetime: timedelta = DEFAULT_TOKEN_LIFETIME,
        algorithm: str = "HS256",
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        key = secret.encode("utf-8") if isinstance(secret, str) else bytes(secret)
        if len(key) < JWT_SECRET_MIN_BYTES:
            raise ValueError(
                f"Signing secret must be at least {JWT_SECRET_MIN_BYTES} bytes for HMAC signing"
            )
        if algorithm not in SUPPORTED_JWT_ALGORITHMS:
            raise ValueError(
                f"Unsupported signing algorithm {algorithm!r}; use one of {SUPPORTED_JWT_ALGORITHMS}"
            )
        self._key = key
        self._lifetime = lifetime
        self._algorithm = algorithm
        self._clock = clock

    @property
    def lifetime(self) -> timedelta:
        return self._lifetime

    @property
    def algorithm(self) -> str:
        return self._algorithm

    def issue(self, identity: str, roles: Sequence[Role | str] = ()) -> str:
        """
        Issue a signed token for an authenticated identity.

        The roles claim is always a list. With no roles the token carries
        the default USER role rather than failing.
        """
        if not identity:
            raise ValueError("identity must be a non-empty string")
        names: list[str] = []
        for role in roles:
            name = role.value if isinstance(role, Role) else str(role)
            if name not in names:
                names.append(name)
        if not names:
            names = [DEFAULT_ROLE.value]

        issued_at = int(self._clock().timestamp())
        payload: dict[str, Any] = {
            "sub": identity,
            "roles": names,
            "iat": issued_at,
            "exp": issued_at + int(self._lifetime.total_seconds()),
        }
        return jwt.encode(payload, self._key, algorithm=self._algorithm)

    def decode(self, token: str) -> TokenClaims:
        """
        Verify the signature and return the claims, without checking expiry or subject.

        Raises InvalidTokenSignatureError on a bad signature or algorithm,
        TokenDecodeError on any other structural problem.
        """
        try:
            payload = jwt.decode(
                token,
                self._key,
                algorithms=[self._algorithm],
                options={
                    "verify_exp": False,
                    "verify_iat": False,
                    "verify_nbf": False,
                    "require": list(REQUIRED_CLAIMS),
                },
            )
        except (jwt.InvalidSignatureError, jwt.InvalidAlgorithmError) as e:
            raise InvalidTokenSignatureError("Token signature is invalid.", cause=e) from e
        except jwt.PyJWTError as e:
            raise TokenDecodeError("Token could not be decoded.", cause=e) from e
        try:
            return TokenClaims.model_validate(payload)
        except ValidationError as e:
            raise TokenDecodeError("Token claims are malformed.", cause=e) from e

    def extract_claim(self, token: str, selector: Claim) -> Any:
        """Return one verified claim. Timestamps are returned as aware UTC datetimes."""
        claims = self.decode(token)
        if selector is Claim.SUBJECT:
            return claims.sub
        if selector is Claim.ROLES:
            return list(claims.roles)
        if selector is Claim.ISSUED_AT:
            return datetime.fromtimestamp(claims.iat, tz=UTC)
        if selector is Claim.EXPIRATION:
            return datetime.fromtimestamp(claims.exp, tz=UTC)
        raise ValueError(f"Unknown claim selector: {selector!r}")

    def extract_username(self, token: str) -> str:
        return self.extract_claim(token, Claim.SUBJECT)

    def extract_expiration(self, token: str) -> datetime:
        return self.extract_claim(token, Claim.EXPIRATION)

    def is_token_expired(self, token: str) -> bool:
        """True once the current time has reached the expiration claim."""
        return self._clock() >= self.extract_expiration(token)

    def validate(self, token: str, expected_identity: str) -> TokenStatus:
        """
        Check signature, expiry and subject, in that order.

        Never raises for a bad token; the returned status says why it was rejected.
        """
        try:
            claims = self.decode(token)
        except InvalidTokenSignatureError:
            return TokenStatus.INVALID_SIGNATURE
        except TokenDecodeError:
            return TokenStatus.MALFORMED
        if self._clock().timestamp() >= claims.exp:
            return TokenStatus.EXPIRED
        if claims.sub != expected_identity:
            return TokenStatus.SUBJECT_MISMATCH
        return TokenStatus.VALID

    def is_token_valid(self, token: str, expected_identity: str) -> bool:
        return self.validate(token, expected_identity).is_valid


@lru_cache
def get_token_service() -> TokenService:
    """Process-wide token service built once from settings (FastAPI dependency)."""
    settings = get_settings()
    return TokenService(
        secret=settings.JWT_SECRET.get_secret_value(),
        lifetime=timedelta(minutes=settings.JWT_EXPIRE_MINUTES),
        algorithm=settings.JWT_ALGORITHM,
    )
