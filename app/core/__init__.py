"""Core app configuration, database sessions and the token service."""

from app.core.config import get_settings, settings
from app.core.database import get_db
from app.core.tokens import TokenService, TokenStatus, get_token_service

__all__ = [
    "TokenService",
    "TokenStatus",
    "get_db",
    "get_settings",
    "get_token_service",
    "settings",
]
