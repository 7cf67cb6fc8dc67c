"""Test package: seed required settings before any app module is imported."""

import os

os.environ.setdefault("JWT_SECRET", "test-signing-secret-0123456789abcdef0123456789")
os.environ.setdefault("APP_ENV", "dev")
