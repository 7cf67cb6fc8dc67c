"""Testing helpers."""

from collections.abc import Iterator
from contextlib import contextmanager
from datetime import UTC, datetime, timedelta

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from app.core.tokens import TokenService
from app.models import Base

TEST_SECRET = "unit-test-secret-with-at-least-32-bytes!!"


def make_engine() -> Engine:
    """In-memory SQLite engine shared across threads (TestClient runs handlers in a worker thread)."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    return engine


@contextmanager
def temporary_db() -> Iterator[Session]:
    """Provide a session over a fresh in-memory database."""
    engine = make_engine()
    session = sessionmaker(bind=engine, autoflush=False)()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(engine)
        engine.dispose()


class FrozenClock:
    """Callable clock for TokenService that only moves when told to."""

    def __init__(self, start: datetime | None = None) -> None:
        self.now = start or datetime(2025, 1, 1, 12, 0, 0, tzinfo=UTC)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, delta: timedelta) -> None:
        self.now = self.now + delta


def make_token_service(
    lifetime: timedelta = timedelta(hours=1),
    clock: FrozenClock | None = None,
    secret: str = TEST_SECRET,
) -> TokenService:
    return TokenService(secret=secret, lifetime=lifetime, clock=clock or FrozenClock())
