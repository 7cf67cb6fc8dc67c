"""Credential store: user lookups, existence checks and persistence over a SQLAlchemy session."""

import logging

from sqlalchemy import exists, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.models import User

logger = logging.getLogger(__name__)

USERNAME_TAKEN_MESSAGE = "Username is already taken"
EMAIL_TAKEN_MESSAGE = "Email is already registered"


class DuplicateUserError(Exception):
    """Raised when a username or email is already registered."""

    def __init__(self, field: str, message: str) -> None:
        self.field = field
        self.message = message
        super().__init__(message)

    @classmethod
    def username(cls) -> "DuplicateUserError":
        return cls("username", USERNAME_TAKEN_MESSAGE)

    @classmethod
    def email(cls) -> "DuplicateUserError":
        return cls("email", EMAIL_TAKEN_MESSAGE)


class UserStore:
    """Repository for User rows. One instance per request-scoped session."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def find_by_username(self, username: str) -> User | None:
        return self.session.scalars(
            select(User).where(User.username == username)
        ).first()

    def find_by_email(self, email: str) -> User | None:
        return self.session.scalars(select(User).where(User.email == email)).first()

    def exists_by_username(self, username: str) -> bool:
        return bool(self.session.scalar(select(exists().where(User.username == username))))

    def exists_by_email(self, email: str) -> bool:
        return bool(self.session.scalar(select(exists().where(User.email == email))))

    def list_users(self) -> list[User]:
        return list(self.session.scalars(select(User).order_by(User.id)))

    def save(self, user: User) -> User:
        """
        Persist a user and return it with its assigned id.

        The unique constraints on username/email are the final arbiter for
        concurrent registrations: a violation here becomes DuplicateUserError.
        Other integrity failures (e.g. the role check) propagate unchanged.
        """
        self.session.add(user)
        try:
            self.session.commit()
        except IntegrityError as e:
            self.session.rollback()
            logger.info(
                "User insert violated an integrity constraint",
                extra={"username": user.username},
            )
            if self.exists_by_username(user.username):
                raise DuplicateUserError.username() from e
            if self.exists_by_email(user.email):
                raise DuplicateUserError.email() from e
            raise
        self.session.refresh(user)
        return user
