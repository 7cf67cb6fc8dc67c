"""ORM models for application users and their granted roles."""

from sqlalchemy import CheckConstraint, Column, DateTime, ForeignKey, Integer, String, func
from sqlalchemy.orm import relationship

from app.models.base import Base
from app.schemas.roles import Role, role_names

ROLE_CHECK_SQL = "role IN ({})".format(", ".join(f"'{r.value}'" for r in Role))


class User(Base):
    """
    User account for JWT authentication.

    username and email are unique; password_hash is a bcrypt hash, never plaintext.
    Roles live in user_roles and are loaded together with the user.
    """

    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    username = Column(String(255), nullable=False, unique=True, index=True)
    email = Column(String(255), nullable=False, unique=True, index=True)
    password_hash = Column(String(255), nullable=False)
    created_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )

    role_grants = relationship(
        "UserRole",
        back_populates="user",
        cascade="all, delete-orphan",
        lazy="selectin",
    )

    @property
    def roles(self) -> list[str]:
        """Granted role names in declaration order (USER before ADMIN)."""
        return role_names(grant.role for grant in self.role_grants)

    def __repr__(self) -> str:
        return f"<User id={self.id} username={self.username!r}>"


class UserRole(Base):
    """One granted role for a user: 'USER' or 'ADMIN'."""

    __tablename__ = "user_roles"
    __table_args__ = (
        CheckConstraint(ROLE_CHECK_SQL, name="ck_user_roles_role"),
    )

    user_id = Column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        primary_key=True,
    )
    role = Column(String(32), primary_key=True)

    user = relationship("User", back_populates="role_grants")
