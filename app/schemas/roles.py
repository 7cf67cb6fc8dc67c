"""Closed set of application roles and helpers for ordering them."""

from collections.abc import Iterable
from enum import Enum


class Role(str, Enum):
    """Application role. The value is the name carried in the token's roles claim."""

    USER = "USER"
    ADMIN = "ADMIN"


DEFAULT_ROLE = Role.USER

# Declaration order; used wherever a deterministic role sequence is needed.
_ROLE_RANK: dict[str, int] = {role.value: i for i, role in enumerate(Role)}


def role_names(roles: Iterable[Role | str]) -> list[str]:
    """Return unique role names, ordered by declaration order (unknown names last)."""
    names = {r.value if isinstance(r, Role) else str(r) for r in roles}
    return sorted(names, key=lambda name: (_ROLE_RANK.get(name, len(_ROLE_RANK)), name))
