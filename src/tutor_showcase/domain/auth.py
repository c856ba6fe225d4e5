"""Authorization domain models."""

from enum import Enum

from tutor_showcase.errors import InvalidRole


class Role(Enum):
    """Bot roles, ordered by permission level."""

    CONTENT_MANAGER = "content_manager"
    ADMIN = "admin"

    @property
    def level(self) -> int:
        return _ROLE_LEVELS[self]

    @classmethod
    def parse(cls, value: "str | Role") -> "Role":
        """Return the role for a name, raising InvalidRole when unknown."""
        if isinstance(value, Role):
            return value
        try:
            return cls(value.strip().lower())
        except ValueError as exc:
            raise InvalidRole(f"Unknown role: {value!r}") from exc


_ROLE_LEVELS = {Role.CONTENT_MANAGER: 1, Role.ADMIN: 2}


def role_satisfies(role: Role | None, required: Role) -> bool:
    """Return true when role is at or above the required level."""
    return role is not None and role.level >= required.level
