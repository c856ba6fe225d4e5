"""Authorization registry for bot users."""

import logging
from dataclasses import dataclass, field

from tutor_showcase.domain.auth import Role, role_satisfies
from tutor_showcase.errors import PermissionDenied

logger = logging.getLogger(__name__)


@dataclass
class AuthorizationRegistry:
    """Maps Telegram user ids to roles.

    The registry lives in process memory only. Users added at runtime are lost
    on restart; durable additions belong in the configured seed list.
    """

    users_by_id: dict[int, Role] = field(default_factory=dict)

    def is_authorized(self, user_id: int) -> bool:
        return user_id in self.users_by_id

    def role_of(self, user_id: int) -> Role | None:
        return self.users_by_id.get(user_id)

    def has_at_least(self, user_id: int, required_role: Role) -> bool:
        """Return true when the user's role satisfies the required role."""
        return role_satisfies(self.role_of(user_id), required_role)

    def add_user(
        self, requesting_user_id: int, target_user_id: int, role: Role | str
    ) -> Role:
        """Authorize a user with a role on behalf of an admin."""
        if not self.has_at_least(requesting_user_id, Role.ADMIN):
            raise PermissionDenied(
                f"User {requesting_user_id} cannot add users"
            )
        resolved = Role.parse(role)
        self.users_by_id[target_user_id] = resolved
        logger.info(
            "Authorized user",
            extra={
                "requested_by": requesting_user_id,
                "target_user_id": target_user_id,
                "role": resolved.value,
            },
        )
        return resolved

    def users(self) -> dict[int, Role]:
        """Return a snapshot of the registry."""
        return dict(self.users_by_id)
