"""Role-based access policy for the audit surfaces. No FastAPI."""

from enum import Enum
from typing import FrozenSet, Optional

from app.domain.models.audit import Actor
from app.security.exceptions import ForbiddenError


class Role(Enum):
    SUPER_ADMIN = "super_admin"
    BRANCH_MANAGER = "branch_manager"


# Visibility matrix:
# Role            Branch scope   ip_address   ip_masked
# SUPER_ADMIN     any / all      ✓            ✓
# BRANCH_MANAGER  own only       ✗            ✓
# (other)         denied

BASE_VISIBLE_FIELDS: FrozenSet[str] = frozenset(
    {
        "id",
        "created_at",
        "actor_user_id",
        "actor_role",
        "actor_name",
        "branch_id",
        "branch_name",
        "action",
        "entity_type",
        "entity_id",
        "summary_key",
        "summary_params",
        "summary",
        "before_data",
        "after_data",
        "metadata",
        "ip_masked",
        "user_agent",
        "device_name",
        "os_name",
        "browser_name",
        "is_mobile",
    }
)

PRIVILEGED_FIELDS: FrozenSet[str] = frozenset({"ip_address"})

_VISIBLE_FIELDS: dict[Role, FrozenSet[str]] = {
    Role.SUPER_ADMIN: BASE_VISIBLE_FIELDS | PRIVILEGED_FIELDS,
    Role.BRANCH_MANAGER: BASE_VISIBLE_FIELDS,
}


def resolve_role(role: str) -> Role:
    """Map a profile role label onto an audit role. Raises ForbiddenError for any other role."""
    try:
        return Role(role)
    except ValueError:
        raise ForbiddenError(
            f"Role '{role}' does not have access to the audit trail"
        ) from None


class AccessPolicy:
    """
    Pure decisions over (role, requested scope). Scoping is enforced here, not only in the UI:
    a branch-scoped caller never widens or moves its scope by asking for another branch.
    """

    def resolve_branch_scope(self, actor: Actor, requested_branch_id: Optional[str]) -> Optional[str]:
        """
        Return the branch a query may span; None means all branches.
        Raises ForbiddenError for roles without audit access or a branch-scoped caller with no branch.
        """
        role = resolve_role(actor.role)
        if role is Role.SUPER_ADMIN:
            return requested_branch_id or None
        if not actor.branch_id:
            raise ForbiddenError(
                f"Role '{actor.role}' requires a branch assignment to read the audit trail"
            )
        return actor.branch_id

    def visible_fields(self, role: str) -> FrozenSet[str]:
        return _VISIBLE_FIELDS[resolve_role(role)]

    def can_view_raw_ip(self, role: str) -> bool:
        return "ip_address" in self.visible_fields(role)
