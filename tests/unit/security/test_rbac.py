"""Access policy: branch scope and field visibility per role."""

import pytest

from app.domain.models.audit import Actor
from app.security.exceptions import ForbiddenError
from app.security.rbac import AccessPolicy, Role, resolve_role


@pytest.fixture
def policy():
    return AccessPolicy()


# Visibility matrix:
# Role            Branch scope   ip_address
# SUPER_ADMIN     any / all      ✓
# BRANCH_MANAGER  own only       ✗
# (other)         denied


def test_super_admin_scope_follows_request(policy):
    admin = Actor(user_id="u-0", role="super_admin")
    assert policy.resolve_branch_scope(admin, None) is None
    assert policy.resolve_branch_scope(admin, "") is None
    assert policy.resolve_branch_scope(admin, "b-3") == "b-3"


def test_branch_manager_pinned_to_own_branch(policy):
    manager = Actor(user_id="u-1", role="branch_manager", branch_id="b-1")
    assert policy.resolve_branch_scope(manager, None) == "b-1"
    assert policy.resolve_branch_scope(manager, "b-2") == "b-1"


def test_branch_manager_without_branch_denied(policy):
    with pytest.raises(ForbiddenError):
        policy.resolve_branch_scope(Actor(user_id="u-1", role="branch_manager"), None)


def test_other_roles_denied(policy):
    with pytest.raises(ForbiddenError):
        policy.resolve_branch_scope(Actor(user_id="u-5", role="instructor", branch_id="b-1"), None)
    with pytest.raises(ForbiddenError):
        policy.visible_fields("student")


def test_raw_ip_only_for_super_admin(policy):
    assert policy.can_view_raw_ip("super_admin") is True
    assert policy.can_view_raw_ip("branch_manager") is False
    assert "ip_masked" in policy.visible_fields("branch_manager")


def test_resolve_role():
    assert resolve_role("super_admin") is Role.SUPER_ADMIN
    with pytest.raises(ForbiddenError):
        resolve_role("SUPER_ADMIN")
