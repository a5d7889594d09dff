"""Role table and access check.

Invariants:
    - No roles -> everyone, including anonymous callers
    - Roles but no user -> denied
    - "Any" -> every authenticated user
    - Otherwise the user's role must be listed
"""

from types import SimpleNamespace

import pytest

from eats.api.v1.roles import ANY, can_activate, OPERATION_ROLES
from eats.models.user import UserRole

USERS = [SimpleNamespace(id=1, role=role) for role in UserRole]

ROLE_SETS = [
    ["Client"],
    ["Owner"],
    ["Delivery"],
    ["Owner", "Delivery"],
    ["Client", "Owner", "Delivery"],
]


@pytest.mark.parametrize("user", USERS + [None])
def test_public_operation_allows_everyone(user):
    assert can_activate(None, user) is True


@pytest.mark.parametrize("roles", ROLE_SETS + [[ANY]])
def test_guarded_operation_denies_anonymous(roles):
    assert can_activate(roles, None) is False


@pytest.mark.parametrize("user", USERS)
@pytest.mark.parametrize("roles", [[ANY], [ANY, "Owner"], ["Client", ANY]])
def test_any_allows_every_user(roles, user):
    assert can_activate(roles, user) is True


@pytest.mark.parametrize("user", USERS)
@pytest.mark.parametrize("roles", ROLE_SETS)
def test_role_must_be_listed(roles, user):
    assert can_activate(roles, user) is (user.role.value in roles)


def test_role_table_only_names_known_roles():
    known = {role.value for role in UserRole} | {ANY}
    for operation, roles in OPERATION_ROLES.items():
        assert roles, operation
        assert set(roles) <= known, operation


def test_public_operations_are_absent_from_table():
    for operation in ("create_account", "login", "verify_email", "all_restaurants", "search_restaurant"):
        assert operation not in OPERATION_ROLES
