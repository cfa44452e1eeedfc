"""Tests for the permission resolver."""

import logging

import pytest

from rbac_core.authz import (
    ALL_PERMISSIONS,
    MALFORMED_PERMISSION,
    Permission,
    PermissionAnomaly,
    RoleSnapshot,
    UnauthenticatedError,
    UserSnapshot,
    effective_permissions,
    has_all_permissions,
    has_any_permission,
    has_permission,
)


def _role(role_id: str, *permissions, department_id: str | None = None) -> RoleSnapshot:
    return RoleSnapshot.from_record(
        id=role_id,
        name=f"role {role_id}",
        department_id=department_id,
        permissions=list(permissions),
    )


def _user(*roles: RoleSnapshot, superadmin: bool = False) -> UserSnapshot:
    return UserSnapshot(id="u-1", is_superadmin=superadmin, roles=roles)


def test_single_role_scenario():
    user = _user(_role("r1", Permission.VIEW_USERS, department_id="dept-A"))

    assert has_permission(user, Permission.VIEW_USERS) is True
    assert has_permission(user, Permission.MANAGE_USERS) is False


def test_permission_may_be_given_as_string_value():
    user = _user(_role("r1", "view_users"))
    assert has_permission(user, "view_users") is True
    assert has_permission(user, "manage_users") is False


def test_unknown_requested_permission_is_denied():
    user = _user(_role("r1", Permission.VIEW_USERS))
    assert has_permission(user, "launch_rockets") is False


def test_effective_permissions_is_union_of_roles():
    user = _user(
        _role("r1", Permission.VIEW_USERS, department_id="dept-A"),
        _role("r2", Permission.VIEW_ALL_DEPARTMENTS),
    )
    assert effective_permissions(user) == {Permission.VIEW_USERS, Permission.VIEW_ALL_DEPARTMENTS}


def test_user_without_roles_holds_nothing():
    user = _user()
    assert effective_permissions(user) == frozenset()
    assert not any(has_permission(user, p) for p in Permission)


def test_superadmin_holds_every_permission():
    user = _user(superadmin=True)
    assert effective_permissions(user) == ALL_PERMISSIONS
    for permission in Permission:
        assert has_permission(user, permission) is True


def test_superadmin_short_circuits_before_roles_are_read():
    class ExplodingRoles(tuple):
        def __iter__(self):
            raise AssertionError("roles must not be inspected for superadmins")

    user = UserSnapshot(id="root", is_superadmin=True, roles=ExplodingRoles())
    assert has_permission(user, Permission.MANAGE_USERS) is True
    assert effective_permissions(user) == ALL_PERMISSIONS


def test_adding_roles_never_removes_permissions():
    roles = [
        _role("r1", Permission.VIEW_USERS),
        _role("r2", Permission.MANAGE_USERS, "DOES_NOT_EXIST"),
        _role("r3"),
        _role("r4", Permission.VIEW_USERS, Permission.LOG_TIME, department_id="dept-B"),
    ]
    previous: frozenset = frozenset()
    for count in range(len(roles) + 1):
        current = effective_permissions(_user(*roles[:count]))
        assert previous <= current
        previous = current


def test_unknown_permission_is_reported_and_excluded(caplog):
    reported: list[PermissionAnomaly] = []
    user = _user(
        _role("r1", "DOES_NOT_EXIST", Permission.VIEW_USERS),
        _role("r2", Permission.LOG_TIME),
    )

    with caplog.at_level(logging.WARNING, logger="rbac_core.authz.resolver"):
        assert has_permission(user, Permission.VIEW_USERS, on_anomaly=reported.append) is True
        assert has_permission(user, Permission.LOG_TIME) is True
        assert has_permission(user, Permission.MANAGE_USERS) is False

    assert effective_permissions(user) == {Permission.VIEW_USERS, Permission.LOG_TIME}
    assert reported == [PermissionAnomaly(role_id="r1", role_name="role r1", identifier="DOES_NOT_EXIST")]
    assert "DOES_NOT_EXIST" in caplog.text


def test_mapping_permission_bag_only_grants_true_entries():
    role = RoleSnapshot.from_record(
        id="r1",
        name="mixed",
        permissions={"view_users": True, "manage_users": False, "log_time": "yes"},
    )
    assert role.permissions == {"view_users"}
    assert role.malformed_permissions == {"log_time"}
    assert effective_permissions(_user(role)) == {Permission.VIEW_USERS}


def test_non_boolean_value_is_reported_and_not_granted(caplog):
    reported: list[PermissionAnomaly] = []
    role = RoleSnapshot.from_record(id="r1", name="stringly", permissions={"view_users": "true", "log_time": 1})

    with caplog.at_level(logging.WARNING, logger="rbac_core.authz.resolver"):
        assert has_permission(_user(role), Permission.VIEW_USERS, on_anomaly=reported.append) is False

    assert role.permissions == frozenset()
    assert reported == [
        PermissionAnomaly(role_id="r1", role_name="stringly", identifier="log_time", kind=MALFORMED_PERMISSION),
        PermissionAnomaly(role_id="r1", role_name="stringly", identifier="view_users", kind=MALFORMED_PERMISSION),
    ]
    assert "malformed permission entry" in caplog.text


def test_list_bag_entries_that_are_not_identifiers_are_malformed():
    role = RoleSnapshot.from_record(id="r1", name="listed", permissions=["view_users", 7, None])
    assert role.permissions == {"view_users"}
    assert role.malformed_permissions == {"7", "None"}
    assert role.permissions_valid is True


@pytest.mark.parametrize("bag", ["view_users", b"view_users", 42, True])
def test_bag_that_is_not_a_mapping_or_list_grants_nothing(bag, caplog):
    role = RoleSnapshot.from_record(id="r1", name="garbled", permissions=bag)

    with caplog.at_level(logging.WARNING, logger="rbac_core.authz.resolver"):
        assert effective_permissions(_user(role)) == frozenset()

    assert role.permissions_valid is False
    assert "invalid permission bag" in caplog.text


def test_platform_permissions_resolve_without_anomalies():
    reported: list[PermissionAnomaly] = []
    role = RoleSnapshot.from_record(
        id="r1", name="board", permissions={"view_kanban": True, "edit_own_time_entries": True}
    )

    assert has_permission(_user(role), Permission.VIEW_KANBAN, on_anomaly=reported.append) is True
    assert reported == []


def test_any_and_all_permissions():
    user = _user(_role("r1", Permission.VIEW_USERS, Permission.LOG_TIME))

    assert has_any_permission(user, [Permission.MANAGE_USERS, Permission.LOG_TIME]) is True
    assert has_any_permission(user, [Permission.MANAGE_USERS]) is False
    assert has_any_permission(user, []) is False
    assert has_all_permissions(user, [Permission.VIEW_USERS, Permission.LOG_TIME]) is True
    assert has_all_permissions(user, [Permission.VIEW_USERS, Permission.MANAGE_USERS]) is False
    assert has_all_permissions(user, []) is True


def test_any_and_all_log_unknown_requested_permissions(caplog):
    user = _user(_role("r1", Permission.VIEW_USERS))

    with caplog.at_level(logging.WARNING, logger="rbac_core.authz.resolver"):
        assert has_any_permission(user, [Permission.VIEW_USERS, "launch_rockets"]) is True
        assert has_all_permissions(user, [Permission.VIEW_USERS, "warp_drive"]) is False

    assert "launch_rockets" in caplog.text
    assert "warp_drive" in caplog.text


def test_any_and_all_permissions_superadmin():
    user = _user(superadmin=True)
    assert has_any_permission(user, []) is True
    assert has_all_permissions(user, list(Permission)) is True


def test_repeated_queries_are_identical():
    user = _user(_role("r1", Permission.VIEW_USERS, "bogus"), _role("r2", Permission.MANAGE_USERS))
    first = [has_permission(user, p) for p in Permission]
    second = [has_permission(user, p) for p in Permission]
    assert first == second
    assert effective_permissions(user) == effective_permissions(user)


@pytest.mark.parametrize(
    "call",
    [
        lambda: has_permission(None, Permission.VIEW_USERS),
        lambda: effective_permissions(None),
        lambda: has_any_permission(None, [Permission.VIEW_USERS]),
        lambda: has_all_permissions(None, [Permission.VIEW_USERS]),
    ],
)
def test_missing_user_is_rejected(call):
    with pytest.raises(UnauthenticatedError):
        call()
