"""
RBAC diagnostics report.

Joins users, roles and departments into a read-only view for administrators,
with per-role usage counts computed in a single pass over the assignments,
plus a pass/fail integrity check over the same snapshot.

Precondition: the caller has already authorized the request (admin level or
`manage_users`). This module does not check it again.
"""

from __future__ import annotations

from collections import Counter
from collections.abc import Iterable, Mapping
from dataclasses import dataclass

from .catalog import lookup_permission
from .snapshot import DepartmentRef, RoleSnapshot, UserSnapshot

NO_DEPARTMENT = "No department"


@dataclass(frozen=True)
class RoleAssignment:
    role_id: str
    role_name: str | None
    department_id: str | None
    department_name: str


@dataclass(frozen=True)
class UserDiagnostics:
    id: str
    name: str | None
    email: str | None
    is_superadmin: bool
    assignments: tuple[RoleAssignment, ...]


@dataclass(frozen=True)
class RoleDiagnostics:
    id: str
    name: str | None
    department_id: str | None
    department_name: str
    permissions: tuple[str, ...]
    """Raw identifiers as stored on the role, sorted."""

    unknown_permissions: tuple[str, ...]
    """Identifiers outside the permission catalog (integrity anomalies)."""

    malformed_permissions: tuple[str, ...]
    """Keys stored with a value other than true/false (integrity anomalies)."""

    user_count: int


@dataclass(frozen=True)
class DiagnosticsReport:
    users: tuple[UserDiagnostics, ...]
    roles: tuple[RoleDiagnostics, ...]

    def to_dict(self) -> dict[str, object]:
        """Return a JSON-serializable dict with the report's ordering preserved."""
        return {
            "users": [
                {
                    "id": u.id,
                    "name": u.name,
                    "email": u.email,
                    "is_superadmin": u.is_superadmin,
                    "assignments": [
                        {
                            "role_id": a.role_id,
                            "role_name": a.role_name,
                            "department_id": a.department_id,
                            "department_name": a.department_name,
                        }
                        for a in u.assignments
                    ],
                }
                for u in self.users
            ],
            "roles": [
                {
                    "id": r.id,
                    "name": r.name,
                    "department_id": r.department_id,
                    "department_name": r.department_name,
                    "permissions": list(r.permissions),
                    "unknown_permissions": list(r.unknown_permissions),
                    "malformed_permissions": list(r.malformed_permissions),
                    "user_count": r.user_count,
                }
                for r in self.roles
            ],
        }


def build_diagnostics_report(
    users: Iterable[UserSnapshot],
    roles: Iterable[RoleSnapshot],
    departments: Iterable[DepartmentRef] = (),
) -> DiagnosticsReport:
    """
    Build the diagnostics report from a full users/roles/departments snapshot.

    Users and roles are ordered by (name, id), each user's assignments by
    (role name, role id), with a missing name sorting first. Successive
    reports over the same data compare equal and diff cleanly.
    """

    department_names = {d.id: d.name for d in departments}
    user_list = list(users)

    # A user holding the same role twice still counts once.
    usage = Counter(role_id for user in user_list for role_id in user.role_ids)

    user_rows = tuple(
        UserDiagnostics(
            id=user.id,
            name=user.name,
            email=user.email,
            is_superadmin=user.is_superadmin,
            assignments=_assignments(user, department_names),
        )
        for user in sorted(user_list, key=lambda u: (u.name or "", u.id))
    )

    role_rows = tuple(
        RoleDiagnostics(
            id=role.id,
            name=role.name,
            department_id=role.department_id,
            department_name=_department_name(role, department_names),
            permissions=tuple(sorted(role.permissions)),
            unknown_permissions=tuple(sorted(p for p in role.permissions if lookup_permission(p) is None)),
            malformed_permissions=tuple(sorted(role.malformed_permissions)),
            user_count=usage.get(role.id, 0),
        )
        for role in sorted(roles, key=lambda r: (r.name or "", r.id))
    )

    return DiagnosticsReport(users=user_rows, roles=role_rows)


@dataclass(frozen=True)
class IntegrityReport:
    total: int
    passed: int
    failures: tuple[str, ...]
    """One message per failed check, in check order."""

    @property
    def failed(self) -> int:
        return self.total - self.passed

    @property
    def all_passed(self) -> bool:
        return not self.failures

    def to_dict(self) -> dict[str, object]:
        return {
            "all_passed": self.all_passed,
            "total": self.total,
            "passed": self.passed,
            "failed": self.failed,
            "failures": list(self.failures),
        }


def check_integrity(users: Iterable[UserSnapshot], roles: Iterable[RoleSnapshot]) -> IntegrityReport:
    """
    Run the RBAC data-integrity checks over a full users/roles snapshot.

    Checks, in order:
    - every role's permission bag is a mapping or list;
    - every non-superadmin user has at least one role;
    - every role assignment references a role in `roles`;
    - no role stores a permission value other than true/false.
    """

    user_list = list(users)
    role_list = list(roles)
    role_ids = {role.id for role in role_list}

    invalid_bags = sum(1 for role in role_list if not role.permissions_valid)
    without_roles = sum(1 for user in user_list if not user.is_superadmin and not user.roles)
    dangling = sum(1 for user in user_list for role_id in user.role_ids if role_id not in role_ids)
    non_boolean = sum(1 for role in role_list if role.malformed_permissions or not role.permissions_valid)

    checks = (
        (invalid_bags, f"{invalid_bags} role(s) have invalid permissions structure"),
        (without_roles, f"{without_roles} non-superadmin user(s) have no roles assigned"),
        (dangling, f"{dangling} role assignment(s) reference non-existent roles"),
        (non_boolean, f"{non_boolean} role(s) have non-boolean permission values"),
    )
    failures = tuple(message for count, message in checks if count)
    return IntegrityReport(total=len(checks), passed=len(checks) - len(failures), failures=failures)


def _assignments(user: UserSnapshot, department_names: Mapping[str, str]) -> tuple[RoleAssignment, ...]:
    seen: dict[str, RoleAssignment] = {}
    for role in user.roles:
        seen.setdefault(
            role.id,
            RoleAssignment(
                role_id=role.id,
                role_name=role.name,
                department_id=role.department_id,
                department_name=_department_name(role, department_names),
            ),
        )
    return tuple(sorted(seen.values(), key=lambda a: (a.role_name or "", a.role_id)))


def _department_name(role: RoleSnapshot, department_names: Mapping[str, str]) -> str:
    if role.department_name:
        return role.department_name
    if role.is_global:
        return NO_DEPARTMENT
    return department_names.get(role.department_id, role.department_id)
