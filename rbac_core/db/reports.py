"""
Read-side queries feeding the diagnostics report.

One query per table, then the in-memory fold in rbac_core.authz.diagnostics.
Per-role user counts are derived from the loaded assignments, not queried
role by role.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from sqlalchemy import select
from sqlalchemy.orm import Session, selectinload

from rbac_core.authz import (
    DepartmentRef,
    DiagnosticsReport,
    IntegrityReport,
    RoleSnapshot,
    UserSnapshot,
    build_diagnostics_report,
    check_integrity,
)
from rbac_core.models.security import Department, Role, User

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DiagnosticsSnapshot:
    users: tuple[UserSnapshot, ...]
    roles: tuple[RoleSnapshot, ...]
    departments: tuple[DepartmentRef, ...]


def role_snapshot(role: Role) -> RoleSnapshot:
    return RoleSnapshot.from_record(
        id=role.id,
        name=role.name,
        department_id=role.department_id,
        permissions=role.permissions,
        department_name=role.department.name if role.department is not None else None,
    )


def user_snapshot(user: User) -> UserSnapshot:
    return UserSnapshot(
        id=user.id,
        is_superadmin=user.is_superadmin,
        roles=tuple(role_snapshot(r) for r in sorted(user.roles, key=lambda r: (r.name or "", r.id))),
        name=user.name,
        email=user.email,
    )


def load_diagnostics_snapshot(db: Session) -> DiagnosticsSnapshot:
    users = db.scalars(
        select(User).options(selectinload(User.roles).selectinload(Role.department)).order_by(User.name, User.id)
    ).all()
    roles = db.scalars(select(Role).options(selectinload(Role.department)).order_by(Role.name, Role.id)).all()
    departments = db.scalars(select(Department).order_by(Department.name, Department.id)).all()

    return DiagnosticsSnapshot(
        users=tuple(user_snapshot(u) for u in users),
        roles=tuple(role_snapshot(r) for r in roles),
        departments=tuple(DepartmentRef(id=d.id, name=d.name) for d in departments),
    )


def load_diagnostics_report(db: Session) -> DiagnosticsReport:
    snapshot = load_diagnostics_snapshot(db)
    return build_diagnostics_report(snapshot.users, snapshot.roles, snapshot.departments)


def load_integrity_report(db: Session) -> IntegrityReport:
    snapshot = load_diagnostics_snapshot(db)
    report = check_integrity(snapshot.users, snapshot.roles)
    if not report.all_passed:
        logger.warning("RBAC integrity: %d of %d checks failed: %s", report.failed, report.total, report.failures)
    return report
