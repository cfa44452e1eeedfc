"""
Department-scoped access checks built on the permission resolver.

Every check applies the same precedence:

    superadmin -> global override permission -> department-scoped role -> deny

View and manage are separate gates. Nothing that grants view is assumed to
grant manage. Departments are flat: ids are compared for equality only.
"""

from __future__ import annotations

from dataclasses import dataclass
import logging

from .catalog import ADMIN_LEVEL_PERMISSIONS, Permission
from .errors import require_user
from .resolver import AnomalyReporter, has_any_permission, has_permission, resolve_role_permissions
from .snapshot import UserSnapshot

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DepartmentAccessPolicy:
    """Which permissions drive the department checks."""

    view_override: Permission = Permission.VIEW_ALL_DEPARTMENTS
    manage_permission: Permission = Permission.MANAGE_DEPARTMENT
    manage_override: Permission = Permission.MANAGE_ALL_DEPARTMENTS
    admin_permissions: frozenset[Permission] = ADMIN_LEVEL_PERMISSIONS


DEFAULT_POLICY = DepartmentAccessPolicy()


def can_view_department(
    user: UserSnapshot,
    department_id: str | None,
    policy: DepartmentAccessPolicy = DEFAULT_POLICY,
    on_anomaly: AnomalyReporter | None = None,
) -> bool:
    require_user(user)
    if user.is_superadmin:
        return True

    if has_permission(user, policy.view_override, on_anomaly):
        logger.debug("RBAC: view department=%s user=%s reason=override", department_id, user.id)
        return True

    if department_id and any(role.department_id == department_id for role in user.roles):
        logger.debug("RBAC: view department=%s user=%s reason=department_role", department_id, user.id)
        return True

    logger.debug("RBAC: view department=%s user=%s denied", department_id, user.id)
    return False


def can_manage_department(
    user: UserSnapshot,
    department_id: str | None,
    policy: DepartmentAccessPolicy = DEFAULT_POLICY,
    on_anomaly: AnomalyReporter | None = None,
) -> bool:
    """
    Manage requires either the global manage override, or a role scoped to
    this very department that itself grants `policy.manage_permission`.
    """

    require_user(user)
    if user.is_superadmin:
        return True

    if has_permission(user, policy.manage_override, on_anomaly):
        logger.debug("RBAC: manage department=%s user=%s reason=override", department_id, user.id)
        return True

    if department_id:
        for role in user.roles:
            if role.department_id != department_id:
                continue
            if policy.manage_permission in resolve_role_permissions(role, on_anomaly):
                logger.debug(
                    "RBAC: manage department=%s user=%s reason=department_role role=%s",
                    department_id,
                    user.id,
                    role.name,
                )
                return True

    logger.debug("RBAC: manage department=%s user=%s denied", department_id, user.id)
    return False


def is_admin_level(
    user: UserSnapshot,
    policy: DepartmentAccessPolicy = DEFAULT_POLICY,
    on_anomaly: AnomalyReporter | None = None,
) -> bool:
    """
    Coarse gate for administrative areas.

    Does not grant anything on its own; callers still check the specific
    permission for the action they perform.
    """

    require_user(user)
    if user.is_superadmin:
        return True
    return has_any_permission(user, policy.admin_permissions, on_anomaly)


def user_department_ids(user: UserSnapshot) -> tuple[str, ...]:
    require_user(user)
    return tuple(dict.fromkeys(role.department_id for role in user.roles if role.department_id))


def is_unassigned(user: UserSnapshot) -> bool:
    require_user(user)
    return not user.roles
