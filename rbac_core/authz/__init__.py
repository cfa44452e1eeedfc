"""
Department-scoped RBAC decision core.

This package has no dependency on other rbac_core packages (db, security,
routers) and performs no I/O. Callers load a UserSnapshot from storage and
ask the functions below for decisions.
"""

from .catalog import (
    ADMIN_LEVEL_PERMISSIONS,
    ALL_PERMISSIONS,
    OVERRIDE_PERMISSIONS,
    PERMISSION_DEFINITIONS,
    Permission,
    PermissionDefinition,
    lookup_permission,
    permissions_in_category,
)
from .departments import (
    DEFAULT_POLICY,
    DepartmentAccessPolicy,
    can_manage_department,
    can_view_department,
    is_admin_level,
    is_unassigned,
    user_department_ids,
)
from .diagnostics import (
    NO_DEPARTMENT,
    DiagnosticsReport,
    IntegrityReport,
    build_diagnostics_report,
    check_integrity,
)
from .errors import AuthzError, UnauthenticatedError
from .resolver import (
    MALFORMED_PERMISSION,
    UNKNOWN_PERMISSION,
    PermissionAnomaly,
    effective_permissions,
    has_all_permissions,
    has_any_permission,
    has_permission,
)
from .snapshot import DepartmentRef, RoleSnapshot, UserSnapshot

__all__ = [
    "ADMIN_LEVEL_PERMISSIONS",
    "ALL_PERMISSIONS",
    "OVERRIDE_PERMISSIONS",
    "PERMISSION_DEFINITIONS",
    "Permission",
    "PermissionDefinition",
    "lookup_permission",
    "permissions_in_category",
    "DEFAULT_POLICY",
    "DepartmentAccessPolicy",
    "can_manage_department",
    "can_view_department",
    "is_admin_level",
    "is_unassigned",
    "user_department_ids",
    "NO_DEPARTMENT",
    "DiagnosticsReport",
    "IntegrityReport",
    "build_diagnostics_report",
    "check_integrity",
    "AuthzError",
    "UnauthenticatedError",
    "MALFORMED_PERMISSION",
    "UNKNOWN_PERMISSION",
    "PermissionAnomaly",
    "effective_permissions",
    "has_all_permissions",
    "has_any_permission",
    "has_permission",
    "DepartmentRef",
    "RoleSnapshot",
    "UserSnapshot",
]
