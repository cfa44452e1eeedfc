"""
Permission resolver.

Answers "does this user hold this permission?" from a user snapshot.

Key ideas:
- The superadmin flag is checked first, before any role is looked at.
- Otherwise the effective permission set is the union of the permissions of
  every assigned role, recomputed on each call (no caching).
- Role data is not trusted: identifiers outside the catalog and malformed
  entries are reported as anomalies and left out of the union, never granted.
"""

from __future__ import annotations

from dataclasses import dataclass
import logging
from typing import Callable, Iterable

from .catalog import ALL_PERMISSIONS, Permission, lookup_permission
from .errors import require_user
from .snapshot import RoleSnapshot, UserSnapshot

logger = logging.getLogger(__name__)


UNKNOWN_PERMISSION = "unknown_permission"
MALFORMED_PERMISSION = "malformed_permission"


@dataclass(frozen=True)
class PermissionAnomaly:
    """
    A role grant the core refused to honor.

    `kind` is UNKNOWN_PERMISSION for an identifier outside the catalog and
    MALFORMED_PERMISSION for a stored entry that is neither a boolean grant
    nor an identifier.
    """

    role_id: str
    role_name: str
    identifier: str
    kind: str = UNKNOWN_PERMISSION


AnomalyReporter = Callable[[PermissionAnomaly], None]


# ---- Effective permissions -----------------------------------------------------------


def resolve_role_permissions(
    role: RoleSnapshot,
    on_anomaly: AnomalyReporter | None = None,
) -> frozenset[Permission]:
    """Catalog permissions granted by a single role; unknown and malformed entries are dropped."""

    if not role.permissions_valid:
        logger.warning("RBAC: role has an invalid permission bag role_id=%s role=%s", role.id, role.name)

    for identifier in sorted(role.malformed_permissions):
        logger.warning(
            "RBAC: role has a malformed permission entry role_id=%s role=%s permission=%r",
            role.id,
            role.name,
            identifier,
        )
        if on_anomaly is not None:
            on_anomaly(
                PermissionAnomaly(
                    role_id=role.id, role_name=role.name, identifier=identifier, kind=MALFORMED_PERMISSION
                )
            )

    resolved: set[Permission] = set()
    for identifier in sorted(role.permissions):
        permission = lookup_permission(identifier)
        if permission is None:
            logger.warning(
                "RBAC: role references unknown permission role_id=%s role=%s permission=%r",
                role.id,
                role.name,
                identifier,
            )
            if on_anomaly is not None:
                on_anomaly(PermissionAnomaly(role_id=role.id, role_name=role.name, identifier=identifier))
            continue
        resolved.add(permission)
    return frozenset(resolved)


def effective_permissions(
    user: UserSnapshot,
    on_anomaly: AnomalyReporter | None = None,
) -> frozenset[Permission]:
    """
    Compute the user's effective permission set.

    Superadmins hold the whole catalog and their roles are not inspected.
    """

    require_user(user)
    if user.is_superadmin:
        return ALL_PERMISSIONS

    perms: set[Permission] = set()
    for role in user.roles:
        perms.update(resolve_role_permissions(role, on_anomaly))
    return frozenset(perms)


# ---- Point queries -------------------------------------------------------------------


def has_permission(
    user: UserSnapshot,
    permission: Permission | str,
    on_anomaly: AnomalyReporter | None = None,
) -> bool:
    """
    Decide whether `user` holds `permission`.

    Algorithm:
    1. No user -> UnauthenticatedError (caller contract violation).
    2. Superadmin -> allow, without looking at roles.
    3. Unknown requested permission -> deny.
    4. Allow iff the permission is in the union of the roles' permissions.
    """

    require_user(user)
    if user.is_superadmin:
        logger.debug("RBAC: allowed user=%s permission=%s reason=superadmin", user.id, permission)
        return True

    wanted = _lookup_requested(user, permission)
    if wanted is None:
        return False

    if wanted in effective_permissions(user, on_anomaly):
        logger.debug("RBAC: allowed user=%s permission=%s reason=role_permission", user.id, wanted)
        return True

    logger.debug(
        "RBAC: denied user=%s permission=%s reason=no_permission roles=%s",
        user.id,
        wanted,
        sorted(role.name for role in user.roles),
    )
    return False


def has_any_permission(
    user: UserSnapshot,
    permissions: Iterable[Permission | str],
    on_anomaly: AnomalyReporter | None = None,
) -> bool:
    require_user(user)
    if user.is_superadmin:
        return True
    requested = [_lookup_requested(user, p) for p in permissions]
    held = effective_permissions(user, on_anomaly)
    return any(p in held for p in requested)


def has_all_permissions(
    user: UserSnapshot,
    permissions: Iterable[Permission | str],
    on_anomaly: AnomalyReporter | None = None,
) -> bool:
    require_user(user)
    if user.is_superadmin:
        return True
    requested = [_lookup_requested(user, p) for p in permissions]
    held = effective_permissions(user, on_anomaly)
    return all(p in held for p in requested)


def _lookup_requested(user: UserSnapshot, permission: Permission | str) -> Permission | None:
    wanted = lookup_permission(permission)
    if wanted is None:
        logger.warning("RBAC: check for unknown permission user=%s permission=%r", user.id, permission)
    return wanted
