"""
Snapshot types the core decides over.

These are read-only copies of what the data-access layer fetched for a
single decision (a user, their roles, the roles' departments). The core never
loads or mutates them.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from enum import Enum


@dataclass(frozen=True)
class DepartmentRef:
    id: str
    name: str


@dataclass(frozen=True)
class RoleSnapshot:
    """
    A role as the core sees it.

    `permissions` holds the raw identifiers granted by the stored record.
    They are validated against the catalog by the resolver, not here, so
    integrity anomalies can be reported where decisions are made.
    `malformed_permissions` holds the keys whose stored value was neither
    `True` nor `False`; `permissions_valid` is False when the stored bag was
    not a mapping or list at all. Neither ever grants anything.
    """

    id: str
    name: str
    department_id: str | None = None
    permissions: frozenset[str] = field(default_factory=frozenset)
    department_name: str | None = None
    malformed_permissions: frozenset[str] = field(default_factory=frozenset)
    permissions_valid: bool = True

    @property
    def is_global(self) -> bool:
        return not self.department_id

    @classmethod
    def from_record(
        cls,
        *,
        id: str,
        name: str,
        department_id: str | None = None,
        permissions: object = None,
        department_name: str | None = None,
    ) -> RoleSnapshot:
        bag = split_permission_bag(permissions)
        return cls(
            id=str(id),
            name=name,
            department_id=str(department_id) if department_id else None,
            permissions=bag.granted,
            department_name=department_name,
            malformed_permissions=bag.malformed,
            permissions_valid=bag.valid,
        )


@dataclass(frozen=True)
class UserSnapshot:
    id: str
    is_superadmin: bool = False
    roles: tuple[RoleSnapshot, ...] = ()
    name: str | None = None
    email: str | None = None

    @property
    def role_ids(self) -> tuple[str, ...]:
        return tuple(dict.fromkeys(role.id for role in self.roles))


@dataclass(frozen=True)
class PermissionBag:
    """A stored permission bag split into granted and malformed entries."""

    granted: frozenset[str] = frozenset()
    malformed: frozenset[str] = frozenset()
    valid: bool = True


def split_permission_bag(permissions: object) -> PermissionBag:
    """
    Split a stored permission bag.

    Role records keep permissions either as `{"view_users": true, ...}` or as
    a plain list of identifiers. In the mapping form `True` grants, `False`
    is an explicit non-grant, and any other value (`"true"`, `1`, `None`) is
    malformed: the key is kept aside and never granted. In the list form
    entries that are not identifiers are malformed. Anything else (a bare
    string, a number) is an invalid bag that grants nothing.
    """

    if permissions is None:
        return PermissionBag()
    if isinstance(permissions, Mapping):
        granted, malformed = set(), set()
        for key, value in permissions.items():
            if value is True:
                granted.add(_identifier(key))
            elif value is not False:
                malformed.add(_identifier(key))
        return PermissionBag(granted=frozenset(granted), malformed=frozenset(malformed))
    if isinstance(permissions, (str, bytes)) or not isinstance(permissions, Iterable):
        return PermissionBag(valid=False)
    granted, malformed = set(), set()
    for entry in permissions:
        if isinstance(entry, (str, Enum)):
            granted.add(_identifier(entry))
        else:
            malformed.add(_identifier(entry))
    return PermissionBag(granted=frozenset(granted), malformed=frozenset(malformed))


def _identifier(raw: object) -> str:
    if isinstance(raw, Enum):
        return str(raw.value)
    return str(raw)
