from __future__ import annotations

from dataclasses import dataclass

from rbac_core.authz import Permission


@dataclass(frozen=True)
class AuthzContext:
    """
    Per-request authorization summary attached to `request.state.authz`.

    Computed once by the global security dependency from the request's user
    snapshot; handlers that need department answers still ask the core.
    """

    user_id: str
    is_superadmin: bool
    permissions: frozenset[Permission]
    department_ids: tuple[str, ...]
    is_admin_level: bool
