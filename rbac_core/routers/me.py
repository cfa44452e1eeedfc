from __future__ import annotations

from fastapi import APIRouter, Depends

from rbac_core.authz import UserSnapshot
from rbac_core.schemas.security import PermissionsOut, UserOut
from rbac_core.security.context import AuthzContext
from rbac_core.security.dependencies import get_authz_context, get_current_user

router = APIRouter(prefix="/me", tags=["me"])


@router.get("", response_model=UserOut)
def me(user: UserSnapshot = Depends(get_current_user)) -> UserSnapshot:
    return user


@router.get("/permissions", response_model=PermissionsOut)
def my_permissions(authz: AuthzContext = Depends(get_authz_context)) -> PermissionsOut:
    return PermissionsOut(
        user_id=authz.user_id,
        is_superadmin=authz.is_superadmin,
        is_admin_level=authz.is_admin_level,
        permissions=sorted(p.value for p in authz.permissions),
        department_ids=list(authz.department_ids),
    )
