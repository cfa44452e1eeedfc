from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy import select
from sqlalchemy.orm import Session

from rbac_core.authz import DepartmentAccessPolicy, UserSnapshot, can_manage_department, can_view_department
from rbac_core.db.session import get_db
from rbac_core.models.security import Department
from rbac_core.schemas.security import DepartmentAccessOut, DepartmentOut
from rbac_core.security.dependencies import get_current_user, get_department_policy

router = APIRouter(prefix="/departments", tags=["departments"])


@router.get("", response_model=list[DepartmentOut])
def list_departments(
    db: Session = Depends(get_db),
    user: UserSnapshot = Depends(get_current_user),
    policy: DepartmentAccessPolicy = Depends(get_department_policy),
) -> list[Department]:
    departments = db.scalars(select(Department).order_by(Department.name, Department.id)).all()
    return [d for d in departments if can_view_department(user, d.id, policy)]


@router.get("/{department_id}/access", response_model=DepartmentAccessOut)
def department_access(
    department_id: str,
    user: UserSnapshot = Depends(get_current_user),
    policy: DepartmentAccessPolicy = Depends(get_department_policy),
) -> DepartmentAccessOut:
    # Department existence is not checked here: unknown ids simply match no role.
    return DepartmentAccessOut(
        department_id=department_id,
        can_view=can_view_department(user, department_id, policy),
        can_manage=can_manage_department(user, department_id, policy),
    )
