from __future__ import annotations

from pydantic import BaseModel, ConfigDict


class RoleOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    department_id: str | None
    department_name: str | None


class UserOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str | None
    email: str | None
    is_superadmin: bool
    roles: list[RoleOut]


class PermissionsOut(BaseModel):
    user_id: str
    is_superadmin: bool
    is_admin_level: bool
    permissions: list[str]
    department_ids: list[str]


class DepartmentOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str


class DepartmentAccessOut(BaseModel):
    department_id: str
    can_view: bool
    can_manage: bool
