from __future__ import annotations

from pydantic import BaseModel, ConfigDict


class RoleAssignmentOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    role_id: str
    role_name: str | None
    department_id: str | None
    department_name: str


class UserDiagnosticsOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str | None
    email: str | None
    is_superadmin: bool
    assignments: list[RoleAssignmentOut]


class RoleDiagnosticsOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str | None
    department_id: str | None
    department_name: str
    permissions: list[str]
    unknown_permissions: list[str]
    malformed_permissions: list[str]
    user_count: int


class DiagnosticsReportOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    users: list[UserDiagnosticsOut]
    roles: list[RoleDiagnosticsOut]


class IntegrityReportOut(BaseModel):
    all_passed: bool
    total: int
    passed: int
    failed: int
    failures: list[str]
