from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from rbac_core.authz import Permission
from rbac_core.db.reports import load_diagnostics_report, load_integrity_report
from rbac_core.db.session import get_db
from rbac_core.schemas.diagnostics import DiagnosticsReportOut, IntegrityReportOut
from rbac_core.security.decorators import require_permissions

router = APIRouter(prefix="/admin", tags=["admin"])


@router.get("/rbac-diagnostics", response_model=DiagnosticsReportOut)
@require_permissions([Permission.MANAGE_USERS])
def rbac_diagnostics(db: Session = Depends(get_db)) -> dict[str, object]:
    # Authorization already enforced by the global dependency (superadmins pass via bypass).
    return load_diagnostics_report(db).to_dict()


@router.get("/rbac-diagnostics/checks", response_model=IntegrityReportOut)
@require_permissions([Permission.MANAGE_USERS])
def rbac_integrity_checks(db: Session = Depends(get_db)) -> dict[str, object]:
    return load_integrity_report(db).to_dict()
