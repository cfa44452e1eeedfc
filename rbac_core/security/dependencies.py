from __future__ import annotations

import logging

from fastapi import Depends, HTTPException, Request, status
from sqlalchemy.orm import Session

from rbac_core.authz import (
    DepartmentAccessPolicy,
    UserSnapshot,
    effective_permissions,
    has_any_permission,
    is_admin_level,
    user_department_ids,
)
from rbac_core.db.session import get_db
from rbac_core.security.auth import extract_user_id, load_user_snapshot
from rbac_core.security.config import SecurityConfig
from rbac_core.security.context import AuthzContext

logger = logging.getLogger(__name__)


def get_security_config(request: Request) -> SecurityConfig:
    config = getattr(request.app.state, "security_config", None)
    if config is None:
        raise RuntimeError("Security config not loaded. Did app startup run?")
    return config


def get_department_policy(config: SecurityConfig = Depends(get_security_config)) -> DepartmentAccessPolicy:
    return config.department_policy()


def get_current_user(request: Request) -> UserSnapshot:
    user = getattr(request.state, "user", None)
    if user is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Authentication required")
    return user


def get_authz_context(request: Request) -> AuthzContext:
    authz = getattr(request.state, "authz", None)
    if authz is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Authentication required")
    return authz


def enforce_security(
    request: Request,
    config: SecurityConfig = Depends(get_security_config),
    db: Session = Depends(get_db, use_cache=False),
) -> None:
    """
    Global security dependency (configuration-driven).

    Runs after routing, so decorator metadata on the endpoint is merged with
    the YAML route rule. Route handlers stay free of authorization code.
    """

    path = request.url.path
    method = request.method.upper()

    rule = config.match(path, method)

    endpoint = request.scope.get("endpoint")
    decorator_permissions = set(getattr(endpoint, "__security_required_permissions__", set())) if endpoint else set()
    decorator_admin_level = bool(getattr(endpoint, "__security_admin_level__", False)) if endpoint else False

    required_permissions = set(rule.required_permissions) | decorator_permissions
    admin_level_required = rule.admin_level or decorator_admin_level

    auth_required = rule.auth_required or bool(required_permissions) or admin_level_required
    if not auth_required:
        return

    user_id = extract_user_id(request, config)
    if user_id is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Missing user id")

    user = load_user_snapshot(db, user_id)
    request.state.user = user

    policy = config.department_policy()
    admin_level = is_admin_level(user, policy)

    if required_permissions and not has_any_permission(user, required_permissions):
        logger.info(
            "Forbidden: missing permission user=%s path=%s method=%s required=%s",
            user.id,
            path,
            method,
            sorted(p.value for p in required_permissions),
        )
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail=f"Insufficient permissions. Required one of: {sorted(p.value for p in required_permissions)}",
        )

    if admin_level_required and not admin_level:
        logger.info("Forbidden: admin level required user=%s path=%s method=%s", user.id, path, method)
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Admin level access required")

    request.state.authz = AuthzContext(
        user_id=user.id,
        is_superadmin=user.is_superadmin,
        permissions=effective_permissions(user),
        department_ids=user_department_ids(user),
        is_admin_level=admin_level,
    )
