from __future__ import annotations

import logging

from fastapi import HTTPException, Request, status
from sqlalchemy import select
from sqlalchemy.orm import Session, selectinload

from rbac_core.authz import UserSnapshot
from rbac_core.db.reports import user_snapshot
from rbac_core.models.security import Role, User
from rbac_core.security.config import SecurityConfig

logger = logging.getLogger(__name__)


def extract_user_id(request: Request, config: SecurityConfig) -> str | None:
    """
    Demo auth: extract the bearer token and treat it as a user id.

    - Input: `Authorization: Bearer <token>`
    - Demo behavior: `<token>` is the user's id
    - Token issuance and validation belong to the identity provider in front
      of this service, not to this code.
    """

    header_name = config.auth.authorization_header
    bearer_prefix = config.auth.bearer_prefix

    raw = request.headers.get(header_name)
    if not raw:
        logger.info("Missing Authorization header (auth required) path=%s method=%s", request.url.path, request.method)
        return None

    prefix = f"{bearer_prefix} "
    if not raw.startswith(prefix):
        logger.warning("Invalid Authorization header format path=%s method=%s", request.url.path, request.method)
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Invalid {header_name}. Expected '{bearer_prefix} <token>'.",
        )

    token = raw[len(prefix) :].strip()
    if not token:
        logger.warning("Empty bearer token path=%s method=%s", request.url.path, request.method)
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Invalid {header_name}. Missing token after '{bearer_prefix}'.",
        )

    return token


def load_user_snapshot(db: Session, user_id: str) -> UserSnapshot:
    """Load an active user and their current role assignments as a snapshot."""

    user = db.execute(
        select(User)
        .where(User.id == user_id)
        .options(selectinload(User.roles).selectinload(Role.department))
    ).scalar_one_or_none()

    if user is None or not user.is_active:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid or inactive user")

    return user_snapshot(user)
