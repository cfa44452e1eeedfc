"""Errors raised by the authorization core."""

from __future__ import annotations


class AuthzError(ValueError):
    """Raised when the authorization core is handed malformed input."""


class UnauthenticatedError(AuthzError):
    """
    Raised when a decision is requested without a user.

    Callers must reject unauthenticated requests before they reach the core;
    a denial is never reported this way, only a missing identity.
    """


def require_user(user: object) -> None:
    if user is None:
        raise UnauthenticatedError("an authenticated user is required for authorization decisions")
