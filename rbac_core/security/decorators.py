from __future__ import annotations

from collections.abc import Callable

from rbac_core.authz import Permission


def require_permissions(permissions: list[Permission]) -> Callable:
    """
    Declare that an endpoint needs at least one of `permissions`.

    This decorator does NOT perform the check itself. It attaches metadata
    that the global security dependency reads after routing.
    """

    def decorator(fn: Callable) -> Callable:
        existing = set(getattr(fn, "__security_required_permissions__", set()))
        setattr(fn, "__security_required_permissions__", existing | set(permissions))
        return fn

    return decorator


def require_admin_level() -> Callable:
    """Declare that an endpoint is restricted to admin-level users."""

    def decorator(fn: Callable) -> Callable:
        setattr(fn, "__security_admin_level__", True)
        return fn

    return decorator
