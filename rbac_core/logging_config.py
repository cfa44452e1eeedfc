from __future__ import annotations

import logging


def configure_app_logging(level: str = "INFO") -> None:
    """
    Set the level of the `rbac_core` package loggers.

    Notes:
    - Uvicorn already configures handlers; this only sets levels for our package.
    - `RBAC_LOG_LEVEL=DEBUG` shows every authorization decision and its reason.
    """

    normalized = level.upper()
    logging.getLogger("rbac_core").setLevel(normalized)
    logging.getLogger("rbac_core").propagate = True
