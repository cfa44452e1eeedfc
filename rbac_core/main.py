from __future__ import annotations

from contextlib import asynccontextmanager
import logging

from fastapi import Depends, FastAPI

from rbac_core.db.init_db import init_db
from rbac_core.logging_config import configure_app_logging
from rbac_core.routers import admin, departments, health, me
from rbac_core.security.config import load_security_config
from rbac_core.security.dependencies import enforce_security
from rbac_core.settings import get_settings

logger = logging.getLogger(__name__)


def create_app() -> FastAPI:
    @asynccontextmanager
    async def lifespan(app: FastAPI):
        settings = get_settings()
        configure_app_logging(settings.log_level)
        logger.info("App startup beginning")

        app.state.security_config = load_security_config(settings.resolved_security_config_path())
        logger.info("Loaded security config: %s", settings.resolved_security_config_path())
        init_db(seed=settings.seed_demo_data)
        logger.info("Database initialized (tables ensured, seed=%s)", settings.seed_demo_data)

        yield

    # Global dependency: every route is checked against the security config.
    app = FastAPI(title="rbac-core", dependencies=[Depends(enforce_security)], lifespan=lifespan)

    app.include_router(health.router)
    app.include_router(me.router)
    app.include_router(departments.router)
    app.include_router(admin.router)

    return app


app = create_app()
