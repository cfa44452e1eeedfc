"""
Pytest fixtures for the test suite.

Data-layer tests use an in-memory SQLite engine and a session that rolls back
after each test, so tests do not affect each other. API tests get their own
in-memory database shared across connections via StaticPool.
"""
from __future__ import annotations

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool


TEST_DB_URL = "sqlite:///:memory:"


@pytest.fixture
def engine():
    """Create a fresh in-memory SQLite engine for each test."""
    return create_engine(
        TEST_DB_URL,
        connect_args={"check_same_thread": False},
        echo=False,
    )


@pytest.fixture
def tables(engine):
    """Create all ORM tables on the test engine."""
    from rbac_core.db.base import Base
    from rbac_core.models import security  # noqa: F401  (register tables)

    Base.metadata.create_all(bind=engine)
    return engine


@pytest.fixture
def db_session(tables):
    """
    Provide a Session bound to the test DB; roll back after each test.

    The transaction is rolled back so the next test gets a clean state.
    """
    connection = tables.connect()
    transaction = connection.begin()
    TestSession = sessionmaker(
        bind=connection,
        autocommit=False,
        autoflush=False,
        class_=Session,
    )
    session = TestSession()
    yield session
    session.close()
    transaction.rollback()
    connection.close()


@pytest.fixture
def api_sessionmaker():
    """Sessionmaker over a seeded in-memory DB usable from the TestClient's threads."""
    from rbac_core.db.base import Base
    from rbac_core.db.init_db import seed_demo_data
    from rbac_core.models import security  # noqa: F401  (register tables)

    api_engine = create_engine(
        TEST_DB_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=api_engine)
    TestSession = sessionmaker(bind=api_engine, autocommit=False, autoflush=False, class_=Session)
    with TestSession() as db:
        seed_demo_data(db)
    yield TestSession
    api_engine.dispose()


@pytest.fixture
def client(api_sessionmaker):
    """
    TestClient for the app with `get_db` pointed at the seeded test DB.

    The lifespan is not run (no `with` block), so the security config is
    loaded here from the bundled YAML.
    """
    from fastapi.testclient import TestClient

    from rbac_core.db.session import get_db
    from rbac_core.main import app
    from rbac_core.security.config import load_security_config
    from rbac_core.settings import Settings

    def _get_test_db():
        db = api_sessionmaker()
        try:
            yield db
        finally:
            db.close()

    app.state.security_config = load_security_config(Settings().resolved_security_config_path())
    app.dependency_overrides[get_db] = _get_test_db
    yield TestClient(app)
    app.dependency_overrides.clear()
