import os
import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.pool import StaticPool
from sqlalchemy.orm import sessionmaker

# CRITICAL: Set test database URL BEFORE importing any app modules
# This keeps the visibility job away from the hosted Supabase tables
os.environ["DATABASE_URL"] = "sqlite:///:memory:"
os.environ["TESTING"] = "true"
os.environ["SCHEDULER_ENABLED"] = "false"

from yello_admin.main import app
from yello_admin.database import Base

# Import all models to ensure they're registered with Base.metadata
from yello_admin.models import announcement, cron_log
import yello_admin.database as db_module
import yello_admin.routers.cron as cron_router


@pytest.fixture(scope="session")
def test_engine():
    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,  # share same in-memory DB across connections and threads
    )
    return engine


@pytest.fixture()
def session_factory(test_engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=test_engine)


@pytest.fixture()
def db_session(test_engine, session_factory):
    # Fresh schema per test
    Base.metadata.drop_all(bind=test_engine)
    Base.metadata.create_all(bind=test_engine)

    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture(autouse=True)
def patch_sessionlocal(monkeypatch, test_engine, session_factory, db_session):
    monkeypatch.setattr(db_module, "engine", test_engine, raising=False)
    monkeypatch.setattr(db_module, "SessionLocal", session_factory, raising=True)
    # The router's get_db looks SessionLocal up at call time
    monkeypatch.setattr(cron_router, "SessionLocal", session_factory, raising=True)

    # Disable rate limiter globally for tests
    if hasattr(app.state, "limiter"):
        setattr(app.state.limiter, "enabled", False)
    yield
    app.state.visibility_scheduler = None


@pytest.fixture()
def client():
    return TestClient(app)
