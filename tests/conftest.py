"""
Central pytest configuration for the tool tracker tests.

This file provides common fixtures, test markers and an in-memory
database for both unit and integration tests.
"""

import os
import uuid

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

# Test database configuration (set early so import-time settings use it)
TEST_DATABASE_URL = "sqlite:///:memory:"
os.environ["DATABASE_URL"] = TEST_DATABASE_URL

from tool_tracker.db.session import Base  # noqa: E402
from tool_tracker.db import base as _models  # noqa: E402,F401


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line("markers", "unit: Unit tests (fast, isolated)")
    config.addinivalue_line("markers", "integration: Integration tests (database)")
    config.addinivalue_line("markers", "services: Service layer tests")
    config.addinivalue_line("markers", "repositories: Repository layer tests")
    config.addinivalue_line("markers", "domain: Domain entity and validation tests")


# =====================================================
# ID FIXTURES
# =====================================================


def new_id() -> str:
    return str(uuid.uuid4())


@pytest.fixture
def tool_id() -> str:
    return new_id()


@pytest.fixture
def user_a() -> str:
    return new_id()


@pytest.fixture
def user_b() -> str:
    return new_id()


@pytest.fixture
def actor_x() -> str:
    return new_id()


# =====================================================
# DATABASE FIXTURES
# =====================================================


@pytest.fixture
def db_engine():
    """Fresh in-memory SQLite engine with all tables created."""
    engine = create_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    try:
        yield engine
    finally:
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture
def db_session(db_engine):
    """Session bound to the per-test engine, closed after the test."""
    Session = sessionmaker(
        bind=db_engine, autocommit=False, autoflush=False, expire_on_commit=False
    )
    session = Session()
    try:
        yield session
    finally:
        session.close()
