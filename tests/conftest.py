"""
Pytest fixtures for the academy payroll test suite.

Provides:
- An in-memory SQLite database shared by every test in the session
- Per-test isolation through an outer transaction that is rolled back
- A deterministic clock and a fixed actor id
- Structured log capture

Environment Variables:
- DATABASE_URL: optional SQLAlchemy URL.  Defaults to in-memory SQLite.
"""

import json
import logging
import os
from io import StringIO
from typing import Generator
from uuid import UUID

import pytest
from sqlalchemy.orm import Session

from academy_kernel.db.engine import (
    create_tables,
    drop_tables,
    init_engine_from_url,
    reset_engine,
)
from academy_kernel.domain.clock import DeterministicClock
from academy_kernel.logging_config import (
    LogContext,
    StructuredFormatter,
    configure_logging,
    reset_logging,
)

# Test actor ID for all test operations
TEST_ACTOR_ID = UUID("00000000-0000-4000-a000-0000000000ff")

DEFAULT_DATABASE_URL = "sqlite://"


def get_database_url() -> str:
    """Get database URL from environment, or use in-memory SQLite."""
    return os.environ.get("DATABASE_URL", DEFAULT_DATABASE_URL)


# =============================================================================
# Logging fixtures
# =============================================================================


@pytest.fixture(autouse=True, scope="session")
def _configure_test_logging():
    """Configure structured logging for the test suite."""
    reset_logging()
    configure_logging(level=logging.DEBUG, stream=StringIO())
    yield
    reset_logging()


@pytest.fixture(autouse=True)
def _clear_log_context():
    """Clear LogContext between tests to prevent cross-test contamination."""
    LogContext.clear()
    yield
    LogContext.clear()


@pytest.fixture
def captured_logs():
    """
    Capture academy_kernel logs as parsed JSON dicts.

    Usage::

        def test_something(captured_logs):
            compose_pay_slip(...)
            logs = captured_logs()
            assert any(r["message"] == "pay_slip_composed" for r in logs)
    """
    stream = StringIO()
    handler = logging.StreamHandler(stream)
    handler.setFormatter(StructuredFormatter())
    root = logging.getLogger("academy_kernel")
    previous_level = root.level
    root.setLevel(logging.DEBUG)
    root.addHandler(handler)

    def _get_records() -> list[dict]:
        lines = stream.getvalue().strip().split("\n")
        return [json.loads(line) for line in lines if line]

    yield _get_records

    root.removeHandler(handler)
    root.setLevel(previous_level)


# =============================================================================
# Session-scoped DB infrastructure (create engine + tables ONCE per suite)
# =============================================================================


@pytest.fixture(scope="session")
def db_engine():
    """Single engine for the entire test session."""
    eng = init_engine_from_url(get_database_url(), echo=False)
    yield eng
    reset_engine()


@pytest.fixture(scope="session")
def db_tables(db_engine):
    """Create every table once; drop them at the end of the session."""
    create_tables()
    yield
    drop_tables()


@pytest.fixture
def session(db_tables, db_engine) -> Generator[Session, None, None]:
    """Provide a database session for testing.

    Opens a dedicated connection with an outer transaction and binds a
    session that joins it.  ``session.commit()`` inside a test releases a
    savepoint only; teardown rolls the outer transaction back.
    """
    conn = db_engine.connect()
    trans = conn.begin()
    sess = Session(bind=conn, join_transaction_mode="create_savepoint", expire_on_commit=False)
    yield sess
    try:
        sess.close()
    finally:
        try:
            trans.rollback()
        finally:
            conn.close()


# =============================================================================
# Common fixtures
# =============================================================================


@pytest.fixture
def test_actor_id() -> UUID:
    return TEST_ACTOR_ID


@pytest.fixture
def deterministic_clock() -> DeterministicClock:
    """Clock pinned to 2026-01-01 09:00 UTC."""
    return DeterministicClock()
