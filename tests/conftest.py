"""Shared pytest fixtures for all tests."""

import sqlite3
import pytest
from contextlib import contextmanager
from pathlib import Path

from config import Config, get_migrations_dir
from db.manager import DatabaseManager
from services.base import Services
from tests.helpers import run_migrations


@pytest.fixture
def test_db():
    """Create an in-memory SQLite database for testing.

    Yields:
        sqlite3.Connection: Connection to in-memory database.
    """
    conn = sqlite3.connect(":memory:")
    conn.execute("PRAGMA foreign_keys = ON")
    yield conn
    conn.close()


@pytest.fixture
def test_config(tmp_path):
    """Create a test configuration pointing to a temporary database.

    Args:
        tmp_path: pytest tmp_path fixture for temporary directory.

    Returns:
        Config: Test configuration object.
    """
    return Config(
        base_dir=tmp_path / "pennywise",
        db_data_dir=tmp_path / "pennywise" / "db",
        db_filename="test.db",
        db_busy_timeout=10.0,
        log_level="DEBUG",
        log_dir=tmp_path / "pennywise" / "logs",
    )


@pytest.fixture
def db_manager_with_schema(test_db, test_config):
    """Create a DatabaseManager with schema already set up.

    This fixture provides a DatabaseManager that uses an in-memory database
    with all migrations already applied. Units of work run on the same
    connection, so rollbacks are visible to later reads.

    Args:
        test_db: In-memory database connection fixture.
        test_config: Test configuration fixture.

    Returns:
        DatabaseManager: Database manager with schema ready.
    """
    run_migrations(test_db, get_migrations_dir())

    class TestDatabaseManager(DatabaseManager):
        """Test database manager that uses in-memory connection."""

        def __init__(self, config, conn):
            super().__init__(config)
            self.conn = conn

        @contextmanager
        def connect(self):
            # Don't close the connection - let the fixture handle it
            yield self.conn

        def get_db_path(self):
            """Return a fake path for the test database."""
            return Path(":memory:")

    return TestDatabaseManager(test_config, test_db)


@pytest.fixture
def services(test_config, db_manager_with_schema):
    """Create a Services container with test database.

    This fixture provides access to all services with a clean test database.

    Args:
        test_config: Test configuration fixture.
        db_manager_with_schema: Database manager with schema set up.

    Returns:
        Services: Services container for testing.
    """
    return Services(test_config, db_manager=db_manager_with_schema)


@pytest.fixture
def file_services(test_config):
    """Create a Services container backed by a database file.

    Every call opens its own connection, which lets tests exercise
    concurrent units of work from several threads.

    Args:
        test_config: Test configuration fixture.

    Returns:
        Services: Services container for testing.
    """
    db_manager = DatabaseManager(test_config)
    with db_manager.connect() as conn:
        run_migrations(conn, get_migrations_dir())
    return Services(test_config, db_manager=db_manager)
