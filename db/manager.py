"""Database manager for SQLite connections, units of work and path management."""

import sqlite3
from contextlib import contextmanager
from config import Config, get_migrations_dir
from errors import StorageError
from logger import get_logger

logger = get_logger()


class UnitOfWork:
    """A set of statements that commit or roll back together.

    Service methods that take a UnitOfWork run inside the caller's
    transaction and never commit on their own.

    Args:
        conn: Connection with an open transaction.
    """

    def __init__(self, conn: sqlite3.Connection):
        self.conn = conn

    def execute(self, sql: str, params=()) -> sqlite3.Cursor:
        """Execute a statement inside this unit of work."""
        return self.conn.execute(sql, params)


class DatabaseManager:
    """Manages database connections and paths.

    Args:
        config: Application configuration object.
    """

    def __init__(self, config: Config):
        """Initialize the database manager.

        Args:
            config: Config object containing database configuration.
        """
        self.config = config

    @contextmanager
    def connect(self):
        """Get a database connection with automatic cleanup.

        Yields:
            sqlite3.Connection: Database connection with foreign keys enabled.
        """
        db_path = self.config.db_path
        db_path.parent.mkdir(parents=True, exist_ok=True)

        conn = sqlite3.connect(db_path, timeout=self.config.db_busy_timeout)
        conn.execute("PRAGMA foreign_keys = ON")
        try:
            yield conn
        finally:
            conn.close()

    @contextmanager
    def unit_of_work(self):
        """Run a block of statements as one atomic transaction.

        Takes the write lock up front (BEGIN IMMEDIATE) so concurrent writers
        queue behind each other for at most the configured busy timeout.
        Commits on normal exit. Any exception rolls everything back; sqlite
        errors are re-raised as StorageError, anything else propagates as is.

        Yields:
            UnitOfWork: Handle passed to service methods that must share the transaction.
        """
        with self.connect() as conn:
            try:
                conn.execute("BEGIN IMMEDIATE")
            except sqlite3.Error as e:
                raise StorageError(f"Could not start unit of work: {e}") from e

            try:
                yield UnitOfWork(conn)
                conn.commit()
            except sqlite3.Error as e:
                conn.rollback()
                logger.warning(f"Unit of work rolled back after storage error: {e}")
                raise StorageError(str(e)) from e
            except BaseException as e:
                conn.rollback()
                logger.warning(f"Unit of work rolled back: {e}")
                raise

    def get_db_path(self):
        """Get the current database path.

        Returns:
            Path: Path to the database file.
        """
        return self.config.db_path

    def get_migrations_dir(self):
        """Get the migrations directory path.

        Returns:
            Path: Path to the migrations directory.
        """
        return get_migrations_dir()
