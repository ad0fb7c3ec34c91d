"""Tests for DatabaseManager units of work and migrations."""

import sqlite3

import pytest

from config import get_migrations_dir
from db.manager import DatabaseManager
from db.migrate import apply_pending_migrations, get_applied_migrations
from errors import NotFound, StorageError


@pytest.fixture
def db_manager(test_config):
    manager = DatabaseManager(test_config)
    with manager.connect() as conn:
        apply_pending_migrations(conn, get_migrations_dir())
    return manager


def _category_names(db_manager):
    with db_manager.connect() as conn:
        return [row[0] for row in conn.execute("SELECT name FROM categories ORDER BY name")]


class TestUnitOfWork:
    """Tests for DatabaseManager.unit_of_work."""

    def test_commits_on_success(self, db_manager):
        with db_manager.unit_of_work() as uow:
            uow.execute("INSERT INTO categories (name) VALUES ('Food')")

        assert _category_names(db_manager) == ["Food"]

    def test_rolls_back_on_application_error(self, db_manager):
        with pytest.raises(NotFound):
            with db_manager.unit_of_work() as uow:
                uow.execute("INSERT INTO categories (name) VALUES ('Food')")
                raise NotFound("Goal", 1)

        assert _category_names(db_manager) == []

    def test_storage_error_rolls_back_and_wraps(self, db_manager):
        with pytest.raises(StorageError) as exc_info:
            with db_manager.unit_of_work() as uow:
                uow.execute("INSERT INTO categories (name) VALUES ('Food')")
                uow.execute("INSERT INTO categories (name) VALUES ('Food')")

        assert isinstance(exc_info.value.__cause__, sqlite3.IntegrityError)
        assert _category_names(db_manager) == []

    def test_uncommitted_writes_are_invisible_to_other_connections(self, db_manager):
        with db_manager.unit_of_work() as uow:
            uow.execute("INSERT INTO categories (name) VALUES ('Food')")
            assert _category_names(db_manager) == []

        assert _category_names(db_manager) == ["Food"]

    def test_busy_timeout_raises_storage_error(self, db_manager, test_config):
        test_config.db_busy_timeout = 0.05

        with db_manager.unit_of_work():
            with pytest.raises(StorageError, match="Could not start unit of work"):
                with db_manager.unit_of_work():
                    pass

    def test_foreign_keys_enforced(self, db_manager):
        with pytest.raises(StorageError):
            with db_manager.unit_of_work() as uow:
                uow.execute(
                    "INSERT INTO budgets (category_id, budget_year, budget_month, budget_amount_cents)"
                    " VALUES (9999, 2025, 1, 100)"
                )


class TestMigrations:
    """Tests for applying migrations."""

    def test_migrations_are_recorded_once(self, db_manager):
        with db_manager.connect() as conn:
            applied = get_applied_migrations(conn)
            assert applied == {p.name for p in get_migrations_dir().glob("*.sql")}
            assert apply_pending_migrations(conn, get_migrations_dir()) == []

    def test_failed_migration_is_not_recorded(self, tmp_path, test_db):
        migrations_dir = tmp_path / "migrations"
        migrations_dir.mkdir()
        (migrations_dir / "001_partial.sql").write_text(
            "CREATE TABLE applied_first (id INTEGER);\nCREATE TABLE broken (;\n"
        )

        with pytest.raises(sqlite3.Error):
            apply_pending_migrations(test_db, migrations_dir)

        assert get_applied_migrations(test_db) == set()
        tables = {
            row[0]
            for row in test_db.execute("SELECT name FROM sqlite_master WHERE type = 'table'")
        }
        assert "applied_first" in tables
