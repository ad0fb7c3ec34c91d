"""Helper utilities for tests."""

from decimal import Decimal
from pathlib import Path
import sqlite3

from db.migrate import apply_pending_migrations


def run_migrations(conn: sqlite3.Connection, migrations_dir: Path) -> None:
    """Run all SQL migrations in order.

    Args:
        conn: SQLite connection to run migrations against.
        migrations_dir: Path to directory containing .sql migration files.
    """
    apply_pending_migrations(conn, migrations_dir)


def assert_goal_invariant(services, goal_id: int) -> None:
    """Assert a goal's running total equals the sum of its contributions."""
    goal = services.goals.find(goal_id)
    contributions = services.goals.find_contributions(goal_id)
    total = sum((c.amount for c in contributions), Decimal("0.00"))
    assert goal.current_amount == total, (
        f"goal {goal_id}: current_amount {goal.current_amount} != contributions {total}"
    )


def count_rows(services, table: str) -> int:
    """Count the rows in a table."""
    with services.db_manager.connect() as conn:
        return conn.execute(f"SELECT COUNT(*) FROM {table}").fetchone()[0]
