"""Budget service for per-category monthly allocations."""

import sqlite3
from typing import List, Optional

from errors import NotFound, ValidationError
from models.budget import Budget, CategoryBudget
from models.money import from_cents, parse_amount, to_cents


class BudgetService:
    """Service for managing monthly budgets."""

    def __init__(self, db_manager):
        """Initialize the budget service.

        Args:
            db_manager: Database manager instance for database operations.
        """
        self.db_manager = db_manager

    def set(self, category_id: int, year: int, month: int, amount) -> Budget:
        """Create or replace the budget for a category and month.

        Args:
            category_id: Category to budget for.
            year: Calendar year.
            month: Calendar month (1-12).
            amount: Budget amount, zero or more. Rounded to two decimals.

        Returns:
            The stored Budget.

        Raises:
            ValidationError: If the month or amount is invalid.
            NotFound: If the category does not exist.
        """
        try:
            year, month = int(year), int(month)
        except (TypeError, ValueError):
            raise ValidationError(f"Year and month must be integers, got {year!r}/{month!r}")
        if not 1 <= month <= 12:
            raise ValidationError(f"Month must be between 1 and 12, got {month}")
        budget_amount = parse_amount(amount, "Budget amount")
        if budget_amount < 0:
            raise ValidationError("Budget amount cannot be negative.")

        with self.db_manager.connect() as conn:
            try:
                conn.execute(
                    """
                    INSERT INTO budgets (category_id, budget_year, budget_month, budget_amount_cents)
                    VALUES (?, ?, ?, ?)
                    ON CONFLICT (category_id, budget_year, budget_month)
                    DO UPDATE SET budget_amount_cents = excluded.budget_amount_cents
                    """,
                    (category_id, year, month, to_cents(budget_amount)),
                )
                conn.commit()
            except sqlite3.IntegrityError as e:
                conn.rollback()
                if "FOREIGN KEY" not in str(e):
                    raise
                raise NotFound("Category", category_id)

        return Budget(
            category_id=category_id,
            year=year,
            month=month,
            budget_amount=budget_amount,
        )

    def find(self, category_id: int, year: int, month: int) -> Optional[Budget]:
        """Get the budget for a category and month.

        Returns:
            Budget object if one is set, None otherwise.
        """
        with self.db_manager.connect() as conn:
            row = conn.execute(
                """
                SELECT category_id, budget_year, budget_month, budget_amount_cents
                FROM budgets
                WHERE category_id = ? AND budget_year = ? AND budget_month = ?
                """,
                (category_id, year, month),
            ).fetchone()

            if row:
                return Budget(
                    category_id=row[0],
                    year=row[1],
                    month=row[2],
                    budget_amount=from_cents(row[3]),
                )
            return None

    def find_for_month(self, year: int, month: int) -> List[CategoryBudget]:
        """Get every category with its budget for the given month.

        Categories without a budget are included with budget_amount None.

        Returns:
            List of CategoryBudget objects, ordered by category name.
        """
        with self.db_manager.connect() as conn:
            cursor = conn.execute(
                """
                SELECT c.id, c.name, c.type, b.budget_amount_cents
                FROM categories c
                LEFT JOIN budgets b
                    ON c.id = b.category_id
                    AND b.budget_year = ?
                    AND b.budget_month = ?
                ORDER BY c.name
                """,
                (year, month),
            )

            return [
                CategoryBudget(
                    category_id=row[0],
                    category_name=row[1],
                    category_type=row[2],
                    budget_amount=from_cents(row[3]) if row[3] is not None else None,
                )
                for row in cursor.fetchall()
            ]

    def delete(self, category_id: int, year: int, month: int) -> bool:
        """Remove the budget for a category and month.

        Returns:
            True if a budget was deleted, False if none was set.
        """
        with self.db_manager.connect() as conn:
            cursor = conn.execute(
                """
                DELETE FROM budgets
                WHERE category_id = ? AND budget_year = ? AND budget_month = ?
                """,
                (category_id, year, month),
            )
            conn.commit()
            return cursor.rowcount > 0
