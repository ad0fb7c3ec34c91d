"""Transaction service for database operations.

Reads open their own connection. Writes run inside a unit of work owned by
the ledger, because creating or deleting a transaction may also move a
goal's running total.
"""

import calendar
from datetime import date, datetime
from decimal import Decimal
from typing import List, Optional

from models.money import from_cents, to_cents
from models.transaction import Transaction

# SQL Query Constants
_TRANSACTION_SELECT = """
    SELECT t.id, t.description, t.amount_cents, t.transaction_date, t.category_id,
           t.created_at, c.name, c.type
    FROM transactions t
    LEFT JOIN categories c ON t.category_id = c.id
"""

_TRANSACTION_ORDER = " ORDER BY t.transaction_date DESC, t.created_at DESC, t.id DESC"


class TransactionService:
    """Service for reading and writing transactions."""

    def __init__(self, db_manager):
        """Initialize the transaction service.

        Args:
            db_manager: Database manager instance for database operations.
        """
        self.db_manager = db_manager

    def find(self, transaction_id: int) -> Optional[Transaction]:
        """Get a single transaction by ID.

        Args:
            transaction_id: The transaction ID.

        Returns:
            Transaction object if found, None otherwise.
        """
        with self.db_manager.connect() as conn:
            row = conn.execute(
                _TRANSACTION_SELECT + " WHERE t.id = ?", (transaction_id,)
            ).fetchone()

            if row:
                return self._row_to_transaction(row)
            return None

    def find_all(self) -> List[Transaction]:
        """Get every transaction, newest first, with its category joined."""
        with self.db_manager.connect() as conn:
            cursor = conn.execute(_TRANSACTION_SELECT + _TRANSACTION_ORDER)
            return [self._row_to_transaction(row) for row in cursor.fetchall()]

    def get_transactions_by_date_range(
        self,
        start_date: str,
        end_date: str,
        *,
        category_ids: Optional[List[int]] = None,
    ) -> List[Transaction]:
        """Get transactions within a date range.

        Args:
            start_date: Start date in ISO format (YYYY-MM-DD), inclusive.
            end_date: End date in ISO format (YYYY-MM-DD), inclusive.
            category_ids: Optional list of category IDs to filter by.

        Returns:
            List of Transaction objects ordered by date (newest first).
        """
        query = _TRANSACTION_SELECT + " WHERE t.transaction_date >= ? AND t.transaction_date <= ?"
        params = [start_date, end_date]

        if category_ids is not None and len(category_ids) > 0:
            placeholders = ", ".join(["?"] * len(category_ids))
            query += f" AND t.category_id IN ({placeholders})"
            params.extend(category_ids)

        query += _TRANSACTION_ORDER

        with self.db_manager.connect() as conn:
            cursor = conn.execute(query, params)
            return [self._row_to_transaction(row) for row in cursor.fetchall()]

    def get_transactions_by_month(
        self,
        year: int,
        month: int,
        *,
        category_ids: Optional[List[int]] = None,
    ) -> List[Transaction]:
        """Get transactions for a specific month.

        Args:
            year: Year (e.g., 2025).
            month: Month (1-12).
            category_ids: Optional list of category IDs to filter by.

        Returns:
            List of Transaction objects ordered by date (newest first).
        """
        start_date = f"{year:04d}-{month:02d}-01"
        last_day = calendar.monthrange(year, month)[1]
        end_date = f"{year:04d}-{month:02d}-{last_day:02d}"

        return self.get_transactions_by_date_range(
            start_date, end_date, category_ids=category_ids
        )

    def insert(
        self,
        uow,
        description: Optional[str],
        amount: Decimal,
        transaction_date: date,
        category_id: int,
    ) -> Transaction:
        """Insert a transaction inside an open unit of work.

        Returns:
            The new Transaction with its id populated.
        """
        cursor = uow.execute(
            """
            INSERT INTO transactions (description, amount_cents, transaction_date, category_id)
            VALUES (?, ?, ?, ?)
            """,
            (description, to_cents(amount), transaction_date.isoformat(), category_id),
        )
        return Transaction(
            id=cursor.lastrowid,
            description=description,
            amount=amount,
            transaction_date=transaction_date,
            category_id=category_id,
        )

    def delete(self, uow, transaction_id: int) -> int:
        """Delete a transaction inside an open unit of work.

        Returns:
            Number of rows deleted (0 or 1).
        """
        cursor = uow.execute("DELETE FROM transactions WHERE id = ?", (transaction_id,))
        return cursor.rowcount

    def _row_to_transaction(self, row: tuple) -> Transaction:
        """Convert a database row to a Transaction object."""
        return Transaction(
            id=row[0],
            description=row[1],
            amount=from_cents(row[2]),
            transaction_date=date.fromisoformat(row[3]),
            category_id=row[4],
            created_at=datetime.fromisoformat(row[5]) if row[5] else None,
            category_name=row[6],
            category_type=row[7],
        )
