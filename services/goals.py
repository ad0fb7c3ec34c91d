"""Goal service for savings goals and their contributions."""

import sqlite3
from datetime import date, datetime
from decimal import Decimal
from typing import List, Optional, Tuple

from errors import InvariantViolation, NotFound, ValidationError
from logger import get_logger
from models.dates import parse_date
from models.goal import Goal, GoalContribution
from models.money import from_cents, parse_amount, to_cents

logger = get_logger()

_GOAL_SELECT_FIELDS = """id, name, target_amount_cents, current_amount_cents,
       target_date, notes, created_at"""

_CONTRIBUTION_SELECT_FIELDS = """id, goal_id, amount_cents, contribution_date,
       notes, source_transaction_id"""

_MAX_NAME_LENGTH = 150


def _validate_goal_fields(name: str, target_amount) -> Tuple[str, Decimal]:
    if not isinstance(name, str) or not name.strip():
        raise ValidationError("Goal name is required.")
    name = name.strip()
    if len(name) > _MAX_NAME_LENGTH:
        raise ValidationError(f"Goal name cannot exceed {_MAX_NAME_LENGTH} characters.")

    target = parse_amount(target_amount, "Target amount")
    if target <= 0:
        raise ValidationError("Valid positive target amount is required.")
    return name, target


class GoalService:
    """Service for managing savings goals.

    A goal's current_amount is only ever moved by adjust_amount, which
    increments in SQL so concurrent writers never lose an update.
    """

    def __init__(self, db_manager):
        """Initialize the goal service.

        Args:
            db_manager: Database manager instance for database operations.
        """
        self.db_manager = db_manager

    def find_all(self) -> List[Goal]:
        """Get all goals, newest first."""
        with self.db_manager.connect() as conn:
            cursor = conn.execute(
                f"SELECT {_GOAL_SELECT_FIELDS} FROM goals ORDER BY created_at DESC, id DESC"
            )
            return [self._row_to_goal(row) for row in cursor.fetchall()]

    def find(self, goal_id: int) -> Optional[Goal]:
        """Get a single goal by ID.

        Returns:
            Goal object if found, None otherwise.
        """
        with self.db_manager.connect() as conn:
            row = conn.execute(
                f"SELECT {_GOAL_SELECT_FIELDS} FROM goals WHERE id = ?", (goal_id,)
            ).fetchone()

            if row:
                return self._row_to_goal(row)
            return None

    def create(
        self,
        name: str,
        target_amount,
        target_date=None,
        notes: Optional[str] = None,
    ) -> Goal:
        """Create a new goal with nothing saved yet.

        Args:
            name: Goal name (at most 150 characters).
            target_amount: Positive amount to save.
            target_date: Optional date or YYYY-MM-DD string.
            notes: Optional free text.

        Returns:
            The created Goal.

        Raises:
            ValidationError: If any field is invalid.
        """
        name, target = _validate_goal_fields(name, target_amount)
        parsed_date = parse_date(target_date, "target date") if target_date else None

        with self.db_manager.connect() as conn:
            cursor = conn.execute(
                """
                INSERT INTO goals (name, target_amount_cents, current_amount_cents, target_date, notes)
                VALUES (?, ?, 0, ?, ?)
                """,
                (
                    name,
                    to_cents(target),
                    parsed_date.isoformat() if parsed_date else None,
                    notes,
                ),
            )
            conn.commit()
            goal_id = cursor.lastrowid

        logger.debug(f"Created goal {goal_id} ({name}, target {target})")
        return self.find(goal_id)

    def update(
        self,
        goal_id: int,
        name: str,
        target_amount,
        target_date=None,
        notes: Optional[str] = None,
    ) -> Goal:
        """Update a goal's descriptive fields.

        current_amount is left alone; it only moves with contributions.

        Raises:
            ValidationError: If any field is invalid.
            NotFound: If the goal does not exist.
        """
        name, target = _validate_goal_fields(name, target_amount)
        parsed_date = parse_date(target_date, "target date") if target_date else None

        with self.db_manager.connect() as conn:
            cursor = conn.execute(
                """
                UPDATE goals
                SET name = ?, target_amount_cents = ?, target_date = ?, notes = ?
                WHERE id = ?
                """,
                (
                    name,
                    to_cents(target),
                    parsed_date.isoformat() if parsed_date else None,
                    notes,
                    goal_id,
                ),
            )
            conn.commit()

            if cursor.rowcount == 0:
                raise NotFound("Goal", goal_id)

        return self.find(goal_id)

    def delete(self, goal_id: int) -> bool:
        """Delete a goal and all of its contributions.

        Returns:
            True if the goal was deleted, False if not found.
        """
        with self.db_manager.connect() as conn:
            cursor = conn.execute("DELETE FROM goals WHERE id = ?", (goal_id,))
            conn.commit()
            return cursor.rowcount > 0

    def add_contribution(
        self,
        goal_id: int,
        amount,
        notes: Optional[str] = None,
        contribution_date=None,
    ) -> Tuple[GoalContribution, Goal]:
        """Record a manual contribution and raise the goal's total atomically.

        Args:
            goal_id: Goal to contribute to.
            amount: Positive amount.
            notes: Optional free text.
            contribution_date: Date or YYYY-MM-DD string, defaults to today.

        Returns:
            Tuple of (contribution, goal after the contribution).

        Raises:
            ValidationError: If the amount or date is invalid.
            NotFound: If the goal does not exist. Nothing is persisted.
        """
        contribution_amount = parse_amount(amount, "Contribution amount")
        if contribution_amount <= 0:
            raise ValidationError("Valid positive contribution amount is required.")
        when = (
            parse_date(contribution_date, "contribution date")
            if contribution_date
            else date.today()
        )

        with self.db_manager.unit_of_work() as uow:
            contribution = self.insert_contribution(
                uow, goal_id, contribution_amount, when, notes
            )
            goal = self.adjust_amount(uow, goal_id, contribution_amount)

        logger.info(f"Contributed {contribution_amount} to goal {goal_id}")
        return contribution, goal

    def find_contributions(self, goal_id: int) -> List[GoalContribution]:
        """Get all contributions to a goal, newest first."""
        with self.db_manager.connect() as conn:
            cursor = conn.execute(
                f"""
                SELECT {_CONTRIBUTION_SELECT_FIELDS}
                FROM goal_contributions
                WHERE goal_id = ?
                ORDER BY contribution_date DESC, id DESC
                """,
                (goal_id,),
            )
            return [self._row_to_contribution(row) for row in cursor.fetchall()]

    def verify_totals(self) -> None:
        """Check every goal's running total against its contributions.

        Raises:
            InvariantViolation: For the first goal whose total has drifted.
        """
        with self.db_manager.connect() as conn:
            row = conn.execute(
                """
                SELECT g.id, g.current_amount_cents, COALESCE(SUM(c.amount_cents), 0) AS total
                FROM goals g
                LEFT JOIN goal_contributions c ON c.goal_id = g.id
                GROUP BY g.id
                HAVING g.current_amount_cents != total
                ORDER BY g.id
                LIMIT 1
                """
            ).fetchone()

        if row:
            raise InvariantViolation(
                f"Goal {row[0]} has current amount {from_cents(row[1])} "
                f"but its contributions total {from_cents(row[2])}",
                goal_id=row[0],
            )

    # Operations below run inside the caller's unit of work and never commit.

    def get(self, uow, goal_id: int) -> Goal:
        """Get a goal inside an open unit of work.

        Raises:
            NotFound: If the goal does not exist.
        """
        row = uow.execute(
            f"SELECT {_GOAL_SELECT_FIELDS} FROM goals WHERE id = ?", (goal_id,)
        ).fetchone()
        if row is None:
            raise NotFound("Goal", goal_id)
        return self._row_to_goal(row)

    def adjust_amount(self, uow, goal_id: int, delta: Decimal) -> Goal:
        """Move a goal's running total by delta.

        Args:
            uow: The caller's UnitOfWork.
            goal_id: Goal to adjust.
            delta: Signed amount to add.

        Returns:
            The goal as seen after the adjustment.

        Raises:
            NotFound: If the goal does not exist.
            InvariantViolation: If the total would drop below zero.
        """
        try:
            cursor = uow.execute(
                """
                UPDATE goals
                SET current_amount_cents = current_amount_cents + ?
                WHERE id = ?
                """,
                (to_cents(delta), goal_id),
            )
        except sqlite3.IntegrityError as e:
            if "CHECK constraint" not in str(e):
                raise
            raise InvariantViolation(
                f"Adjusting goal {goal_id} by {delta} would make its total negative",
                goal_id=goal_id,
            )

        if cursor.rowcount == 0:
            raise NotFound("Goal", goal_id)

        logger.debug(f"Adjusted goal {goal_id} by {delta}")
        return self.get(uow, goal_id)

    def insert_contribution(
        self,
        uow,
        goal_id: int,
        amount: Decimal,
        contribution_date: date,
        notes: Optional[str] = None,
        source_transaction_id: Optional[int] = None,
    ) -> GoalContribution:
        """Insert a contribution row without touching the goal's total.

        Raises:
            NotFound: If the goal does not exist.
        """
        try:
            cursor = uow.execute(
                """
                INSERT INTO goal_contributions
                    (goal_id, amount_cents, contribution_date, notes, source_transaction_id)
                VALUES (?, ?, ?, ?, ?)
                """,
                (
                    goal_id,
                    to_cents(amount),
                    contribution_date.isoformat(),
                    notes,
                    source_transaction_id,
                ),
            )
        except sqlite3.IntegrityError as e:
            # goal_id is the only reference the caller does not control
            if "FOREIGN KEY" not in str(e):
                raise
            raise NotFound("Goal", goal_id)

        return GoalContribution(
            id=cursor.lastrowid,
            goal_id=goal_id,
            amount=amount,
            contribution_date=contribution_date,
            notes=notes,
            source_transaction_id=source_transaction_id,
        )

    def find_contributions_by_source(
        self, uow, transaction_id: int
    ) -> List[GoalContribution]:
        """Get contributions spawned by a transaction inside an open unit of work."""
        cursor = uow.execute(
            f"""
            SELECT {_CONTRIBUTION_SELECT_FIELDS}
            FROM goal_contributions
            WHERE source_transaction_id = ?
            ORDER BY id
            """,
            (transaction_id,),
        )
        return [self._row_to_contribution(row) for row in cursor.fetchall()]

    def delete_contribution(self, uow, contribution_id: int) -> bool:
        """Delete a contribution row without touching the goal's total."""
        cursor = uow.execute(
            "DELETE FROM goal_contributions WHERE id = ?", (contribution_id,)
        )
        return cursor.rowcount > 0

    def _row_to_goal(self, row: tuple) -> Goal:
        return Goal(
            id=row[0],
            name=row[1],
            target_amount=from_cents(row[2]),
            current_amount=from_cents(row[3]),
            target_date=date.fromisoformat(row[4]) if row[4] else None,
            notes=row[5],
            created_at=datetime.fromisoformat(row[6]) if row[6] else None,
        )

    def _row_to_contribution(self, row: tuple) -> GoalContribution:
        return GoalContribution(
            id=row[0],
            goal_id=row[1],
            amount=from_cents(row[2]),
            contribution_date=date.fromisoformat(row[3]),
            notes=row[4],
            source_transaction_id=row[5],
        )
