"""Savings goal and contribution models."""

from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from typing import Optional


@dataclass
class Goal:
    """Represents a savings goal.

    Attributes:
        id: Unique identifier (auto-generated).
        name: Goal name.
        target_amount: Amount to save, always positive.
        current_amount: Running total of all contributions to this goal.
        target_date: Optional date the user wants to reach the target by.
        notes: Optional free text.
        created_at: Timestamp when the goal was created.
    """

    id: int
    name: str
    target_amount: Decimal
    current_amount: Decimal
    target_date: Optional[date] = None
    notes: Optional[str] = None
    created_at: Optional[datetime] = None

    @property
    def remaining_amount(self) -> Decimal:
        """Amount still needed to reach the target (never negative)."""
        return max(self.target_amount - self.current_amount, Decimal("0.00"))

    @property
    def progress(self) -> float:
        """Fraction of the target reached, capped at 1.0."""
        return min(float(self.current_amount / self.target_amount), 1.0)

    @property
    def is_complete(self) -> bool:
        return self.current_amount >= self.target_amount


@dataclass
class GoalContribution:
    """Money applied toward a goal.

    Attributes:
        id: Unique identifier (auto-generated).
        goal_id: Goal this contribution funds.
        amount: Contributed amount, always positive.
        contribution_date: Date of the contribution.
        notes: Optional free text.
        source_transaction_id: Transaction that spawned this contribution,
            None for manual contributions.
    """

    id: int
    goal_id: int
    amount: Decimal
    contribution_date: date
    notes: Optional[str] = None
    source_transaction_id: Optional[int] = None
