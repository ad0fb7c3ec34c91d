"""Ledger service: the write path that spans transactions and goals.

Recording a transaction can earmark it as a contribution toward a goal.
The transaction row, the contribution row and the goal's running total then
change together in one unit of work, and deleting the transaction reverses
the contribution in the same way. After every committed call each goal's
current_amount equals the sum of its contributions.
"""

from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import List, Optional

from errors import NotFound, ValidationError
from logger import get_logger
from models.dates import parse_date
from models.goal import Goal, GoalContribution
from models.money import parse_amount
from models.transaction import Transaction

logger = get_logger()


@dataclass
class RecordResult:
    """Outcome of recording a transaction.

    Attributes:
        transaction: The stored transaction.
        updated_goal: Goal snapshot after the contribution, None if no goal was funded.
        contribution: The contribution created, None if no goal was funded.
    """

    transaction: Transaction
    updated_goal: Optional[Goal] = None
    contribution: Optional[GoalContribution] = None

    @property
    def transaction_id(self) -> int:
        return self.transaction.id


@dataclass
class DeleteResult:
    """Outcome of deleting a transaction."""

    transaction_id: int
    reversed_contributions: List[GoalContribution] = field(default_factory=list)


def contribution_note(transaction_id: int) -> str:
    """Human readable note for a contribution spawned by a transaction."""
    return f"Contribution from transaction #{transaction_id}"


class LedgerService:
    """Creates and deletes transactions while keeping goal totals consistent.

    Args:
        db_manager: Database manager that hands out units of work.
        transactions: TransactionService for the transaction rows.
        categories: CategoryService used to classify transactions.
        goals: GoalService for contributions and running totals.
    """

    def __init__(self, db_manager, transactions, categories, goals):
        self.db_manager = db_manager
        self.transactions = transactions
        self.categories = categories
        self.goals = goals

    def record_transaction(
        self,
        description: Optional[str],
        amount,
        transaction_date,
        category_id: int,
        contribute_to_goal_id: Optional[int] = None,
        uow=None,
    ) -> RecordResult:
        """Record a transaction, optionally contributing its amount to a goal.

        Args:
            description: Optional free text.
            amount: Positive amount (Decimal, int, float or numeric string).
            transaction_date: date or YYYY-MM-DD string.
            category_id: Category of the transaction.
            contribute_to_goal_id: Goal to fund with this transaction, if any.
            uow: Caller's UnitOfWork. When given, nothing is committed here.

        Returns:
            RecordResult with the transaction and, when a goal was funded,
            the contribution and the goal after the contribution.

        Raises:
            ValidationError: If an argument is missing or malformed.
            NotFound: If the category or goal does not exist. Nothing is persisted.
            StorageError: If the database fails. Nothing is persisted.
        """
        amount = parse_amount(amount, "Transaction amount")
        if amount <= 0:
            raise ValidationError("Transaction amount must be positive.")
        transaction_date = parse_date(transaction_date, "transaction date")
        if category_id is None:
            raise ValidationError("Category is required.")
        if isinstance(description, str):
            description = description.strip() or None

        with self._unit_of_work(uow) as work:
            category_type = self.categories.get_type(work, category_id)
            transaction = self.transactions.insert(
                work, description, amount, transaction_date, category_id
            )
            transaction.category_type = category_type
            logger.debug(
                f"Inserted transaction {transaction.id} ({category_type}, {amount})"
            )

            if contribute_to_goal_id is None:
                result = RecordResult(transaction=transaction)
            else:
                contribution = self.goals.insert_contribution(
                    work,
                    contribute_to_goal_id,
                    amount,
                    transaction_date,
                    notes=contribution_note(transaction.id),
                    source_transaction_id=transaction.id,
                )
                goal = self.goals.adjust_amount(work, contribute_to_goal_id, amount)
                result = RecordResult(
                    transaction=transaction,
                    updated_goal=goal,
                    contribution=contribution,
                )

        if contribute_to_goal_id is None:
            logger.info(f"Recorded transaction {transaction.id} for {amount}")
        else:
            logger.info(
                f"Recorded transaction {transaction.id} for {amount}, "
                f"goal {contribute_to_goal_id} now at {result.updated_goal.current_amount}"
            )
        return result

    def delete_transaction(self, transaction_id: int, uow=None) -> DeleteResult:
        """Delete a transaction and reverse any contribution it produced.

        Args:
            transaction_id: Transaction to delete.
            uow: Caller's UnitOfWork. When given, nothing is committed here.

        Returns:
            DeleteResult listing the contributions that were reversed.

        Raises:
            NotFound: If the transaction does not exist. Nothing is changed.
            StorageError: If the database fails. Nothing is changed.
        """
        with self._unit_of_work(uow) as work:
            contributions = self.goals.find_contributions_by_source(work, transaction_id)

            for contribution in contributions:
                self.goals.adjust_amount(work, contribution.goal_id, -contribution.amount)
                self.goals.delete_contribution(work, contribution.id)
                logger.debug(
                    f"Reversed contribution {contribution.id} of {contribution.amount} "
                    f"to goal {contribution.goal_id}"
                )

            if self.transactions.delete(work, transaction_id) == 0:
                raise NotFound("Transaction", transaction_id)

        logger.info(
            f"Deleted transaction {transaction_id}, "
            f"reversed {len(contributions)} contribution(s)"
        )
        return DeleteResult(
            transaction_id=transaction_id, reversed_contributions=contributions
        )

    @contextmanager
    def _unit_of_work(self, uow):
        if uow is not None:
            yield uow
        else:
            with self.db_manager.unit_of_work() as own:
                yield own
