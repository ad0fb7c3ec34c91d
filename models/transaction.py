from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from typing import Optional


@dataclass
class Transaction:
    id: int
    description: Optional[str]
    amount: Decimal  # always positive, two decimal places
    transaction_date: date
    category_id: Optional[int]  # None once the category is deleted
    created_at: Optional[datetime] = None
    # Filled in from the categories join when read back
    category_name: Optional[str] = None
    category_type: Optional[str] = None

    @property
    def type(self) -> str:
        """Classification used by the aggregators.

        Uncategorized transactions count as expenses.
        """
        return self.category_type or "expense"

    def to_dict(self) -> dict:
        """Convert transaction to a plain dictionary."""
        return {
            "id": self.id,
            "description": self.description,
            "amount": str(self.amount),
            "transaction_date": self.transaction_date.isoformat(),
            "category_id": self.category_id,
            "category_name": self.category_name,
            "category_type": self.category_type,
        }
