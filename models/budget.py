"""Budget models for per-category monthly allocations."""

from dataclasses import dataclass
from decimal import Decimal
from typing import Optional


@dataclass
class Budget:
    """Amount allocated to a category for one calendar month.

    Attributes:
        category_id: Category the budget applies to.
        year: Calendar year, e.g. 2025.
        month: Calendar month (1-12).
        budget_amount: Allocated amount, never negative.
    """

    category_id: int
    year: int
    month: int
    budget_amount: Decimal


@dataclass
class CategoryBudget:
    """A category with its budget for a given month, if one is set."""

    category_id: int
    category_name: str
    category_type: str
    budget_amount: Optional[Decimal]
