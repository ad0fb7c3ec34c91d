"""Category model for transaction classification."""

from dataclasses import dataclass

CATEGORY_TYPES = ("expense", "income")
DEFAULT_COLOR = "#607D8B"


@dataclass
class Category:
    """Represents a user-defined transaction category.

    Attributes:
        id: Unique identifier (auto-generated).
        name: Category name (unique, at most 100 characters).
        type: Either "expense" or "income".
        color: Display color as a hex string, e.g. "#FF8800".
    """

    id: int
    name: str
    type: str = "expense"
    color: str = DEFAULT_COLOR

    @property
    def is_income(self) -> bool:
        return self.type == "income"
