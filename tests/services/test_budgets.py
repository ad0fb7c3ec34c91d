from decimal import Decimal

import pytest

from errors import NotFound, ValidationError


class TestBudgetService:
    """Tests for BudgetService."""

    def test_set_budget(self, services):
        category = services.categories.create("Groceries")

        budget = services.budgets.set(category.id, 2025, 3, "400")

        assert budget.category_id == category.id
        assert budget.year == 2025
        assert budget.month == 3
        assert budget.budget_amount == Decimal("400.00")
        assert services.budgets.find(category.id, 2025, 3) == budget

    def test_set_budget_upserts(self, services):
        """Test that setting a budget twice replaces the amount."""
        category = services.categories.create("Groceries")
        services.budgets.set(category.id, 2025, 3, 400)

        services.budgets.set(category.id, 2025, 3, 350.25)

        assert services.budgets.find(category.id, 2025, 3).budget_amount == Decimal("350.25")
        with services.db_manager.connect() as conn:
            assert conn.execute("SELECT COUNT(*) FROM budgets").fetchone()[0] == 1

    def test_set_budget_zero_allowed(self, services):
        category = services.categories.create("Groceries")

        budget = services.budgets.set(category.id, 2025, 3, 0)

        assert budget.budget_amount == Decimal("0.00")

    def test_budgets_are_per_month(self, services):
        category = services.categories.create("Groceries")
        services.budgets.set(category.id, 2025, 3, 400)
        services.budgets.set(category.id, 2025, 4, 500)

        assert services.budgets.find(category.id, 2025, 3).budget_amount == Decimal("400.00")
        assert services.budgets.find(category.id, 2025, 4).budget_amount == Decimal("500.00")
        assert services.budgets.find(category.id, 2025, 5) is None

    def test_set_negative_budget_raises_error(self, services):
        category = services.categories.create("Groceries")

        with pytest.raises(ValidationError, match="negative"):
            services.budgets.set(category.id, 2025, 3, -1)

    @pytest.mark.parametrize("month", [0, 13])
    def test_set_invalid_month_raises_error(self, services, month):
        category = services.categories.create("Groceries")

        with pytest.raises(ValidationError, match="Month"):
            services.budgets.set(category.id, 2025, month, 10)

    @pytest.mark.parametrize("year, month", [(2025, "March"), (2025, None), ("next", 3)])
    def test_set_non_integer_period_raises_error(self, services, year, month):
        category = services.categories.create("Groceries")

        with pytest.raises(ValidationError, match="integers"):
            services.budgets.set(category.id, year, month, 10)

    def test_set_accepts_numeric_strings(self, services):
        category = services.categories.create("Groceries")

        budget = services.budgets.set(category.id, "2025", "3", 10)

        assert (budget.year, budget.month) == (2025, 3)

    def test_set_budget_missing_category_raises_not_found(self, services):
        with pytest.raises(NotFound, match="Category with ID 9999 not found"):
            services.budgets.set(9999, 2025, 3, 10)

    def test_find_for_month_includes_unbudgeted_categories(self, services):
        rent = services.categories.create("Rent")
        services.categories.create("Fun")
        services.budgets.set(rent.id, 2025, 3, 1200)
        services.budgets.set(rent.id, 2025, 4, 1300)

        entries = services.budgets.find_for_month(2025, 3)

        assert [(e.category_name, e.budget_amount) for e in entries] == [
            ("Fun", None),
            ("Rent", Decimal("1200.00")),
        ]

    def test_delete_budget(self, services):
        category = services.categories.create("Groceries")
        services.budgets.set(category.id, 2025, 3, 400)

        assert services.budgets.delete(category.id, 2025, 3) is True
        assert services.budgets.find(category.id, 2025, 3) is None
        assert services.budgets.delete(category.id, 2025, 3) is False
