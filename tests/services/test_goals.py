from datetime import date
from decimal import Decimal

import pytest

from errors import InvariantViolation, NotFound, ValidationError
from tests.helpers import assert_goal_invariant


class TestGoalService:
    """Tests for GoalService CRUD."""

    def test_create_goal(self, services):
        goal = services.goals.create(
            "  Emergency fund ", "1000", date(2026, 1, 1), "Three months of rent"
        )

        assert goal.id > 0
        assert goal.name == "Emergency fund"
        assert goal.target_amount == Decimal("1000.00")
        assert goal.current_amount == Decimal("0.00")
        assert goal.target_date == date(2026, 1, 1)
        assert goal.notes == "Three months of rent"
        assert goal.created_at is not None

    def test_create_goal_with_iso_target_date(self, services):
        goal = services.goals.create("Car", 5000, "2027-06-30")

        assert goal.target_date == date(2027, 6, 30)

    @pytest.mark.parametrize("target", [0, -10, "abc", None])
    def test_create_invalid_target_raises_error(self, services, target):
        with pytest.raises(ValidationError):
            services.goals.create("Car", target)

    @pytest.mark.parametrize("name", ["", "  ", None, "x" * 151])
    def test_create_invalid_name_raises_error(self, services, name):
        with pytest.raises(ValidationError):
            services.goals.create(name, 100)

    def test_create_invalid_target_date_raises_error(self, services):
        with pytest.raises(ValidationError, match="YYYY-MM-DD"):
            services.goals.create("Car", 100, "next year")

    def test_find_goal_not_found(self, services):
        assert services.goals.find(9999) is None

    def test_find_all_newest_first(self, services):
        first = services.goals.create("First", 100)
        second = services.goals.create("Second", 200)

        goals = services.goals.find_all()

        assert [g.id for g in goals] == [second.id, first.id]

    def test_update_goal_keeps_current_amount(self, services):
        goal = services.goals.create("Bike", 300)
        services.goals.add_contribution(goal.id, 50)

        updated = services.goals.update(goal.id, "Road bike", 450, None, "Carbon frame")

        assert updated.name == "Road bike"
        assert updated.target_amount == Decimal("450.00")
        assert updated.current_amount == Decimal("50.00")
        assert updated.notes == "Carbon frame"

    def test_update_nonexistent_goal_raises_error(self, services):
        with pytest.raises(NotFound, match="Goal with ID 9999 not found"):
            services.goals.update(9999, "Name", 100)

    def test_delete_goal_removes_contributions(self, services):
        goal = services.goals.create("Bike", 300)
        services.goals.add_contribution(goal.id, 50)

        assert services.goals.delete(goal.id) is True
        assert services.goals.find(goal.id) is None
        assert services.goals.find_contributions(goal.id) == []

    def test_delete_nonexistent_goal(self, services):
        assert services.goals.delete(9999) is False

    def test_progress_properties(self, services):
        goal = services.goals.create("Trip", 200)
        _, goal = services.goals.add_contribution(goal.id, 50)

        assert goal.progress == 0.25
        assert goal.remaining_amount == Decimal("150.00")
        assert not goal.is_complete

        _, goal = services.goals.add_contribution(goal.id, 175)

        assert goal.progress == 1.0
        assert goal.remaining_amount == Decimal("0.00")
        assert goal.is_complete


class TestGoalContributions:
    """Tests for manual contributions and in-unit-of-work operations."""

    def test_add_contribution(self, services):
        goal = services.goals.create("Trip", 200)

        contribution, updated = services.goals.add_contribution(
            goal.id, "25.50", "Birthday money", "2025-01-10"
        )

        assert contribution.amount == Decimal("25.50")
        assert contribution.contribution_date == date(2025, 1, 10)
        assert contribution.notes == "Birthday money"
        assert contribution.source_transaction_id is None
        assert updated.current_amount == Decimal("25.50")
        assert_goal_invariant(services, goal.id)

    def test_add_contribution_defaults_to_today(self, services):
        goal = services.goals.create("Trip", 200)

        contribution, _ = services.goals.add_contribution(goal.id, 10)

        assert contribution.contribution_date == date.today()

    def test_add_contribution_to_missing_goal(self, services):
        with pytest.raises(NotFound):
            services.goals.add_contribution(9999, 10)

        with services.db_manager.connect() as conn:
            assert conn.execute("SELECT COUNT(*) FROM goal_contributions").fetchone()[0] == 0

    @pytest.mark.parametrize("amount", [0, -1, "ten"])
    def test_add_invalid_contribution_raises_error(self, services, amount):
        goal = services.goals.create("Trip", 200)

        with pytest.raises(ValidationError):
            services.goals.add_contribution(goal.id, amount)

    def test_find_contributions_newest_first(self, services):
        goal = services.goals.create("Trip", 200)
        services.goals.add_contribution(goal.id, 10, contribution_date=date(2025, 1, 1))
        services.goals.add_contribution(goal.id, 20, contribution_date=date(2025, 2, 1))

        contributions = services.goals.find_contributions(goal.id)

        assert [c.amount for c in contributions] == [Decimal("20.00"), Decimal("10.00")]

    def test_adjust_amount_missing_goal_raises_not_found(self, services):
        with pytest.raises(NotFound):
            with services.db_manager.unit_of_work() as uow:
                services.goals.adjust_amount(uow, 9999, Decimal("5"))

    def test_adjust_amount_below_zero_raises_invariant_violation(self, services):
        goal = services.goals.create("Trip", 200)

        with pytest.raises(InvariantViolation):
            with services.db_manager.unit_of_work() as uow:
                services.goals.adjust_amount(uow, goal.id, Decimal("-0.01"))

        assert services.goals.find(goal.id).current_amount == Decimal("0.00")

    def test_get_in_unit_of_work_sees_own_writes(self, services):
        goal = services.goals.create("Trip", 200)

        with services.db_manager.unit_of_work() as uow:
            services.goals.adjust_amount(uow, goal.id, Decimal("12.34"))
            assert services.goals.get(uow, goal.id).current_amount == Decimal("12.34")

    def test_get_missing_goal_raises_not_found(self, services):
        with pytest.raises(NotFound):
            with services.db_manager.unit_of_work() as uow:
                services.goals.get(uow, 9999)

    def test_verify_totals_passes(self, services):
        goal = services.goals.create("Trip", 200)
        services.goals.add_contribution(goal.id, 10)

        services.goals.verify_totals()

    def test_verify_totals_detects_drift(self, services):
        goal = services.goals.create("Trip", 200)
        services.goals.add_contribution(goal.id, 10)
        with services.db_manager.connect() as conn:
            conn.execute("UPDATE goals SET current_amount_cents = 999 WHERE id = ?", (goal.id,))
            conn.commit()

        with pytest.raises(InvariantViolation) as exc_info:
            services.goals.verify_totals()

        assert exc_info.value.goal_id == goal.id
        assert "9.99" in str(exc_info.value)
