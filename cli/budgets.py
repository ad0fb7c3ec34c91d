#!/usr/bin/env python3

import sys
from datetime import date
from errors import PennywiseError
from logger import get_logger
from tools.aggregations import budget_usage

logger = get_logger()


def _month_or_current(value):
    if not value:
        today = date.today()
        return today.year, today.month
    year, month = value.split("/")
    return int(year), int(month)


def cmd_show(args, services):
    """Show budgets and spending for a month."""
    try:
        year, month = _month_or_current(args.month)
    except ValueError:
        logger.error("Invalid month. Use YYYY/MM format.")
        sys.exit(1)

    usage = budget_usage(services, year, month)
    if not usage:
        logger.info("No categories found.")
        return

    logger.info(f"\nBudgets for {year:04d}/{month:02d}")
    logger.info("=" * 80)
    for entry in usage:
        budget = entry["budget_amount"]
        budget_text = str(budget) if budget is not None else "-"
        remaining_text = str(entry["remaining"]) if budget is not None else "-"
        logger.info(
            f"{entry['category_name']:<25} budget {budget_text:>10}  "
            f"spent {entry['spent']:>10}  remaining {remaining_text:>10}"
        )


def cmd_set(args, services):
    """Set the budget for a category in a month."""
    try:
        year, month = _month_or_current(args.month)
    except ValueError:
        logger.error("Invalid month. Use YYYY/MM format.")
        sys.exit(1)

    try:
        budget = services.budgets.set(args.category_id, year, month, args.amount)
    except PennywiseError as e:
        logger.error(f"Error setting budget: {e}")
        sys.exit(1)

    logger.info(
        f"✓ Budget for category {budget.category_id} in "
        f"{budget.year:04d}/{budget.month:02d} set to {budget.budget_amount}"
    )


def setup_parser(subparsers):
    """Setup budgets subcommand parser.

    Args:
        subparsers: The subparsers object from the main CLI
    """
    parser = subparsers.add_parser(
        "budgets",
        help="Manage monthly budgets",
        description="Show and set per-category monthly budgets",
    )

    budgets_subparsers = parser.add_subparsers(
        title="subcommands",
        description="Available budget commands",
        dest="subcommand",
        required=True,
    )

    # budgets show
    show_parser = budgets_subparsers.add_parser(
        "show", help="Show budgets and spending for a month"
    )
    show_parser.add_argument("--month", help="Month (YYYY/MM), default current month")
    show_parser.set_defaults(func=cmd_show)

    # budgets set
    set_parser = budgets_subparsers.add_parser("set", help="Set a category budget")
    set_parser.add_argument("category_id", type=int, help="ID of the category")
    set_parser.add_argument("amount", help="Budget amount (0 or more)")
    set_parser.add_argument("--month", help="Month (YYYY/MM), default current month")
    set_parser.set_defaults(func=cmd_set)
