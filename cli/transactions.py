#!/usr/bin/env python3

import sys
import csv
from datetime import date
from pathlib import Path
from errors import PennywiseError
from logger import get_logger
from tools.aggregations import get_period_summary, income_expense_split

logger = get_logger()


def _parse_month(value):
    """Parse a YYYY/MM string into (year, month)."""
    year, month = value.split("/")
    year = int(year)
    month = int(month)
    if month < 1 or month > 12:
        raise ValueError("Month must be between 1 and 12")
    return year, month


def _resolve_category(services, category_input):
    """Look up a category by ID first, then by name."""
    try:
        return services.categories.find(int(category_input))
    except ValueError:
        return services.categories.find_by_name(category_input)


def _fetch_transactions(args, services):
    category_ids = None
    if args.category:
        category = _resolve_category(services, args.category)
        if not category:
            logger.error(f"Category '{args.category}' not found.")
            logger.info("Use 'python -m cli categories list' to see available categories.")
            sys.exit(1)
        category_ids = [category.id]

    if args.month:
        try:
            year, month = _parse_month(args.month)
        except ValueError as e:
            logger.error(f"Invalid month: {e}. Use YYYY/MM format.")
            sys.exit(1)
        return services.transactions.get_transactions_by_month(
            year, month, category_ids=category_ids
        )

    if category_ids:
        return services.transactions.get_transactions_by_date_range(
            date.min.isoformat(), date.max.isoformat(), category_ids=category_ids
        )
    return services.transactions.find_all()


def cmd_list(args, services):
    """List transactions, optionally for one month or category."""
    transactions = _fetch_transactions(args, services)

    if not transactions:
        logger.info("No transactions found.")
        return

    logger.info("\nTransactions:")
    logger.info("=" * 80)
    for t in transactions:
        category = t.category_name or "Uncategorized"
        description = t.description or ""
        logger.info(
            f"{t.id:>6}  {t.transaction_date.isoformat()}  {t.amount:>10}  "
            f"{category:<20}  {description[:30]}"
        )

    split = income_expense_split(transactions)
    logger.info("-" * 80)
    logger.info(f"Income: {split['income_total']}")
    logger.info(f"Expenses: {split['expense_total']}")
    logger.info(f"Net: {split['net']}")
    logger.info(f"\nTotal transactions: {len(transactions)}")


def cmd_add(args, services):
    """Record a transaction, optionally funding a goal with it."""
    category = _resolve_category(services, args.category)
    if not category:
        logger.error(f"Category '{args.category}' not found.")
        logger.info("Use 'python -m cli categories list' to see available categories.")
        sys.exit(1)

    try:
        result = services.ledger.record_transaction(
            args.description,
            args.amount,
            args.date or date.today(),
            category.id,
            contribute_to_goal_id=args.goal,
        )
    except PennywiseError as e:
        logger.error(f"Error recording transaction: {e}")
        sys.exit(1)

    logger.info(f"✓ Transaction recorded with ID: {result.transaction_id}")
    logger.info(f"  Amount: {result.transaction.amount}")
    logger.info(f"  Category: {category.name} ({category.type})")
    if result.updated_goal:
        goal = result.updated_goal
        logger.info(
            f"  Contributed to goal '{goal.name}': "
            f"{goal.current_amount} / {goal.target_amount}"
        )


def cmd_delete(args, services):
    """Delete a transaction, reversing any goal contribution it made."""
    transaction = services.transactions.find(args.transaction_id)
    if not transaction:
        logger.error(f"Transaction with ID {args.transaction_id} not found.")
        sys.exit(1)

    logger.info("\nTransaction to delete:")
    logger.info(f"  ID: {transaction.id}")
    logger.info(f"  Date: {transaction.transaction_date.isoformat()}")
    logger.info(f"  Amount: {transaction.amount}")
    if transaction.description:
        logger.info(f"  Description: {transaction.description}")

    if not args.yes:
        confirm = (
            input("\nAre you sure you want to delete this transaction? (yes/no): ")
            .strip()
            .lower()
        )
        if confirm != "yes":
            logger.info("Deletion cancelled.")
            return

    try:
        result = services.ledger.delete_transaction(transaction.id)
    except PennywiseError as e:
        logger.error(f"Error deleting transaction: {e}")
        sys.exit(1)

    logger.info(f"✓ Transaction {transaction.id} deleted.")
    for contribution in result.reversed_contributions:
        logger.info(
            f"  Reversed contribution of {contribution.amount} to goal {contribution.goal_id}"
        )


def cmd_summary(args, services):
    """Show monthly income, expenses and net for a range of months."""
    try:
        start_year, start_month = _parse_month(args.start)
        end_year, end_month = _parse_month(args.end or args.start)
    except ValueError as e:
        logger.error(f"Invalid month: {e}. Use YYYY/MM format.")
        sys.exit(1)

    summary = get_period_summary(
        services, date(start_year, start_month, 1), date(end_year, end_month, 1)
    )
    categories = {c.id: c.name for c in services.categories.find_all()}

    for month_key, month_summary in summary.items():
        logger.info(f"\n{month_key}")
        logger.info("=" * 40)
        logger.info(f"Income:   {month_summary['income_total']:>12}")
        logger.info(f"Expenses: {month_summary['expense_total']:>12}")
        logger.info(f"Net:      {month_summary['net']:>12}")
        for category_id, amount in month_summary["expenses_by_category"].items():
            name = categories.get(category_id, "Uncategorized")
            logger.info(f"  {name:<20} {amount:>12}")


def cmd_export(args, services):
    """Export transactions to CSV."""
    transactions = _fetch_transactions(args, services)

    if not transactions:
        logger.info("No transactions found for the specified criteria.")
        return

    output_path = Path(args.output)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    with open(output_path, "w", newline="") as csvfile:
        writer = csv.DictWriter(
            csvfile,
            fieldnames=[
                "id",
                "transaction_date",
                "description",
                "amount",
                "category_id",
                "category_name",
                "category_type",
            ],
        )
        writer.writeheader()
        for transaction in transactions:
            writer.writerow(transaction.to_dict())

    logger.info(f"✓ Exported {len(transactions)} transaction(s) to {output_path}")


def setup_parser(subparsers):
    """Setup transactions subcommand parser.

    Args:
        subparsers: The subparsers object from the main CLI
    """
    parser = subparsers.add_parser(
        "transactions",
        help="Record and manage transactions",
        description="Record, list, delete and summarize transactions",
    )

    transactions_subparsers = parser.add_subparsers(
        title="subcommands",
        description="Available transaction commands",
        dest="subcommand",
        required=True,
    )

    # transactions list
    list_parser = transactions_subparsers.add_parser("list", help="List transactions")
    list_parser.add_argument("--month", help="Only this month (YYYY/MM)")
    list_parser.add_argument("--category", help="Only this category (ID or name)")
    list_parser.set_defaults(func=cmd_list)

    # transactions add
    add_parser = transactions_subparsers.add_parser("add", help="Record a transaction")
    add_parser.add_argument("amount", help="Positive amount, e.g. 12.50")
    add_parser.add_argument(
        "--category", required=True, help="Category ID or name"
    )
    add_parser.add_argument("--date", help="Transaction date (YYYY-MM-DD), default today")
    add_parser.add_argument("--description", help="Optional description")
    add_parser.add_argument(
        "--goal", type=int, help="ID of a goal to contribute this amount to"
    )
    add_parser.set_defaults(func=cmd_add)

    # transactions delete
    delete_parser = transactions_subparsers.add_parser(
        "delete", help="Delete a transaction by ID"
    )
    delete_parser.add_argument("transaction_id", type=int, help="ID of the transaction")
    delete_parser.add_argument(
        "--yes", action="store_true", help="Do not ask for confirmation"
    )
    delete_parser.set_defaults(func=cmd_delete)

    # transactions summary
    summary_parser = transactions_subparsers.add_parser(
        "summary", help="Monthly income and expense summary"
    )
    summary_parser.add_argument("start", help="First month (YYYY/MM)")
    summary_parser.add_argument("end", nargs="?", help="Last month (YYYY/MM)")
    summary_parser.set_defaults(func=cmd_summary)

    # transactions export
    export_parser = transactions_subparsers.add_parser(
        "export", help="Export transactions to CSV"
    )
    export_parser.add_argument("--output", required=True, help="Output CSV path")
    export_parser.add_argument("--month", help="Only this month (YYYY/MM)")
    export_parser.add_argument("--category", help="Only this category (ID or name)")
    export_parser.set_defaults(func=cmd_export)
