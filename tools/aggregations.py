"""Read-side aggregations over transactions.

These are stateless passes over transaction lists. They never write and
play no part in keeping goal totals consistent.
"""

from datetime import date
from decimal import Decimal
from typing import Dict, Iterable, List, Optional

from dateutil.relativedelta import relativedelta

from models.category import DEFAULT_COLOR, Category
from models.transaction import Transaction

UNCATEGORIZED = "Uncategorized"


def category_totals(transactions: Iterable[Transaction]) -> Dict[Optional[int], Decimal]:
    """Sum transaction amounts per category.

    Args:
        transactions: Transactions to aggregate.

    Returns:
        Dictionary mapping category_id (None for uncategorized) to total amount.
    """
    totals: Dict[Optional[int], Decimal] = {}
    for transaction in transactions:
        totals[transaction.category_id] = (
            totals.get(transaction.category_id, Decimal("0.00")) + transaction.amount
        )
    return totals


def income_expense_split(transactions: Iterable[Transaction]) -> Dict[str, Decimal]:
    """Split transactions into income and expense totals.

    Uncategorized transactions count as expenses.

    Returns:
        Dictionary with "income_total", "expense_total" and "net" (income - expenses).
    """
    income_total = Decimal("0.00")
    expense_total = Decimal("0.00")

    for transaction in transactions:
        if transaction.type == "income":
            income_total += transaction.amount
        else:
            expense_total += transaction.amount

    return {
        "income_total": income_total,
        "expense_total": expense_total,
        "net": income_total - expense_total,
    }


def group_by_category(transactions: Iterable[Transaction]) -> Dict[str, List[Transaction]]:
    """Group transactions by category name, keeping their input order.

    Transactions without a category are grouped under "Uncategorized".
    """
    groups: Dict[str, List[Transaction]] = {}
    for transaction in transactions:
        name = transaction.category_name or UNCATEGORIZED
        groups.setdefault(name, []).append(transaction)
    return groups


def chart_series(
    transactions: Iterable[Transaction],
    categories: Iterable[Category],
    type: Optional[str] = "expense",
) -> List[Dict]:
    """Build chart-ready data points, one per category.

    Args:
        transactions: Transactions to aggregate.
        categories: Categories used for labels and colors.
        type: Only include transactions of this type ("expense" or "income").
            None includes everything.

    Returns:
        List of {"label", "value", "color"} dictionaries, largest value first.
    """
    by_id = {category.id: category for category in categories}
    selected = [t for t in transactions if type is None or t.type == type]

    series = []
    for category_id, total in category_totals(selected).items():
        category = by_id.get(category_id)
        series.append(
            {
                "label": category.name if category else UNCATEGORIZED,
                "value": total,
                "color": category.color if category else DEFAULT_COLOR,
            }
        )

    series.sort(key=lambda point: (-point["value"], point["label"]))
    return series


def budget_usage(services, year: int, month: int) -> List[Dict]:
    """Compare each category's budget with what was spent in a month.

    Args:
        services: Services container with budget and transaction services.
        year: Calendar year.
        month: Calendar month (1-12).

    Returns:
        One dictionary per category, ordered by name:
        - "category_id", "category_name"
        - "budget_amount": Decimal, or None when no budget is set
        - "spent": Decimal total of the month's transactions in that category
        - "remaining": budget_amount - spent, or None when no budget is set
    """
    spent = category_totals(services.transactions.get_transactions_by_month(year, month))

    usage = []
    for entry in services.budgets.find_for_month(year, month):
        category_spent = spent.get(entry.category_id, Decimal("0.00"))
        usage.append(
            {
                "category_id": entry.category_id,
                "category_name": entry.category_name,
                "budget_amount": entry.budget_amount,
                "spent": category_spent,
                "remaining": (
                    entry.budget_amount - category_spent
                    if entry.budget_amount is not None
                    else None
                ),
            }
        )
    return usage


def get_period_summary(
    services,
    start_month: date,
    end_month: date,
    category_ids: Optional[List[int]] = None,
) -> Dict[str, Dict]:
    """Get summarized transaction data for a period, organized by month.

    Args:
        services: Services container with transaction service.
        start_month: Start of period (date object, day component ignored).
        end_month: End of period (date object, day component ignored).
        category_ids: Optional list of category IDs to filter by.

    Returns:
        Dictionary of month keys (format: "YYYY/MM") mapped to summaries:
        - "income_total": Total income for the month (Decimal)
        - "expense_total": Total expenses for the month (Decimal)
        - "net": Net amount (income - expenses) (Decimal)
        - "expenses_by_category": Dict mapping category_id to expense amount
          (None for uncategorized transactions)

    Example:
        {
            "2024/01": {
                "income_total": Decimal("1000.00"),
                "expense_total": Decimal("500.00"),
                "net": Decimal("500.00"),
                "expenses_by_category": {1: Decimal("200.00"), 2: Decimal("300.00")},
            },
            "2024/02": {...},
        }
    """
    result = {}

    current = start_month.replace(day=1)
    last = end_month.replace(day=1)

    while current <= last:
        month_key = f"{current.year:04d}/{current.month:02d}"

        transactions = services.transactions.get_transactions_by_month(
            current.year, current.month, category_ids=category_ids
        )
        expenses = [t for t in transactions if t.type == "expense"]

        summary = income_expense_split(transactions)
        summary["expenses_by_category"] = category_totals(expenses)
        result[month_key] = summary

        current += relativedelta(months=1)

    return result
