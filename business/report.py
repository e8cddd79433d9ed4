"""
Profit & loss reporting over a user's transactions.

Everything here is pure computation over already-fetched rows.
"""

import calendar
from collections import defaultdict
from datetime import date, datetime, time
from typing import Dict, Iterable, List, Optional, Protocol, Tuple

from schemas.report import (
    CategoryBreakdown,
    ExpenseGroup,
    MonthlyTotals,
    ReportResponse,
    TopTransaction,
)

EXPENSE_KEY_LENGTH = 30
TOP_EXPENSES_LIMIT = 10
TOP_TRANSACTIONS_LIMIT = 5

# category -> MonthlyTotals field
_MONTHLY_FIELDS = {
    "sales": "sales",
    "income": "income",
    "purchase": "purchases",
    "expense": "expenses",
}


class ReportRow(Protocol):
    id: str
    category: str
    description: str
    amount: float
    created_at: datetime


def default_period(today: date) -> Tuple[date, date]:
    """First and last day of the month containing today."""
    last_day = calendar.monthrange(today.year, today.month)[1]
    return today.replace(day=1), today.replace(day=last_day)


def resolve_period(
    start_date: Optional[date], end_date: Optional[date], today: date
) -> Tuple[date, date]:
    default_start, default_end = default_period(today)
    return start_date or default_start, end_date or default_end


def period_bounds(start_date: date, end_date: date) -> Tuple[datetime, datetime]:
    """Inclusive datetime bounds: start 00:00:00 through end 23:59:59."""
    return datetime.combine(start_date, time.min), datetime.combine(end_date, time(23, 59, 59))


def _total(rows: List[ReportRow], category: str) -> float:
    return sum(float(row.amount) for row in rows if row.category == category)


def _count(rows: List[ReportRow], category: str) -> int:
    return sum(1 for row in rows if row.category == category)


def _top_expenses(rows: List[ReportRow]) -> List[ExpenseGroup]:
    groups: Dict[str, float] = defaultdict(float)
    for row in rows:
        if row.category == "expense":
            groups[(row.description or "")[:EXPENSE_KEY_LENGTH]] += float(row.amount)

    ranked = sorted(groups.items(), key=lambda item: item[1], reverse=True)
    return [
        ExpenseGroup(description=description, amount=amount)
        for description, amount in ranked[:TOP_EXPENSES_LIMIT]
    ]


def _monthly(rows: List[ReportRow]) -> List[MonthlyTotals]:
    months: Dict[str, Dict[str, float]] = {}
    for row in rows:
        field = _MONTHLY_FIELDS.get(row.category)
        if field is None:
            continue
        key = row.created_at.strftime("%Y-%m")
        bucket = months.setdefault(key, {"sales": 0.0, "income": 0.0, "purchases": 0.0, "expenses": 0.0})
        bucket[field] += float(row.amount)

    return [
        MonthlyTotals(
            month=month,
            net_profit=(totals["sales"] + totals["income"]) - (totals["purchases"] + totals["expenses"]),
            **totals,
        )
        for month, totals in sorted(months.items())
    ]


def _top_transactions(rows: List[ReportRow]) -> List[TopTransaction]:
    ranked = sorted(rows, key=lambda row: float(row.amount), reverse=True)
    return [
        TopTransaction(
            id=row.id,
            description=row.description,
            amount=float(row.amount),
            category=row.category,
            date=row.created_at,
        )
        for row in ranked[:TOP_TRANSACTIONS_LIMIT]
    ]


def build_report(transactions: Iterable[ReportRow], start_date: date, end_date: date) -> ReportResponse:
    """Build the P&L report for transactions already filtered to the period."""
    rows = list(transactions)

    total_sales = _total(rows, "sales")
    total_income = _total(rows, "income")
    total_purchases = _total(rows, "purchase")
    total_expenses = _total(rows, "expense")

    total_revenue = total_sales + total_income
    total_costs = total_purchases + total_expenses

    return ReportResponse(
        start_date=start_date,
        end_date=end_date,
        total_sales=total_sales,
        total_income=total_income,
        total_revenue=total_revenue,
        total_purchases=total_purchases,
        total_expenses=total_expenses,
        total_costs=total_costs,
        gross_profit=total_sales - total_purchases,
        net_profit=total_revenue - total_costs,
        category_breakdown=[
            CategoryBreakdown(category="Sales", amount=total_sales, count=_count(rows, "sales")),
            CategoryBreakdown(category="Income", amount=total_income, count=_count(rows, "income")),
            CategoryBreakdown(category="Purchases", amount=total_purchases, count=_count(rows, "purchase")),
            CategoryBreakdown(category="Expenses", amount=total_expenses, count=_count(rows, "expense")),
        ],
        top_expenses=_top_expenses(rows),
        monthly=_monthly(rows),
        top_transactions=_top_transactions(rows),
    )
