from dataclasses import dataclass
from datetime import date, datetime

import pytest

from business.report import build_report, default_period, period_bounds, resolve_period


@dataclass
class Row:
    id: str
    category: str
    description: str
    amount: float
    created_at: datetime


def _rows():
    return [
        Row("s1", "sales", "Sold laptops", 50000, datetime(2024, 4, 3, 10, 0)),
        Row("s2", "sales", "Sold chairs", 8000, datetime(2024, 5, 1, 9, 0)),
        Row("i1", "income", "Bank interest", 1200, datetime(2024, 5, 2, 9, 0)),
        Row("p1", "purchase", "Bought stock", 20000, datetime(2024, 4, 10, 9, 0)),
        Row("e1", "expense", "Office rent for April", 5000, datetime(2024, 4, 1, 9, 0)),
        Row("e2", "expense", "Office rent for May", 5000, datetime(2024, 5, 1, 9, 0)),
        Row("e3", "expense", "Electricity", 900, datetime(2024, 5, 20, 9, 0)),
    ]


def test_totals_and_profit():
    report = build_report(_rows(), date(2024, 4, 1), date(2024, 5, 31))

    assert report.total_sales == 58000
    assert report.total_income == 1200
    assert report.total_revenue == 59200
    assert report.total_purchases == 20000
    assert report.total_expenses == 10900
    assert report.total_costs == 30900
    assert report.gross_profit == 38000
    assert report.net_profit == 28300


def test_category_breakdown_counts():
    report = build_report(_rows(), date(2024, 4, 1), date(2024, 5, 31))
    breakdown = {item.category: (item.amount, item.count) for item in report.category_breakdown}
    assert breakdown == {
        "Sales": (58000, 2),
        "Income": (1200, 1),
        "Purchases": (20000, 1),
        "Expenses": (10900, 3),
    }


def test_top_expenses_grouped_by_description_prefix():
    rows = [
        Row("a", "expense", "Office rent for the main branch - April", 100, datetime(2024, 4, 1)),
        Row("b", "expense", "Office rent for the main branch - May", 150, datetime(2024, 5, 1)),
        Row("c", "expense", "Tea", 400, datetime(2024, 5, 1)),
        Row("d", "sales", "Office rent for the main branch - sublet", 999, datetime(2024, 5, 1)),
    ]

    report = build_report(rows, date(2024, 4, 1), date(2024, 5, 31))

    assert [(g.description, g.amount) for g in report.top_expenses] == [
        ("Tea", 400),
        ("Office rent for the main branc", 250),
    ]


def test_top_expenses_limited_to_ten():
    rows = [Row(str(i), "expense", f"Item {i}", i, datetime(2024, 4, 1)) for i in range(15)]
    report = build_report(rows, date(2024, 4, 1), date(2024, 4, 30))
    assert len(report.top_expenses) == 10
    assert report.top_expenses[0].amount == 14


def test_monthly_buckets():
    report = build_report(_rows(), date(2024, 4, 1), date(2024, 5, 31))
    monthly = {m.month: m for m in report.monthly}

    assert list(monthly) == ["2024-04", "2024-05"]
    april, may = monthly["2024-04"], monthly["2024-05"]
    assert (april.sales, april.income, april.purchases, april.expenses) == (50000, 0, 20000, 5000)
    assert april.net_profit == 25000
    assert (may.sales, may.income, may.purchases, may.expenses) == (8000, 1200, 0, 5900)
    assert may.net_profit == 3300


def test_top_transactions():
    report = build_report(_rows(), date(2024, 4, 1), date(2024, 5, 31))
    assert [t.id for t in report.top_transactions] == ["s1", "p1", "s2", "e1", "e2"]


def test_empty_period():
    report = build_report([], date(2024, 4, 1), date(2024, 4, 30))
    assert report.net_profit == 0
    assert report.top_expenses == []
    assert report.monthly == []
    assert report.top_transactions == []
    assert [item.count for item in report.category_breakdown] == [0, 0, 0, 0]


@pytest.mark.parametrize(
    "today, expected",
    [
        (date(2024, 2, 14), (date(2024, 2, 1), date(2024, 2, 29))),
        (date(2023, 2, 14), (date(2023, 2, 1), date(2023, 2, 28))),
        (date(2024, 12, 31), (date(2024, 12, 1), date(2024, 12, 31))),
    ],
)
def test_default_period_is_current_month(today, expected):
    assert default_period(today) == expected


def test_resolve_period_keeps_explicit_dates():
    today = date(2024, 6, 15)
    assert resolve_period(None, None, today) == (date(2024, 6, 1), date(2024, 6, 30))
    assert resolve_period(date(2024, 1, 1), None, today) == (date(2024, 1, 1), date(2024, 6, 30))
    assert resolve_period(date(2024, 1, 1), date(2024, 3, 31), today) == (
        date(2024, 1, 1),
        date(2024, 3, 31),
    )


def test_period_bounds_include_whole_end_day():
    start, end = period_bounds(date(2024, 4, 1), date(2024, 4, 30))
    assert start == datetime(2024, 4, 1, 0, 0, 0)
    assert end == datetime(2024, 4, 30, 23, 59, 59)
