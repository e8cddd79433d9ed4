from datetime import date, datetime
from typing import List

from pydantic import BaseModel


class CategoryBreakdown(BaseModel):
    category: str
    amount: float
    count: int


class ExpenseGroup(BaseModel):
    description: str
    amount: float


class MonthlyTotals(BaseModel):
    month: str  # YYYY-MM
    sales: float = 0.0
    income: float = 0.0
    purchases: float = 0.0
    expenses: float = 0.0
    net_profit: float = 0.0


class TopTransaction(BaseModel):
    id: str
    description: str
    amount: float
    category: str
    date: datetime


class ReportResponse(BaseModel):
    start_date: date
    end_date: date

    total_sales: float
    total_income: float
    total_revenue: float

    total_purchases: float
    total_expenses: float
    total_costs: float

    gross_profit: float
    net_profit: float

    category_breakdown: List[CategoryBreakdown]
    top_expenses: List[ExpenseGroup]
    monthly: List[MonthlyTotals]
    top_transactions: List[TopTransaction]
