import calendar
from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass(frozen=True)
class Plan:
    amount: int  # paise
    name: str
    description: str
    duration_months: int


PLANS = {
    "monthly": Plan(
        amount=39900,
        name="Premium Monthly",
        description="Premium subscription - Monthly",
        duration_months=1,
    ),
    "yearly": Plan(
        amount=199900,
        name="Premium Yearly",
        description="Premium subscription - Yearly (Save ₹2,789)",
        duration_months=12,
    ),
}

PLAN_CURRENCY = "INR"


def get_plan(plan_type: Optional[str]) -> Optional[Plan]:
    if not plan_type:
        return None
    return PLANS.get(plan_type)


def add_months(start: datetime, months: int) -> datetime:
    """Calendar month arithmetic; the day is clamped to the target month's length."""
    month_index = start.month - 1 + months
    year = start.year + month_index // 12
    month = month_index % 12 + 1
    day = min(start.day, calendar.monthrange(year, month)[1])
    return start.replace(year=year, month=month, day=day)


def subscription_end_for(plan_type: Optional[str], start: datetime) -> datetime:
    """Yearly plans run 12 months; anything else is treated as monthly."""
    duration = 12 if plan_type == "yearly" else 1
    return add_months(start, duration)
