import math
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, field_validator


class TransactionCategory(str, Enum):
    sales = "sales"
    purchase = "purchase"
    expense = "expense"
    income = "income"


VALID_CATEGORIES = frozenset(category.value for category in TransactionCategory)
DEFAULT_CATEGORY = TransactionCategory.expense


def normalize_category(value: Any) -> str:
    # Exact, case-sensitive match only: "Sales" or "revenue" fall back to expense.
    if isinstance(value, str) and value in VALID_CATEGORIES:
        return value
    return DEFAULT_CATEGORY.value


def coerce_amount(value: Any) -> float:
    if value is None or isinstance(value, bool):
        return 0.0
    if isinstance(value, (int, float)):
        number = float(value)
    elif isinstance(value, str):
        stripped = value.strip()
        if not stripped:
            return 0.0
        try:
            number = float(stripped)
        except ValueError:
            return 0.0
    else:
        return 0.0
    return number if math.isfinite(number) else 0.0


class TransactionAnalysis(BaseModel):
    """Structured reading of one natural-language transaction."""

    model_config = ConfigDict(use_enum_values=True)

    category: TransactionCategory
    description: str
    amount: float
    party_name: Optional[str] = None


class ModelTransactionAnalysis(TransactionAnalysis):
    """
    Lenient reading of the JSON object a model returns.

    Unknown categories fall back to expense, unusable amounts become 0 and
    missing text fields get empty defaults, so only a payload that is not a
    JSON object at all fails validation.
    """

    category: TransactionCategory = DEFAULT_CATEGORY
    description: str = ""
    amount: float = 0.0

    @field_validator("category", mode="before")
    @classmethod
    def _fallback_category(cls, value: Any) -> str:
        return normalize_category(value)

    @field_validator("description", mode="before")
    @classmethod
    def _description_text(cls, value: Any) -> str:
        if value is None:
            return ""
        return value if isinstance(value, str) else str(value)

    @field_validator("amount", mode="before")
    @classmethod
    def _coerce_amount(cls, value: Any) -> float:
        return coerce_amount(value)

    @field_validator("party_name", mode="before")
    @classmethod
    def _party_text(cls, value: Any) -> Optional[str]:
        if value is None:
            return None
        return value if isinstance(value, str) else str(value)

    def to_analysis(self) -> TransactionAnalysis:
        return TransactionAnalysis.model_validate(self.model_dump())
