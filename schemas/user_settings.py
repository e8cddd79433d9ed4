from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, field_validator

SUPPORTED_CURRENCIES = {
    "INR": "₹",
    "USD": "$",
    "EUR": "€",
    "GBP": "£",
    "JPY": "¥",
    "AUD": "A$",
    "CAD": "C$",
    "CHF": "CHF",
    "CNY": "¥",
    "AED": "د.إ",
    "SGD": "S$",
}
SUPPORTED_DATE_FORMATS = ("DD/MM/YYYY", "MM/DD/YYYY", "YYYY-MM-DD")
SUPPORTED_FISCAL_YEAR_STARTS = ("April", "January")


class UserSettingsUpdate(BaseModel):
    currency: str
    date_format: Optional[str] = None
    fiscal_year_start: Optional[str] = None

    @field_validator("currency")
    @classmethod
    def _known_currency(cls, value: str) -> str:
        code = value.upper()
        if code not in SUPPORTED_CURRENCIES:
            raise ValueError(f"Unsupported currency: {value}")
        return code

    @field_validator("date_format")
    @classmethod
    def _known_date_format(cls, value: Optional[str]) -> Optional[str]:
        if value is not None and value not in SUPPORTED_DATE_FORMATS:
            raise ValueError(f"Unsupported date format: {value}")
        return value

    @field_validator("fiscal_year_start")
    @classmethod
    def _known_fiscal_year(cls, value: Optional[str]) -> Optional[str]:
        if value is not None and value not in SUPPORTED_FISCAL_YEAR_STARTS:
            raise ValueError(f"Unsupported fiscal year start: {value}")
        return value


class UserSettingsResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    user_id: str
    currency: str
    date_format: str
    fiscal_year_start: str
    subscription_plan: str
    subscription_end: Optional[datetime]
    created_at: datetime
    updated_at: datetime


class PremiumStatusResponse(BaseModel):
    is_premium: bool
    subscription_end: Optional[datetime] = None
