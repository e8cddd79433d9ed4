from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from business.transaction_classification.models import TransactionAnalysis, TransactionCategory


class AnalyzeTransactionRequest(BaseModel):
    prompt: str = Field(..., min_length=1)

    @field_validator("prompt")
    @classmethod
    def _not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("prompt must not be blank")
        return value


class AnalyzeTransactionResponse(BaseModel):
    analysis: TransactionAnalysis


class SaveTransactionRequest(BaseModel):
    prompt: str
    analysis: TransactionAnalysis
    custom_date: Optional[datetime] = None


class TransactionCreate(BaseModel):
    model_config = ConfigDict(use_enum_values=True)

    user_id: str
    category: TransactionCategory
    description: str
    amount: float
    original_prompt: str
    party_name: Optional[str] = None
    created_at: Optional[datetime] = None


class TransactionUpdate(BaseModel):
    model_config = ConfigDict(use_enum_values=True)

    category: TransactionCategory
    description: str
    amount: float
    party_name: Optional[str] = None
    created_at: Optional[datetime] = None


class TransactionResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    user_id: str
    category: str
    description: str
    amount: float
    original_prompt: str
    party_name: Optional[str]
    created_at: datetime


class UserTransactionsResponse(BaseModel):
    transactions: List[TransactionResponse]


class TransactionSummaryResponse(BaseModel):
    sales: float = 0.0
    purchase: float = 0.0
    expense: float = 0.0
    income: float = 0.0
