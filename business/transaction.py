import logging
from datetime import datetime, timezone
from typing import Dict, Optional

from business.transaction_classification.models import TransactionAnalysis, TransactionCategory
from schemas.transaction import TransactionCreate, TransactionSummaryResponse

logger = logging.getLogger(__name__)


def to_naive_utc(value: datetime) -> datetime:
    """Timestamps are stored as naive UTC. Aware values are converted, naive ones kept."""
    if value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)


def build_transaction_create(
    user_id: str,
    prompt: str,
    analysis: TransactionAnalysis,
    custom_date: Optional[datetime] = None,
) -> TransactionCreate:
    """Map a reviewed analysis onto a row for the given user."""
    return TransactionCreate(
        user_id=user_id,
        category=analysis.category,
        description=analysis.description,
        amount=analysis.amount,
        original_prompt=prompt,
        party_name=analysis.party_name,
        created_at=to_naive_utc(custom_date) if custom_date else None,
    )


def build_summary(totals: Dict[str, float]) -> TransactionSummaryResponse:
    """Fill all four category totals, ignoring any category outside the closed set."""
    summary = {category.value: 0.0 for category in TransactionCategory}
    for category, amount in totals.items():
        if category in summary:
            summary[category] += float(amount)
        else:
            logger.warning(f"Ignoring unknown category '{category}' in summary")
    return TransactionSummaryResponse(**summary)
