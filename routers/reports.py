import logging
from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from business.report import build_report, period_bounds, resolve_period
from database.supabase.dao.transaction import TransactionDAO
from models.auth_user import AuthUser
from routers.transactions import get_transaction_dao
from schemas.report import ReportResponse
from utils.middlewares.auth_user import get_current_user

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/reports", tags=["Reports"])


@router.get("", response_model=ReportResponse)
async def get_report(
    start_date: Optional[date] = Query(None, description="Start date (YYYY-MM-DD), defaults to first of this month"),
    end_date: Optional[date] = Query(None, description="End date (YYYY-MM-DD), defaults to end of this month"),
    current_user: AuthUser = Depends(get_current_user),
    transaction_dao: TransactionDAO = Depends(get_transaction_dao),
) -> ReportResponse:
    """Profit & loss report for the requested period."""
    start, end = resolve_period(start_date, end_date, date.today())
    if start > end:
        raise HTTPException(status_code=400, detail="start_date must not be after end_date")

    lower, upper = period_bounds(start, end)
    transactions = await transaction_dao.list_in_range(current_user.id, lower, upper)
    logger.info(
        "Building report for user %s over %s..%s (%s transactions)",
        current_user.id,
        start,
        end,
        len(transactions),
    )
    return build_report(transactions, start, end)
