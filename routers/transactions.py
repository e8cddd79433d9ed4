import logging
from typing import Callable, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from fastapi.concurrency import run_in_threadpool
from sqlalchemy.ext.asyncio import AsyncSession

from business.transaction import build_summary, build_transaction_create, to_naive_utc
from business.transaction_classification.models import TransactionAnalysis
from business.transaction_classification.service import ClassificationError, classify_transaction
from database.database import get_db
from database.supabase.dao.transaction import TransactionDAO
from integrations.gemini import GeminiConfigurationError
from models.auth_user import AuthUser
from schemas.transaction import (
    AnalyzeTransactionRequest,
    AnalyzeTransactionResponse,
    SaveTransactionRequest,
    TransactionResponse,
    TransactionSummaryResponse,
    TransactionUpdate,
    UserTransactionsResponse,
)
from utils.middlewares.auth_user import get_current_user

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/transactions", tags=["Transactions"])

Classifier = Callable[[str], TransactionAnalysis]


def get_transaction_dao(db: AsyncSession = Depends(get_db)) -> TransactionDAO:
    return TransactionDAO(db)


def get_classifier() -> Classifier:
    return classify_transaction


async def _classify(classifier: Classifier, prompt: str) -> TransactionAnalysis:
    """Run the blocking classifier off the event loop and map its failures to HTTP errors."""
    try:
        return await run_in_threadpool(classifier, prompt)
    except GeminiConfigurationError as e:
        logger.error(f"Gemini configuration error: {e}")
        raise HTTPException(status_code=500, detail=str(e))
    except ClassificationError as e:
        logger.error(f"Transaction classification failed: {e}")
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(e))


@router.post("/analyze", response_model=AnalyzeTransactionResponse)
async def analyze_transaction(
    payload: AnalyzeTransactionRequest,
    current_user: AuthUser = Depends(get_current_user),
    classifier: Classifier = Depends(get_classifier),
) -> AnalyzeTransactionResponse:
    """Classify a description without saving it, so the user can review the result."""
    logger.info(f"Analyzing transaction for user {current_user.id}")
    analysis = await _classify(classifier, payload.prompt)
    return AnalyzeTransactionResponse(analysis=analysis)


@router.post("", response_model=TransactionResponse, status_code=status.HTTP_201_CREATED)
async def save_transaction(
    payload: SaveTransactionRequest,
    current_user: AuthUser = Depends(get_current_user),
    transaction_dao: TransactionDAO = Depends(get_transaction_dao),
) -> TransactionResponse:
    """Save a reviewed analysis, optionally back-dated."""
    obj_in = build_transaction_create(
        current_user.id, payload.prompt, payload.analysis, payload.custom_date
    )
    try:
        db_txn = await transaction_dao.create(obj_in)
    except Exception as e:
        logger.error(f"Save transaction error: {e}")
        raise HTTPException(status_code=500, detail="Failed to save transaction. Please try again.")
    return TransactionResponse.model_validate(db_txn)


@router.post("/quick", response_model=TransactionResponse, status_code=status.HTTP_201_CREATED)
async def create_transaction(
    payload: AnalyzeTransactionRequest,
    current_user: AuthUser = Depends(get_current_user),
    transaction_dao: TransactionDAO = Depends(get_transaction_dao),
    classifier: Classifier = Depends(get_classifier),
) -> TransactionResponse:
    """Classify and save in one step."""
    analysis = await _classify(classifier, payload.prompt)
    obj_in = build_transaction_create(current_user.id, payload.prompt, analysis)
    try:
        db_txn = await transaction_dao.create(obj_in)
    except Exception as e:
        logger.error(f"Create transaction error: {e}")
        raise HTTPException(status_code=500, detail="Failed to save transaction. Please try again.")
    return TransactionResponse.model_validate(db_txn)


@router.get("", response_model=UserTransactionsResponse)
async def list_transactions(
    category: Optional[str] = Query(None, description="sales, purchase, expense, income or all"),
    current_user: AuthUser = Depends(get_current_user),
    transaction_dao: TransactionDAO = Depends(get_transaction_dao),
) -> UserTransactionsResponse:
    """Return the user's transactions, newest first."""
    transactions = await transaction_dao.list_for_user(current_user.id, category)
    logger.info("Fetched %s transactions for user %s", len(transactions), current_user.id)
    return UserTransactionsResponse(
        transactions=[TransactionResponse.model_validate(txn) for txn in transactions]
    )


@router.get("/summary", response_model=TransactionSummaryResponse)
async def get_transaction_summary(
    current_user: AuthUser = Depends(get_current_user),
    transaction_dao: TransactionDAO = Depends(get_transaction_dao),
) -> TransactionSummaryResponse:
    """All-time totals per category."""
    totals = await transaction_dao.totals_by_category(current_user.id)
    return build_summary(totals)


@router.put("/{transaction_id}", response_model=TransactionResponse)
async def update_transaction(
    transaction_id: str,
    payload: TransactionUpdate,
    current_user: AuthUser = Depends(get_current_user),
    transaction_dao: TransactionDAO = Depends(get_transaction_dao),
) -> TransactionResponse:
    if payload.created_at is not None:
        payload = payload.model_copy(update={"created_at": to_naive_utc(payload.created_at)})
    try:
        db_txn = await transaction_dao.update(current_user.id, transaction_id, payload)
    except Exception as e:
        logger.error(f"Update transaction error: {e}")
        raise HTTPException(status_code=500, detail="Failed to update transaction")
    if db_txn is None:
        raise HTTPException(status_code=404, detail="Transaction not found")
    return TransactionResponse.model_validate(db_txn)


@router.delete("/{transaction_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_transaction(
    transaction_id: str,
    current_user: AuthUser = Depends(get_current_user),
    transaction_dao: TransactionDAO = Depends(get_transaction_dao),
) -> None:
    try:
        deleted = await transaction_dao.delete(current_user.id, transaction_id)
    except Exception as e:
        logger.error(f"Delete transaction error: {e}")
        raise HTTPException(status_code=500, detail="Failed to delete transaction")
    if not deleted:
        raise HTTPException(status_code=404, detail="Transaction not found")
