import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from business.invoice import compute_totals, next_invoice_number
from database.database import get_db
from database.supabase.dao.invoice import InvoiceDAO
from database.supabase.dao.transaction import TransactionDAO
from models.auth_user import AuthUser
from routers.transactions import get_transaction_dao
from schemas.invoice import (
    InvoiceCreate,
    InvoiceDetailResponse,
    InvoiceListResponse,
    InvoiceNumberResponse,
    InvoiceResponse,
    InvoiceStatusUpdate,
    InvoiceTransactionResponse,
)
from utils.middlewares.auth_user import get_current_user

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/invoices", tags=["Invoices"])


def get_invoice_dao(db: AsyncSession = Depends(get_db)) -> InvoiceDAO:
    return InvoiceDAO(db)


@router.get("/next-number", response_model=InvoiceNumberResponse)
async def get_next_invoice_number(
    current_user: AuthUser = Depends(get_current_user),
    invoice_dao: InvoiceDAO = Depends(get_invoice_dao),
) -> InvoiceNumberResponse:
    latest = await invoice_dao.latest_invoice_number(current_user.id)
    return InvoiceNumberResponse(invoice_number=next_invoice_number(latest))


@router.get("/transactions/{transaction_id}", response_model=InvoiceTransactionResponse)
async def get_transaction_for_invoice(
    transaction_id: str,
    current_user: AuthUser = Depends(get_current_user),
    transaction_dao: TransactionDAO = Depends(get_transaction_dao),
) -> InvoiceTransactionResponse:
    """Details of a sales transaction, used to prefill a new invoice."""
    txn = await transaction_dao.get_sales_transaction(current_user.id, transaction_id)
    if txn is None:
        raise HTTPException(status_code=404, detail="Transaction not found")
    return InvoiceTransactionResponse.model_validate(txn)


@router.post("", response_model=InvoiceDetailResponse, status_code=status.HTTP_201_CREATED)
async def create_invoice(
    payload: InvoiceCreate,
    current_user: AuthUser = Depends(get_current_user),
    invoice_dao: InvoiceDAO = Depends(get_invoice_dao),
) -> InvoiceDetailResponse:
    latest = await invoice_dao.latest_invoice_number(current_user.id)
    invoice_number = next_invoice_number(latest)
    totals = compute_totals(payload.items, payload.tax_rate)

    try:
        invoice = await invoice_dao.create(
            payload,
            user_id=current_user.id,
            invoice_number=invoice_number,
            subtotal=totals.subtotal,
            tax_rate=totals.tax_rate,
            tax_amount=totals.tax_amount,
            total=totals.total,
        )
    except Exception as e:
        logger.error(f"Create invoice error: {e}")
        raise HTTPException(status_code=500, detail="Failed to create invoice")
    return InvoiceDetailResponse.model_validate(invoice)


@router.get("", response_model=InvoiceListResponse)
async def list_invoices(
    status_filter: Optional[str] = Query(None, alias="status", description="draft, sent, paid, cancelled or all"),
    current_user: AuthUser = Depends(get_current_user),
    invoice_dao: InvoiceDAO = Depends(get_invoice_dao),
) -> InvoiceListResponse:
    invoices = await invoice_dao.list_for_user(current_user.id, status_filter)
    return InvoiceListResponse(invoices=[InvoiceResponse.model_validate(inv) for inv in invoices])


@router.get("/{invoice_id}", response_model=InvoiceDetailResponse)
async def get_invoice(
    invoice_id: str,
    current_user: AuthUser = Depends(get_current_user),
    invoice_dao: InvoiceDAO = Depends(get_invoice_dao),
) -> InvoiceDetailResponse:
    invoice = await invoice_dao.get(current_user.id, invoice_id)
    if invoice is None:
        raise HTTPException(status_code=404, detail="Invoice not found")
    return InvoiceDetailResponse.model_validate(invoice)


@router.patch("/{invoice_id}/status", response_model=InvoiceResponse)
async def update_invoice_status(
    invoice_id: str,
    payload: InvoiceStatusUpdate,
    current_user: AuthUser = Depends(get_current_user),
    invoice_dao: InvoiceDAO = Depends(get_invoice_dao),
) -> InvoiceResponse:
    try:
        invoice = await invoice_dao.update(current_user.id, invoice_id, payload)
    except Exception as e:
        logger.error(f"Update invoice status error: {e}")
        raise HTTPException(status_code=500, detail="Failed to update invoice status")
    if invoice is None:
        raise HTTPException(status_code=404, detail="Invoice not found")
    return InvoiceResponse.model_validate(invoice)


@router.delete("/{invoice_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_invoice(
    invoice_id: str,
    current_user: AuthUser = Depends(get_current_user),
    invoice_dao: InvoiceDAO = Depends(get_invoice_dao),
) -> None:
    try:
        deleted = await invoice_dao.delete(current_user.id, invoice_id)
    except Exception as e:
        logger.error(f"Delete invoice error: {e}")
        raise HTTPException(status_code=500, detail="Failed to delete invoice")
    if not deleted:
        raise HTTPException(status_code=404, detail="Invoice not found")
