import logging

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from database.database import get_db
from database.supabase.dao.invoice import InvoiceDAO
from database.supabase.dao.transaction import TransactionDAO
from database.supabase.dao.user_settings import UserSettingsDAO
from models.auth_user import AuthUser
from utils.middlewares.auth_user import get_current_user

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/account", tags=["Account"])


@router.delete("", status_code=status.HTTP_204_NO_CONTENT)
async def delete_account_data(
    current_user: AuthUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> None:
    """
    Delete everything the user owns: transactions, invoices and settings.

    Removing the auth identity itself is left to the identity provider.
    """
    try:
        removed_txns = await TransactionDAO(db).delete_all_for_user(current_user.id)
        removed_invoices = await InvoiceDAO(db).delete_all_for_user(current_user.id)
    except Exception as e:
        logger.error(f"Delete account data error for user {current_user.id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to delete transactions")

    try:
        await UserSettingsDAO(db).delete_for_user(current_user.id)
    except Exception as e:
        # Settings are not critical; the rest of the data is already gone.
        logger.error(f"Delete settings error for user {current_user.id}: {e}")

    logger.info(
        f"Deleted account data for user {current_user.id}: "
        f"{removed_txns} transactions, {removed_invoices} invoices"
    )
