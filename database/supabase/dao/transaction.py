import logging
from datetime import datetime
from typing import Dict, List, Optional

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from database.supabase.dao.base import BaseDAO
from models.transaction import Transaction
from schemas.transaction import TransactionCreate, TransactionUpdate

logger = logging.getLogger(__name__)


class TransactionDAO(BaseDAO[Transaction, TransactionCreate, TransactionUpdate]):
    model = Transaction

    def __init__(self, db: AsyncSession):
        super().__init__(db)

    async def create(self, obj_in: TransactionCreate) -> Transaction:
        """Persist one transaction. created_at defaults to now when not given."""
        data = obj_in.model_dump()
        if data.get("created_at") is None:
            data.pop("created_at", None)
        db_txn = Transaction(**data)

        self.db.add(db_txn)
        try:
            await self.db.commit()
            await self.db.refresh(db_txn)
            logger.info(f"Transaction {db_txn.id} created for user {obj_in.user_id}")
            return db_txn
        except Exception as e:
            await self.db.rollback()
            logger.error(f"Error creating transaction for user {obj_in.user_id}: {e}")
            raise

    async def get(self, user_id: str, id: str) -> Optional[Transaction]:
        result = await self.db.execute(
            select(Transaction).where(Transaction.id == id, Transaction.user_id == user_id)
        )
        return result.scalar_one_or_none()

    async def get_sales_transaction(self, user_id: str, id: str) -> Optional[Transaction]:
        """Get a sales transaction owned by the user (used to prefill invoices)."""
        result = await self.db.execute(
            select(Transaction).where(
                Transaction.id == id,
                Transaction.user_id == user_id,
                Transaction.category == "sales",
            )
        )
        return result.scalar_one_or_none()

    async def list_for_user(self, user_id: str, category: Optional[str] = None) -> List[Transaction]:
        """List the user's transactions, newest first, optionally for one category."""
        query = select(Transaction).where(Transaction.user_id == user_id)
        if category and category != "all":
            query = query.where(Transaction.category == category)
        query = query.order_by(Transaction.created_at.desc())

        result = await self.db.execute(query)
        return list(result.scalars().all())

    async def list_in_range(self, user_id: str, start: datetime, end: datetime) -> List[Transaction]:
        """Transactions with start <= created_at <= end, newest first."""
        result = await self.db.execute(
            select(Transaction)
            .where(
                Transaction.user_id == user_id,
                Transaction.created_at >= start,
                Transaction.created_at <= end,
            )
            .order_by(Transaction.created_at.desc())
        )
        return list(result.scalars().all())

    async def totals_by_category(self, user_id: str) -> Dict[str, float]:
        result = await self.db.execute(
            select(Transaction.category, func.sum(Transaction.amount))
            .where(Transaction.user_id == user_id)
            .group_by(Transaction.category)
        )
        return {category: float(total or 0) for category, total in result.all()}

    async def update(self, user_id: str, id: str, obj_in: TransactionUpdate) -> Optional[Transaction]:
        db_txn = await self.get(user_id, id)
        if not db_txn:
            return None

        db_txn.category = obj_in.category
        db_txn.description = obj_in.description
        db_txn.amount = obj_in.amount
        db_txn.party_name = obj_in.party_name or None
        if obj_in.created_at is not None:
            db_txn.created_at = obj_in.created_at

        try:
            await self.db.commit()
            await self.db.refresh(db_txn)
            logger.info(f"Transaction {id} updated for user {user_id}")
            return db_txn
        except Exception as e:
            await self.db.rollback()
            logger.error(f"Error updating transaction {id}: {e}")
            raise

    async def delete(self, user_id: str, id: str) -> bool:
        db_txn = await self.get(user_id, id)
        if not db_txn:
            return False

        try:
            await self.db.delete(db_txn)
            await self.db.commit()
            logger.info(f"Transaction {id} deleted for user {user_id}")
            return True
        except Exception as e:
            await self.db.rollback()
            logger.error(f"Error deleting transaction {id}: {e}")
            raise
