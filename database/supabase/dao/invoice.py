import logging
from typing import List, Optional

from sqlalchemy import delete as sa_delete
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from database.supabase.dao.base import BaseDAO
from models.invoice import Invoice, InvoiceItem
from schemas.invoice import InvoiceCreate, InvoiceStatusUpdate

logger = logging.getLogger(__name__)


class InvoiceDAO(BaseDAO[Invoice, InvoiceCreate, InvoiceStatusUpdate]):
    model = Invoice

    def __init__(self, db: AsyncSession):
        super().__init__(db)

    async def latest_invoice_number(self, user_id: str) -> Optional[str]:
        result = await self.db.execute(
            select(Invoice.invoice_number)
            .where(Invoice.user_id == user_id)
            .order_by(Invoice.created_at.desc())
            .limit(1)
        )
        return result.scalar_one_or_none()

    async def create(  # type: ignore[override]
        self,
        obj_in: InvoiceCreate,
        *,
        user_id: str,
        invoice_number: str,
        subtotal: float,
        tax_rate: float,
        tax_amount: float,
        total: float,
    ) -> Invoice:
        """Insert an invoice and its line items in a single commit."""
        db_invoice = Invoice(
            user_id=user_id,
            transaction_id=obj_in.transaction_id or None,
            invoice_number=invoice_number,
            customer_name=obj_in.customer_name,
            customer_email=obj_in.customer_email or None,
            customer_phone=obj_in.customer_phone or None,
            customer_address=obj_in.customer_address or None,
            invoice_date=obj_in.invoice_date,
            due_date=obj_in.due_date,
            subtotal=subtotal,
            tax_rate=tax_rate,
            tax_amount=tax_amount,
            total=total,
            notes=obj_in.notes or None,
            status="draft",
            items=[
                InvoiceItem(
                    position=position,
                    description=item.description,
                    quantity=item.quantity,
                    unit_price=item.unit_price,
                    amount=item.amount,
                )
                for position, item in enumerate(obj_in.items)
            ],
        )

        self.db.add(db_invoice)
        try:
            await self.db.commit()
            logger.info(f"Invoice {invoice_number} created for user {user_id}")
        except Exception as e:
            await self.db.rollback()
            logger.error(f"Error creating invoice for user {user_id}: {e}")
            raise

        created = await self.get(user_id, db_invoice.id)
        if created is None:
            raise RuntimeError(f"Invoice {db_invoice.id} vanished after insert")
        return created

    async def get(self, user_id: str, id: str) -> Optional[Invoice]:
        result = await self.db.execute(
            select(Invoice)
            .options(selectinload(Invoice.items))
            .where(Invoice.id == id, Invoice.user_id == user_id)
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def list_for_user(self, user_id: str, status: Optional[str] = None) -> List[Invoice]:
        query = select(Invoice).where(Invoice.user_id == user_id)
        if status and status != "all":
            query = query.where(Invoice.status == status)
        query = query.order_by(Invoice.created_at.desc())

        result = await self.db.execute(query)
        return list(result.scalars().all())

    async def update(self, user_id: str, id: str, obj_in: InvoiceStatusUpdate) -> Optional[Invoice]:
        """Change an invoice's status."""
        db_invoice = await self.get(user_id, id)
        if not db_invoice:
            return None

        db_invoice.status = obj_in.status
        try:
            await self.db.commit()
            logger.info(f"Invoice {id} marked {obj_in.status}")
        except Exception as e:
            await self.db.rollback()
            logger.error(f"Error updating invoice status {id}: {e}")
            raise
        return await self.get(user_id, id)

    async def delete(self, user_id: str, id: str) -> bool:
        db_invoice = await self.get(user_id, id)
        if not db_invoice:
            return False

        try:
            await self.db.delete(db_invoice)
            await self.db.commit()
            logger.info(f"Invoice {id} deleted for user {user_id}")
            return True
        except Exception as e:
            await self.db.rollback()
            logger.error(f"Error deleting invoice {id}: {e}")
            raise

    async def delete_all_for_user(self, user_id: str) -> int:
        owned_ids = select(Invoice.id).where(Invoice.user_id == user_id).scalar_subquery()
        try:
            await self.db.execute(sa_delete(InvoiceItem).where(InvoiceItem.invoice_id.in_(owned_ids)))
            result = await self.db.execute(sa_delete(Invoice).where(Invoice.user_id == user_id))
            await self.db.commit()
            return result.rowcount or 0
        except Exception:
            await self.db.rollback()
            raise
