import uuid
from datetime import datetime

from sqlalchemy import Column, Date, DateTime, ForeignKey, Integer, Numeric, String, Text
from sqlalchemy.orm import relationship

from database.database import Base


def _new_id() -> str:
    return str(uuid.uuid4())


class Invoice(Base):
    __tablename__ = "invoices"

    id = Column(String(36), primary_key=True, default=_new_id)
    user_id = Column(String, nullable=False, index=True)
    transaction_id = Column(String(36), nullable=True)
    invoice_number = Column(String(32), nullable=False)
    customer_name = Column(String, nullable=False)
    customer_email = Column(String, nullable=True)
    customer_phone = Column(String, nullable=True)
    customer_address = Column(Text, nullable=True)
    invoice_date = Column(Date, nullable=False)
    due_date = Column(Date, nullable=True)
    subtotal = Column(Numeric(14, 2, asdecimal=False), nullable=False, default=0)
    tax_rate = Column(Numeric(5, 2, asdecimal=False), nullable=False, default=0)
    tax_amount = Column(Numeric(14, 2, asdecimal=False), nullable=False, default=0)
    total = Column(Numeric(14, 2, asdecimal=False), nullable=False, default=0)
    notes = Column(Text, nullable=True)
    status = Column(String(16), nullable=False, default="draft")  # draft | sent | paid | cancelled
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow, index=True)
    updated_at = Column(DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow)

    items = relationship(
        "InvoiceItem",
        back_populates="invoice",
        cascade="all, delete-orphan",
        order_by="InvoiceItem.position",
        lazy="selectin",
    )


class InvoiceItem(Base):
    __tablename__ = "invoice_items"

    id = Column(String(36), primary_key=True, default=_new_id)
    invoice_id = Column(String(36), ForeignKey("invoices.id", ondelete="CASCADE"), nullable=False, index=True)
    position = Column(Integer, nullable=False, default=0)
    description = Column(Text, nullable=False)
    quantity = Column(Numeric(12, 2, asdecimal=False), nullable=False, default=1)
    unit_price = Column(Numeric(14, 2, asdecimal=False), nullable=False, default=0)
    amount = Column(Numeric(14, 2, asdecimal=False), nullable=False, default=0)
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)

    invoice = relationship("Invoice", back_populates="items")
