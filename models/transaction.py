import uuid
from datetime import datetime

from sqlalchemy import Column, DateTime, Numeric, String, Text

from database.database import Base


def _new_id() -> str:
    return str(uuid.uuid4())


class Transaction(Base):
    __tablename__ = "transactions"

    id = Column(String(36), primary_key=True, default=_new_id)
    user_id = Column(String, nullable=False, index=True)
    category = Column(String(16), nullable=False, index=True)  # 'sales' | 'purchase' | 'expense' | 'income'
    description = Column(Text, nullable=False, default="")
    amount = Column(Numeric(14, 2, asdecimal=False), nullable=False, default=0)
    original_prompt = Column(Text, nullable=False, default="")
    party_name = Column(String, nullable=True)
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow, index=True)
