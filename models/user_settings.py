import uuid
from datetime import datetime

from sqlalchemy import Column, DateTime, String

from database.database import Base
from utils.constants import DEFAULT_CURRENCY, DEFAULT_DATE_FORMAT, DEFAULT_FISCAL_YEAR_START


def _new_id() -> str:
    return str(uuid.uuid4())


class UserSettings(Base):
    __tablename__ = "user_settings"

    id = Column(String(36), primary_key=True, default=_new_id)
    user_id = Column(String, unique=True, nullable=False, index=True)
    currency = Column(String(3), nullable=False, default=DEFAULT_CURRENCY)
    date_format = Column(String(16), nullable=False, default=DEFAULT_DATE_FORMAT)
    fiscal_year_start = Column(String(16), nullable=False, default=DEFAULT_FISCAL_YEAR_START)
    subscription_plan = Column(String(16), nullable=False, default="free")  # free | premium
    subscription_end = Column(DateTime, nullable=True)
    razorpay_payment_id = Column(String, nullable=True)
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)
    updated_at = Column(DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow)
