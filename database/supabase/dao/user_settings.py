import logging
from datetime import datetime
from typing import Optional

from sqlalchemy import delete as sa_delete
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from models.user_settings import UserSettings
from schemas.user_settings import UserSettingsUpdate

logger = logging.getLogger(__name__)


class UserSettingsDAO:
    """One settings row per user, created lazily with defaults."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get(self, user_id: str) -> Optional[UserSettings]:
        result = await self.db.execute(
            select(UserSettings).where(UserSettings.user_id == user_id)
        )
        return result.scalar_one_or_none()

    async def get_or_create(self, user_id: str) -> UserSettings:
        existing = await self.get(user_id)
        if existing:
            return existing

        db_settings = UserSettings(user_id=user_id)
        self.db.add(db_settings)
        try:
            await self.db.commit()
            await self.db.refresh(db_settings)
            logger.info(f"Default settings created for user {user_id}")
            return db_settings
        except IntegrityError:
            # Another request created the row first.
            await self.db.rollback()
            existing = await self.get(user_id)
            if existing is None:
                raise
            return existing

    async def upsert(self, user_id: str, obj_in: UserSettingsUpdate) -> UserSettings:
        db_settings = await self.get_or_create(user_id)

        update_data = obj_in.model_dump(exclude_none=True)
        for field, value in update_data.items():
            setattr(db_settings, field, value)
        db_settings.updated_at = datetime.utcnow()

        try:
            await self.db.commit()
            await self.db.refresh(db_settings)
            logger.info(f"Settings updated for user {user_id}")
            return db_settings
        except Exception as e:
            await self.db.rollback()
            logger.error(f"Error updating settings for user {user_id}: {e}")
            raise

    async def activate_premium(
        self, user_id: str, subscription_end: datetime, payment_id: str
    ) -> UserSettings:
        db_settings = await self.get_or_create(user_id)

        db_settings.subscription_plan = "premium"
        db_settings.subscription_end = subscription_end
        db_settings.razorpay_payment_id = payment_id
        db_settings.updated_at = datetime.utcnow()

        try:
            await self.db.commit()
            await self.db.refresh(db_settings)
            logger.info(f"Premium activated for user {user_id} until {subscription_end.isoformat()}")
            return db_settings
        except Exception as e:
            await self.db.rollback()
            logger.error(f"Error activating premium for user {user_id}: {e}")
            raise

    async def delete_for_user(self, user_id: str) -> bool:
        try:
            result = await self.db.execute(
                sa_delete(UserSettings).where(UserSettings.user_id == user_id)
            )
            await self.db.commit()
            return bool(result.rowcount)
        except Exception:
            await self.db.rollback()
            raise
