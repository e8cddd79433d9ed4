import logging

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from database.database import get_db
from database.supabase.dao.user_settings import UserSettingsDAO
from models.auth_user import AuthUser
from schemas.user_settings import PremiumStatusResponse, UserSettingsResponse, UserSettingsUpdate
from utils.middlewares.auth_user import get_current_user

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/settings", tags=["Settings"])


def get_settings_dao(db: AsyncSession = Depends(get_db)) -> UserSettingsDAO:
    return UserSettingsDAO(db)


@router.get("", response_model=UserSettingsResponse)
async def get_user_settings(
    current_user: AuthUser = Depends(get_current_user),
    settings_dao: UserSettingsDAO = Depends(get_settings_dao),
) -> UserSettingsResponse:
    """Return the user's settings, creating the defaults on first access."""
    try:
        settings = await settings_dao.get_or_create(current_user.id)
    except Exception as e:
        logger.error(f"Get settings error: {e}")
        raise HTTPException(status_code=500, detail="Failed to get settings")
    return UserSettingsResponse.model_validate(settings)


@router.put("", response_model=UserSettingsResponse)
async def update_user_settings(
    payload: UserSettingsUpdate,
    current_user: AuthUser = Depends(get_current_user),
    settings_dao: UserSettingsDAO = Depends(get_settings_dao),
) -> UserSettingsResponse:
    try:
        settings = await settings_dao.upsert(current_user.id, payload)
    except Exception as e:
        logger.error(f"Update settings error: {e}")
        raise HTTPException(status_code=500, detail="Failed to update settings")
    return UserSettingsResponse.model_validate(settings)


@router.get("/premium", response_model=PremiumStatusResponse)
async def get_premium_status(
    current_user: AuthUser = Depends(get_current_user),
    settings_dao: UserSettingsDAO = Depends(get_settings_dao),
) -> PremiumStatusResponse:
    settings = await settings_dao.get(current_user.id)
    if settings is None:
        return PremiumStatusResponse(is_premium=False)
    return PremiumStatusResponse(
        is_premium=settings.subscription_plan == "premium",
        subscription_end=settings.subscription_end,
    )
